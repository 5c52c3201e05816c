"""Pydantic models for wiki-link resolution and suggestions."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

Language = Literal["ja", "en"]

ArticleStatus = Literal["draft", "published", "archived"]


class WikiReference(BaseModel):
    """One [[slug]] occurrence found in Markdown."""

    raw_token: str  # Token exactly as written, e.g. "[[intro-guide]]"
    slug: str


class ResolvedTarget(BaseModel):
    """Outcome of resolving a slug for one language.

    ``title`` is only set when the article exists and is published; missing
    and hidden articles look the same.
    """

    slug: str
    title: str | None = None
    url: str


class Heading(BaseModel):
    """An ATX heading extracted from Markdown."""

    level: int = Field(ge=1, le=6)
    text: str
    id: str  # Anchor id, not unique within a document


class NestedHeading(Heading):
    """A heading with the headings nested beneath it."""

    children: list["NestedHeading"] = Field(default_factory=list)


class ArticleSuggestion(BaseModel):
    """An article whose title matched the query."""

    type: Literal["article"] = "article"
    slug: str
    title: str


class HeadingSuggestion(BaseModel):
    """A heading inside an article that matched the query."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["heading"] = "heading"
    slug: str
    title: str  # Heading text
    heading_level: int = Field(ge=1, le=6, alias="headingLevel")
    heading_id: str = Field(alias="headingId")
    article_title: str = Field(alias="articleTitle")


SuggestionItem = Annotated[ArticleSuggestion | HeadingSuggestion, Field(discriminator="type")]


class SuggestionsResponse(BaseModel):
    """Response wrapper for the suggestion endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    suggestions: list[SuggestionItem]
    from_cache: bool = Field(default=False, alias="fromCache")  # No cache exists; always False


class LinkTargetRow(BaseModel):
    """One row of the batch link-target query.

    ``title`` is None when the article has no translation in the requested
    language.
    """

    slug: str
    status: ArticleStatus
    title: str | None = None


class ArticleRecord(BaseModel):
    """A published article in one language."""

    slug: str
    status: ArticleStatus
    title: str
    content: str = ""


class ArticleFrontmatter(BaseModel):
    """Frontmatter of an importable Markdown article."""

    slug: str = Field(pattern=r"^[a-z0-9_-]+$")
    title: str = Field(min_length=1, max_length=200)
    status: ArticleStatus = "draft"
    language: Language = "ja"


class ImportFailure(BaseModel):
    """A content file that could not be imported."""

    path: str
    message: str


class ImportResult(BaseModel):
    """Summary of a directory import."""

    imported: int = 0  # Translations written
    articles: list[str] = Field(default_factory=list)  # Slugs touched, first-seen order
    errors: list[ImportFailure] = Field(default_factory=list)
