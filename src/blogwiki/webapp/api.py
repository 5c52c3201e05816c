"""REST API for the blog editor and reader."""

import logging
import os
from typing import Literal

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .._logging import configure_logging
from ..config import (
    DEFAULT_LANGUAGE,
    DEFAULT_SUGGESTION_LIMIT,
    MAX_SUGGESTION_LIMIT,
    TOC_MAX_LEVEL,
)
from ..converter import convert_references
from ..models import NestedHeading, SuggestionsResponse
from ..parser import extract_headings, nest_headings
from ..store import ArticleStore, SQLiteArticleStore, StorageError
from ..suggestions import get_suggestions

log = logging.getLogger(__name__)

app = FastAPI(
    title="blogwiki",
    description="Wiki-link resolution and authoring suggestions",
    version="0.1.0",
)

# Lazy-initialized store
_store: ArticleStore | None = None


def _get_store() -> ArticleStore:
    """Get the article store, initializing lazily."""
    global _store
    if _store is None:
        _store = SQLiteArticleStore()
    return _store


def set_store(store: ArticleStore | None) -> None:
    """Replace the article store; None restores lazy initialization."""
    global _store
    _store = store


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    log.exception("Storage failure on %s", request.url.path, exc_info=exc)
    return _error(500, "DATABASE_ERROR", "Failed to read articles")


class ArticleResponse(BaseModel):
    """Published article with wiki references converted."""

    slug: str
    language: str
    title: str
    content: str
    headings: list[NestedHeading]


@app.get("/api/articles/suggestions", response_model=SuggestionsResponse)
def suggestions(
    q: str = Query(..., description="Substring to match; empty matches everything"),
    lang: Literal["ja", "en"] = Query(default=DEFAULT_LANGUAGE),
    limit: int = Query(default=DEFAULT_SUGGESTION_LIMIT, ge=1, le=MAX_SUGGESTION_LIMIT),
    target_slug: str | None = Query(default=None, alias="targetSlug"),
):
    """Suggest article titles and headings for the wiki-link autocomplete."""
    items = get_suggestions(_get_store(), q, lang, limit, target_slug=target_slug)
    return SuggestionsResponse(suggestions=items, from_cache=False)


@app.get("/api/articles/{slug}", response_model=ArticleResponse)
def get_article(
    slug: str,
    lang: Literal["ja", "en"] = Query(default=DEFAULT_LANGUAGE),
):
    """Return a published article with its wiki references converted."""
    store = _get_store()
    article = store.get_published_article(slug, lang)
    if article is None:
        return _error(404, "NOT_FOUND", f"Article not found: {slug}")

    return ArticleResponse(
        slug=article.slug,
        language=lang,
        title=article.title,
        content=convert_references(store, article.content, lang),
        headings=nest_headings(extract_headings(article.content, TOC_MAX_LEVEL)),
    )


def main():
    """Run the API server."""
    import uvicorn

    configure_logging()

    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "8080"))

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
