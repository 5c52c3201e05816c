"""Autocomplete suggestions for wiki references.

The editor asks for suggestions while the author types after ``[[``. Two
modes exist:

- Scoped: a target article is known (the author typed ``[[slug#``), so only
  that article's headings are offered.
- Unscoped: article titles are matched first, then headings of a bounded
  set of published articles fill the remaining slots.

Results are deterministic for identical store contents; there is no
relevance scoring and no deduplication between the two passes.
"""

from __future__ import annotations

import logging

from .config import SUGGESTION_HEADING_MAX_LEVEL, SUGGESTION_SCAN_LIMIT
from .models import (
    ArticleRecord,
    ArticleSuggestion,
    HeadingSuggestion,
    Language,
    SuggestionItem,
)
from .parser.headings import extract_headings
from .store import ArticleStore

log = logging.getLogger(__name__)


def _heading_matches(
    article: ArticleRecord,
    needle: str,
    max_level: int,
) -> list[HeadingSuggestion]:
    return [
        HeadingSuggestion(
            slug=article.slug,
            title=heading.text,
            heading_level=heading.level,
            heading_id=heading.id,
            article_title=article.title,
        )
        for heading in extract_headings(article.content, max_level)
        if needle in heading.text.lower()
    ]


def get_suggestions(
    store: ArticleStore,
    query: str,
    language: Language,
    limit: int,
    target_slug: str | None = None,
) -> list[SuggestionItem]:
    """Suggest articles and headings matching a query.

    Args:
        store: Article store to read from.
        query: Case-insensitive substring to match; empty matches everything.
        language: Translation to search.
        limit: Maximum number of suggestions (must be positive).
        target_slug: Restrict suggestions to headings of this article.

    Returns:
        At most ``limit`` suggestions; article matches precede heading matches.
    """
    needle = query.lower()

    if target_slug:
        return _scoped_suggestions(store, needle, language, limit, target_slug)

    suggestions: list[SuggestionItem] = [
        ArticleSuggestion(slug=article.slug, title=article.title)
        for article in store.search_published_titles(query, language, limit)
        if article.title
    ]

    if len(suggestions) < limit:
        for article in store.list_published_articles(language, SUGGESTION_SCAN_LIMIT):
            if not article.title or not article.content:
                continue
            suggestions.extend(_heading_matches(article, needle, SUGGESTION_HEADING_MAX_LEVEL))
            if len(suggestions) >= limit:
                break

    log.debug("Suggestions for %r (%s): %d", query, language, len(suggestions[:limit]))
    return suggestions[:limit]


def _scoped_suggestions(
    store: ArticleStore,
    needle: str,
    language: Language,
    limit: int,
    target_slug: str,
) -> list[SuggestionItem]:
    article = store.get_published_article(target_slug, language)
    if article is None or not article.content:
        return []

    return list(_heading_matches(article, needle, max_level=6)[:limit])
