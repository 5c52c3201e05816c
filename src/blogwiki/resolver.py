"""Batch resolution of wiki-link slugs to article titles and URLs."""

from __future__ import annotations

import logging
from typing import Iterable

from .config import ARTICLE_URL_TEMPLATE
from .models import Language, ResolvedTarget
from .store import ArticleStore

log = logging.getLogger(__name__)


def build_article_url(slug: str, language: Language) -> str:
    """Return the reader-facing URL of an article."""
    return ARTICLE_URL_TEMPLATE.format(language=language, slug=slug)


def resolve_targets(
    store: ArticleStore,
    slugs: Iterable[str],
    language: Language,
) -> dict[str, ResolvedTarget]:
    """Resolve slugs to link targets with a single store lookup.

    Only published articles with a title in ``language`` resolve. Missing,
    draft and archived articles all come back with ``title=None`` so the
    caller cannot tell them apart.

    Args:
        store: Article store to query.
        slugs: Slugs to resolve; duplicates are ignored.
        language: Translation to use for titles and URLs.

    Returns:
        Dict with one entry per distinct slug, in request order.
    """
    requested = list(dict.fromkeys(slugs))
    if not requested:
        return {}

    rows = {row.slug: row for row in store.fetch_link_targets(requested, language)}

    targets: dict[str, ResolvedTarget] = {}
    for slug in requested:
        row = rows.get(slug)
        title = row.title if row is not None and row.status == "published" else None
        targets[slug] = ResolvedTarget(
            slug=slug,
            title=title or None,
            url=build_article_url(slug, language),
        )

    log.debug(
        "Resolved %d of %d slugs (%s)",
        sum(1 for target in targets.values() if target.title),
        len(requested),
        language,
    )
    return targets
