"""Rewrite [[slug]] references into Markdown links."""

from __future__ import annotations

import logging
import re

from .models import Language
from .parser.links import WIKI_LINK_PATTERN, extract_references
from .resolver import resolve_targets
from .store import ArticleStore

log = logging.getLogger(__name__)

_LINK_TEXT_SPECIALS = re.compile(r"([\\\[\]])")


def _escape_link_text(title: str) -> str:
    # Escaped brackets also keep a title like "[[x]]" from forming a new reference.
    return _LINK_TEXT_SPECIALS.sub(r"\\\1", title)


def convert_references(store: ArticleStore, content: str, language: Language) -> str:
    """Convert wiki references in markdown content into Markdown links.

    ``[[slug]]`` becomes ``[Title](/{language}/blog/{slug})`` when the
    article is published; otherwise the token is left exactly as written.
    Content without references is returned unchanged without touching the
    store. Converting already converted content is a no-op.

    Args:
        store: Article store used to resolve slugs.
        content: Markdown content.
        language: Language of titles and URLs.

    Returns:
        Converted Markdown content.
    """
    slugs = extract_references(content)
    if not slugs:
        return content

    targets = resolve_targets(store, slugs, language)
    replacements = {
        slug: f"[{_escape_link_text(target.title)}]({target.url})"
        for slug, target in targets.items()
        if target.title
    }
    log.debug("Converting %d of %d wiki references", len(replacements), len(slugs))

    if not replacements:
        return content

    def replace(match: re.Match[str]) -> str:
        return replacements.get(match.group(1), match.group(0))

    return WIKI_LINK_PATTERN.sub(replace, content)
