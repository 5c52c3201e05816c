"""Wiki-link extraction."""

import re
from typing import Iterator

from ..models import WikiReference

# Pattern for [[slug]] syntax. Only lowercase ASCII letters, digits, hyphens
# and underscores are valid; anything else is left as plain text.
WIKI_LINK_PATTERN = re.compile(r"\[\[([a-z0-9_-]+)\]\]")


def iter_references(content: str) -> Iterator[WikiReference]:
    """Yield every wiki reference in order of appearance, duplicates included."""
    for match in WIKI_LINK_PATTERN.finditer(content):
        yield WikiReference(raw_token=match.group(0), slug=match.group(1))


def extract_references(content: str) -> list[str]:
    """Extract wiki-link slugs from markdown content.

    Args:
        content: Markdown content to extract links from.

    Returns:
        List of unique slugs in first-seen order.
    """
    seen: set[str] = set()
    slugs: list[str] = []

    for slug in WIKI_LINK_PATTERN.findall(content):
        if slug not in seen:
            seen.add(slug)
            slugs.append(slug)

    return slugs
