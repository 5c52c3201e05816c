"""ATX heading extraction for suggestions and tables of contents."""

import re

from ..models import Heading, NestedHeading

# Line-initial ATX heading: 1-6 hashes, whitespace, text
HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*$")

# Optional closing sequence, e.g. "## Title ##"
CLOSING_HASHES_PATTERN = re.compile(r"[ \t]+#+$")

FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")

# Code spans are swapped for placeholders while emphasis is stripped
CODE_SPAN_PATTERN = re.compile(r"`([^`]+)`")
CODE_PLACEHOLDER_PATTERN = re.compile(r"\x00(\d+)\x00")

EMPHASIS_PATTERNS = [
    re.compile(r"\*\*(.+?)\*\*"),
    re.compile(r"__(.+?)__"),
    re.compile(r"~~(.+?)~~"),
    re.compile(r"\*(.+?)\*"),
    re.compile(r"(?<!\w)_(.+?)_(?!\w)"),
]

NON_WORD_RUN_PATTERN = re.compile(r"[^\w]+")


def heading_id(text: str) -> str:
    """Derive an anchor id from heading text.

    Lowercases, collapses runs of whitespace and punctuation into single
    hyphens and trims hyphens from both ends. Letters of any script are kept,
    so "React の使い方" becomes "react-の使い方".
    """
    return NON_WORD_RUN_PATTERN.sub("-", text.lower()).strip("-")


def _strip_emphasis(text: str) -> str:
    """Remove inline markup, keeping code span contents verbatim."""
    spans: list[str] = []

    def stash(match: re.Match[str]) -> str:
        spans.append(match.group(1))
        return f"\x00{len(spans) - 1}\x00"

    text = CODE_SPAN_PATTERN.sub(stash, text)
    for pattern in EMPHASIS_PATTERNS:
        text = pattern.sub(r"\1", text)
    return CODE_PLACEHOLDER_PATTERN.sub(lambda m: spans[int(m.group(1))], text)


def extract_headings(content: str, max_level: int = 6) -> list[Heading]:
    """Extract ATX headings from markdown content.

    Headings deeper than ``max_level`` are skipped. Lines inside fenced code
    blocks are ignored. Ids are not deduplicated: two headings with the same
    text get the same id.

    Args:
        content: Markdown content.
        max_level: Deepest heading level to include (1-6).

    Returns:
        Headings in document order.
    """
    headings: list[Heading] = []
    fence: str | None = None

    for line in content.splitlines():
        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue

        match = HEADING_PATTERN.match(line)
        if not match:
            continue

        level = len(match.group(1))
        if level > max_level:
            continue

        text = CLOSING_HASHES_PATTERN.sub("", match.group(2))
        text = _strip_emphasis(text).strip()
        if not text:
            continue

        headings.append(Heading(level=level, text=text, id=heading_id(text)))

    return headings


def nest_headings(headings: list[Heading]) -> list[NestedHeading]:
    """Convert a flat heading list into a tree.

    Each heading becomes a child of the nearest preceding heading with a
    smaller level.
    """
    roots: list[NestedHeading] = []
    stack: list[NestedHeading] = []

    for heading in headings:
        node = NestedHeading(level=heading.level, text=heading.text, id=heading.id)

        while stack and stack[-1].level >= heading.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

        stack.append(node)

    return roots
