"""Markdown parsing: wiki-link and heading extraction."""

from ..models import Heading, NestedHeading, WikiReference
from .headings import extract_headings, heading_id, nest_headings
from .links import WIKI_LINK_PATTERN, extract_references, iter_references

__all__ = [
    "WIKI_LINK_PATTERN",
    "extract_references",
    "iter_references",
    "WikiReference",
    "extract_headings",
    "heading_id",
    "nest_headings",
    "Heading",
    "NestedHeading",
]
