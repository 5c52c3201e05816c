"""Wiki-link resolution and authoring suggestions for Markdown blog articles."""

from .converter import convert_references
from .parser import extract_headings, extract_references, nest_headings
from .resolver import resolve_targets
from .store import ArticleStore, SQLiteArticleStore, StorageError
from .suggestions import get_suggestions

__version__ = "0.1.0"

__all__ = [
    "convert_references",
    "extract_headings",
    "extract_references",
    "nest_headings",
    "resolve_targets",
    "get_suggestions",
    "ArticleStore",
    "SQLiteArticleStore",
    "StorageError",
]
