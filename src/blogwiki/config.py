"""Configuration management for blogwiki.

This module contains all configurable constants for wiki-link resolution and
suggestions. Magic numbers are documented here rather than scattered
throughout the codebase.
"""

import os
from pathlib import Path


class BlogwikiError(Exception):
    """Base class for errors raised by blogwiki."""


class ConfigurationError(BlogwikiError):
    """Raised when configuration is missing or unusable."""


DEFAULT_DB_FILENAME = "blogwiki.sqlite"


def get_db_path() -> Path:
    """Get the SQLite article database path.

    Discovery order:
    1. BLOGWIKI_DB_PATH environment variable (explicit override)
    2. blogwiki.sqlite in the current working directory

    Raises:
        ConfigurationError: If BLOGWIKI_DB_PATH points at a directory.
    """
    root = os.environ.get("BLOGWIKI_DB_PATH")
    if root:
        path = Path(root)
        if path.is_dir():
            raise ConfigurationError(
                f"BLOGWIKI_DB_PATH must point to a database file, not a directory: {path}"
            )
        return path
    return Path.cwd() / DEFAULT_DB_FILENAME


# =============================================================================
# Languages and URLs
# =============================================================================

SUPPORTED_LANGUAGES = ("ja", "en")

DEFAULT_LANGUAGE = "ja"

# Reader-facing article URL. Both placeholders are always filled, even for
# slugs that do not resolve.
ARTICLE_URL_TEMPLATE = "/{language}/blog/{slug}"


# =============================================================================
# Suggestions
# =============================================================================

# Default number of suggestions returned to the editor
DEFAULT_SUGGESTION_LIMIT = 20

# Maximum number of suggestions a caller may ask for
MAX_SUGGESTION_LIMIT = 100

# Number of published articles scanned for heading matches in the unscoped
# pass. Independent of the requested limit so the worst-case cost is bounded.
SUGGESTION_SCAN_LIMIT = 100

# Deepest heading level considered when scanning many articles at once.
# Scoped suggestions (a single target article) use every level.
SUGGESTION_HEADING_MAX_LEVEL = 3


# =============================================================================
# Table of contents
# =============================================================================

# Heading depth included in the table of contents of a rendered article
TOC_MAX_LEVEL = 3


# =============================================================================
# Storage
# =============================================================================

# SQLite caps the number of bound parameters per statement; IN (...) lists
# are split into batches of this size.
SQLITE_MAX_PARAMS = 900
