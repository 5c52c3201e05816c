"""Load Markdown articles with YAML frontmatter into the article store.

Each file holds one translation of one article:

    ---
    slug: intro-guide
    title: Intro Guide
    status: published
    language: en
    ---

    # Intro Guide
    ...

Several files may share a slug (one per language). The article status is
taken from the last file imported for that slug.
"""

from __future__ import annotations

import logging
from pathlib import Path

import frontmatter
from pydantic import ValidationError

from .config import BlogwikiError
from .models import ArticleFrontmatter, ImportFailure, ImportResult
from .store import SQLiteArticleStore

log = logging.getLogger(__name__)


class ContentError(BlogwikiError):
    """Raised when a content file cannot be parsed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def parse_article(path: Path) -> tuple[ArticleFrontmatter, str]:
    """Parse a Markdown article file.

    Args:
        path: Path to the markdown file.

    Returns:
        Tuple of (frontmatter, body).

    Raises:
        ContentError: If the file cannot be read or has invalid frontmatter.
    """
    try:
        post = frontmatter.load(str(path))
    except Exception as e:
        raise ContentError(path, f"Failed to parse frontmatter: {e}") from e

    if not post.metadata:
        raise ContentError(path, "Missing frontmatter (YAML block required at start of file)")

    try:
        meta = ArticleFrontmatter.model_validate(post.metadata)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ContentError(path, "Invalid frontmatter:\n" + "\n".join(errors)) from e

    return meta, post.content


def import_directory(store: SQLiteArticleStore, root: Path) -> ImportResult:
    """Import every article file below ``root``.

    Files whose name starts with ``_`` are skipped. Files that fail to parse
    are reported in ``ImportResult.errors`` and do not stop the import;
    storage errors do.
    """
    result = ImportResult()
    if not root.is_dir():
        result.errors.append(ImportFailure(path=str(root), message="Not a directory"))
        return result

    for md_file in sorted(root.rglob("*.md")):
        if md_file.name.startswith("_"):
            continue

        rel_path = str(md_file.relative_to(root))
        try:
            meta, body = parse_article(md_file)
        except ContentError as e:
            log.warning("Skipping %s: %s", rel_path, e.message)
            result.errors.append(ImportFailure(path=rel_path, message=e.message))
            continue

        store.upsert_article(meta.slug, meta.status)
        store.upsert_translation(meta.slug, meta.language, meta.title, body)
        log.debug("Imported %s as %s (%s, %s)", rel_path, meta.slug, meta.language, meta.status)

        result.imported += 1
        if meta.slug not in result.articles:
            result.articles.append(meta.slug)

    log.info(
        "Imported %d translations of %d articles from %s (%d errors)",
        result.imported,
        len(result.articles),
        root,
        len(result.errors),
    )
    return result
