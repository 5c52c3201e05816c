"""Article storage.

``ArticleStore`` describes the read capability the resolver and suggestion
engine depend on. ``SQLiteArticleStore`` implements it on top of two tables:
``articles`` (slug, status) and ``article_translations`` (one row per article
and language holding title and content).
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, Iterator, Protocol

from .config import SQLITE_MAX_PARAMS, BlogwikiError, get_db_path
from .models import ArticleRecord, ArticleStatus, Language, LinkTargetRow

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class StorageError(BlogwikiError):
    """Raised when the article store cannot be read or written."""


class ArticleStore(Protocol):
    """Read capability over articles joined with their translations."""

    def fetch_link_targets(self, slugs: Iterable[str], language: Language) -> list[LinkTargetRow]:
        """Return status and translated title for each existing slug, any status."""
        ...

    def search_published_titles(
        self, query: str, language: Language, limit: int
    ) -> list[ArticleRecord]:
        """Return published articles whose title contains ``query`` (case-insensitive)."""
        ...

    def list_published_articles(self, language: Language, limit: int) -> list[ArticleRecord]:
        """Return up to ``limit`` published articles."""
        ...

    def get_published_article(self, slug: str, language: Language) -> ArticleRecord | None:
        """Return one published article, or None if missing or hidden."""
        ...


def _chunked(items: list[str], size: int) -> Iterable[list[str]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


_PUBLISHED_SELECT = """
    SELECT a.slug, a.status, t.title, t.content
    FROM articles a
    JOIN article_translations t ON t.article_id = a.id AND t.language = ?
    WHERE a.status = 'published'
"""


class SQLiteArticleStore:
    """SQLite-backed article store.

    A connection is opened per operation and closed afterwards, so an
    instance can be shared between requests.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self._path = db_path or get_db_path()

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._path))
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open article database {self._path}: {e}") from e

        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
            # SQLite's LOWER() only folds ASCII; match Python's str.lower used elsewhere.
            conn.create_function("py_lower", 1, str.lower, deterministic=True)
            self._ensure_schema(conn)
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            # Uncommitted changes are discarded when the connection closes.
            raise StorageError(f"Article database error: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS articles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                slug TEXT NOT NULL UNIQUE,
                status TEXT NOT NULL DEFAULT 'draft'
                    CHECK (status IN ('draft', 'published', 'archived')),
                published_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS article_translations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                article_id INTEGER NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
                language TEXT NOT NULL,
                title TEXT NOT NULL,
                content TEXT NOT NULL DEFAULT '',
                UNIQUE (article_id, language)
            )
            """
        )
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    def fetch_link_targets(self, slugs: Iterable[str], language: Language) -> list[LinkTargetRow]:
        unique = list(dict.fromkeys(slugs))
        if not unique:
            return []

        rows: list[LinkTargetRow] = []
        with self._connect() as conn:
            for batch in _chunked(unique, SQLITE_MAX_PARAMS):
                placeholders = ",".join("?" for _ in batch)
                query = (
                    "SELECT a.slug, a.status, t.title FROM articles a "
                    "LEFT JOIN article_translations t "
                    "ON t.article_id = a.id AND t.language = ? "
                    f"WHERE a.slug IN ({placeholders}) ORDER BY a.id"
                )
                for slug, status, title in conn.execute(query, [language, *batch]):
                    rows.append(LinkTargetRow(slug=slug, status=status, title=title))

        log.debug("Fetched %d of %d link targets (%s)", len(rows), len(unique), language)
        return rows

    def search_published_titles(
        self, query: str, language: Language, limit: int
    ) -> list[ArticleRecord]:
        sql = _PUBLISHED_SELECT
        params: list[object] = [language]
        if query:
            sql += " AND instr(py_lower(t.title), ?) > 0"
            params.append(query.lower())
        sql += " ORDER BY a.id LIMIT ?"
        params.append(limit)

        with self._connect() as conn:
            return [self._record(row) for row in conn.execute(sql, params)]

    def list_published_articles(self, language: Language, limit: int) -> list[ArticleRecord]:
        sql = _PUBLISHED_SELECT + " ORDER BY a.id LIMIT ?"
        with self._connect() as conn:
            return [self._record(row) for row in conn.execute(sql, [language, limit])]

    def get_published_article(self, slug: str, language: Language) -> ArticleRecord | None:
        sql = _PUBLISHED_SELECT + " AND a.slug = ? LIMIT 1"
        with self._connect() as conn:
            row = conn.execute(sql, [language, slug]).fetchone()
        return self._record(row) if row else None

    def count_articles(self) -> int:
        with self._connect() as conn:
            (count,) = conn.execute("SELECT COUNT(*) FROM articles").fetchone()
        return int(count)

    @staticmethod
    def _record(row: tuple) -> ArticleRecord:
        slug, status, title, content = row
        return ArticleRecord(slug=slug, status=status, title=title, content=content or "")

    # ─────────────────────────────────────────────────────────────────────
    # Writes (used by the importer)
    # ─────────────────────────────────────────────────────────────────────

    def upsert_article(self, slug: str, status: ArticleStatus) -> None:
        """Create an article or update its status.

        ``published_at`` is set the first time the article is published.
        """
        now = _now()
        published_at = now if status == "published" else None
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO articles (slug, status, published_at, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(slug) DO UPDATE SET
                    status = excluded.status,
                    published_at = COALESCE(articles.published_at, excluded.published_at),
                    updated_at = excluded.updated_at
                """,
                (slug, status, published_at, now, now),
            )

    def upsert_translation(self, slug: str, language: Language, title: str, content: str) -> None:
        """Create or replace the translation of an existing article.

        Raises:
            StorageError: If no article with ``slug`` exists.
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO article_translations (article_id, language, title, content)
                SELECT id, ?, ?, ? FROM articles WHERE slug = ?
                ON CONFLICT(article_id, language) DO UPDATE SET
                    title = excluded.title,
                    content = excluded.content
                """,
                (language, title, content, slug),
            )
            if cursor.rowcount == 0:
                raise StorageError(f"Unknown article slug: {slug}")
