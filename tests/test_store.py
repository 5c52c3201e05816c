"""Tests for the SQLite article store.

Coverage:
- src/blogwiki/store.py - schema, reads, upserts, error wrapping
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from blogwiki.config import SQLITE_MAX_PARAMS
from blogwiki.store import SQLiteArticleStore, StorageError

from conftest import add_article


class TestSchema:
    """Schema creation."""

    def test_tables_created_on_first_use(self, store: SQLiteArticleStore, db_path: Path):
        assert store.count_articles() == 0

        conn = sqlite3.connect(str(db_path))
        try:
            tables = {
                row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()

        assert {"articles", "article_translations"} <= tables

    def test_db_path_from_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BLOGWIKI_DB_PATH", str(tmp_path / "env.sqlite"))

        assert SQLiteArticleStore().path == tmp_path / "env.sqlite"


class TestFetchLinkTargets:
    """Batch lookup used by the resolver."""

    def test_returns_existing_rows_any_status(self, seeded_store):
        rows = seeded_store.fetch_link_targets(["intro-guide", "draft-post", "missing"], "ja")

        assert {(r.slug, r.status, r.title) for r in rows} == {
            ("intro-guide", "published", "Intro Guide"),
            ("draft-post", "draft", "Draft Post"),
        }

    def test_missing_translation_has_null_title(self, seeded_store):
        (row,) = seeded_store.fetch_link_targets(["no-translation"], "ja")

        assert row.status == "published"
        assert row.title is None

    def test_empty_input(self, seeded_store):
        assert seeded_store.fetch_link_targets([], "ja") == []

    def test_large_slug_sets_batched(self, store):
        add_article(store, "needle", "Needle")
        slugs = [f"slug-{i}" for i in range(SQLITE_MAX_PARAMS * 2)] + ["needle"]

        rows = store.fetch_link_targets(slugs, "ja")

        assert [r.slug for r in rows] == ["needle"]


class TestPublishedReads:
    """Reads used by the suggestion engine."""

    def test_search_titles_case_insensitive_published_only(self, seeded_store):
        rows = seeded_store.search_published_titles("POST", "ja", 10)

        assert rows == []

    def test_search_titles_order_and_limit(self, store):
        add_article(store, "b-guide", "Beta Guide")
        add_article(store, "a-guide", "Alpha Guide")
        add_article(store, "c-guide", "Gamma Guide")

        rows = store.search_published_titles("guide", "ja", 2)

        assert [r.slug for r in rows] == ["b-guide", "a-guide"]

    @pytest.mark.parametrize(("query", "expected"), [("%", ["percent"]), ("_", ["under"])])
    def test_search_wildcards_literal(self, store, query, expected):
        add_article(store, "percent", "100% Pure")
        add_article(store, "under", "snake_case")
        add_article(store, "plain", "Plain")

        assert [r.slug for r in store.search_published_titles(query, "ja", 10)] == expected

    def test_search_non_ascii_case_folding(self, store):
        add_article(store, "eclair", "ÉCLAIR Recipes")

        assert [r.slug for r in store.search_published_titles("éclair", "ja", 10)] == ["eclair"]

    def test_empty_query_matches_all_published(self, seeded_store):
        rows = seeded_store.search_published_titles("", "ja", 10)

        assert [r.slug for r in rows] == ["intro-guide", "nextjs-basics"]

    def test_list_published(self, seeded_store):
        assert [r.slug for r in seeded_store.list_published_articles("en", 10)] == [
            "intro-guide",
            "no-translation",
        ]

    def test_get_published_article(self, seeded_store):
        article = seeded_store.get_published_article("intro-guide", "ja")

        assert article is not None
        assert article.title == "Intro Guide"
        assert "## Setup" in article.content

    @pytest.mark.parametrize("slug", ["draft-post", "old-post", "missing"])
    def test_get_hidden_article_returns_none(self, seeded_store, slug):
        assert seeded_store.get_published_article(slug, "ja") is None


class TestWrites:
    """Upserts used by the importer."""

    def test_upsert_article_updates_status(self, store):
        add_article(store, "post", "Post", status="draft")
        store.upsert_article("post", "published")

        assert store.count_articles() == 1
        assert store.get_published_article("post", "ja") is not None

    def test_upsert_translation_replaces(self, store):
        add_article(store, "post", "Old Title", "old")
        store.upsert_translation("post", "ja", "New Title", "new")

        article = store.get_published_article("post", "ja")
        assert (article.title, article.content) == ("New Title", "new")

    def test_translation_for_unknown_article_fails(self, store):
        with pytest.raises(StorageError, match="Unknown article slug"):
            store.upsert_translation("ghost", "ja", "Ghost", "")


class TestErrors:
    """sqlite3 errors surface as StorageError."""

    def test_corrupt_database(self, tmp_path: Path):
        db_path = tmp_path / "broken.sqlite"
        db_path.write_bytes(b"this is not a database" * 100)

        with pytest.raises(StorageError):
            SQLiteArticleStore(db_path).fetch_link_targets(["a"], "ja")
