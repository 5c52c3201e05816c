"""Shared test fixtures for the blogwiki test suite.

Design:
- store: real SQLite article store in a temp directory
- seeded_store: store with published, draft and archived articles in ja/en
- content_dir: directory of Markdown articles with frontmatter for the importer
- runner / cli_invoke: CliRunner with BLOGWIKI_DB_PATH pointing at the temp store
"""

import logging
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from blogwiki.cli import cli
from blogwiki.store import SQLiteArticleStore

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def add_article(
    store: SQLiteArticleStore,
    slug: str,
    title: str,
    content: str = "",
    status: str = "published",
    language: str = "ja",
) -> None:
    """Insert an article and one translation."""
    store.upsert_article(slug, status)
    store.upsert_translation(slug, language, title, content)


def create_article_file(
    root: Path,
    rel_path: str,
    metadata: dict,
    content: str = "",
) -> Path:
    """Write a Markdown article with YAML frontmatter."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    header = yaml.safe_dump(metadata, allow_unicode=True, sort_keys=False)
    path.write_text(f"---\n{header}---\n\n{content}\n", encoding="utf-8")
    return path


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "articles.sqlite"


@pytest.fixture
def store(db_path: Path) -> SQLiteArticleStore:
    """Empty article store."""
    return SQLiteArticleStore(db_path)


@pytest.fixture
def seeded_store(store: SQLiteArticleStore) -> SQLiteArticleStore:
    """Store with a small, mixed-status set of articles.

    Creates (insertion order):
    - intro-guide: published, ja + en, headings Setup / Usage
    - nextjs-basics: published, ja, headings Routing / Data Fetching / Deploy
    - draft-post: draft, ja
    - old-post: archived, ja
    - no-translation: published, en only
    """
    add_article(
        store,
        "intro-guide",
        "Intro Guide",
        "# Intro Guide\n\n## Setup\n\nInstall it.\n\n## Usage\n\nRun it.\n",
    )
    store.upsert_translation(
        "intro-guide", "en", "Intro Guide (EN)", "## Setup\n\n## Usage\n"
    )
    add_article(
        store,
        "nextjs-basics",
        "Next.js Basics",
        "# Next.js Basics\n\n## Routing\n\n### Dynamic Routes\n\n#### Catch-all Setup\n\n"
        "## Data Fetching\n\n## Deploy\n",
    )
    add_article(store, "draft-post", "Draft Post", "## Secret Setup\n", status="draft")
    add_article(store, "old-post", "Old Post", "## Legacy Setup\n", status="archived")
    add_article(store, "no-translation", "English Only", "## Setup\n", language="en")
    return store


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Content directory with valid and invalid article files."""
    root = tmp_path / "content"
    root.mkdir()

    create_article_file(
        root,
        "intro-guide.ja.md",
        {"slug": "intro-guide", "title": "入門ガイド", "status": "published", "language": "ja"},
        "# 入門ガイド\n\n## セットアップ\n\n[[nextjs-basics]] も参照。",
    )
    create_article_file(
        root,
        "intro-guide.en.md",
        {"slug": "intro-guide", "title": "Intro Guide", "status": "published", "language": "en"},
        "# Intro Guide\n\n## Setup\n",
    )
    create_article_file(
        root,
        "posts/nextjs-basics.md",
        {"slug": "nextjs-basics", "title": "Next.js の基本", "status": "published"},
        "## Routing\n",
    )
    create_article_file(
        root,
        "posts/wip.md",
        {"slug": "wip", "title": "Work in progress"},
        "Draft body",
    )
    create_article_file(root, "_template.md", {"slug": "template", "title": "Template"})

    return root


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by configure_logging() during a test.

    CliRunner swaps sys.stderr per invocation; a handler kept from an earlier
    test would write to a closed stream.
    """
    _clear_blogwiki_handlers()
    yield
    _clear_blogwiki_handlers()


def _clear_blogwiki_handlers() -> None:
    logger = logging.getLogger("blogwiki")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def cli_invoke(runner: CliRunner, db_path: Path, monkeypatch):
    """Helper for invoking the CLI against the temp store.

    Usage:
        def test_suggest(cli_invoke, seeded_store):
            result = cli_invoke(["suggest", "guide"])
            assert result.exit_code == 0
    """
    monkeypatch.setenv("BLOGWIKI_DB_PATH", str(db_path))

    def _invoke(args: list[str], input: str | None = None):
        _clear_blogwiki_handlers()
        return runner.invoke(cli, args, input=input, catch_exceptions=False)

    return _invoke
