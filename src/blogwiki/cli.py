#!/usr/bin/env python3
"""
blogwiki: wiki-link tooling for the blog

Usage:
    blogwiki convert post.md --lang=en     # Rewrite [[slug]] into links
    blogwiki links post.md                 # List referenced slugs
    blogwiki headings post.md --tree       # Table of contents
    blogwiki suggest "next"                # Autocomplete candidates
    blogwiki import content/               # Load Markdown articles into the store
    blogwiki serve                         # Run the HTTP API
"""

import json
import sys
from pathlib import Path
from typing import Optional, TextIO

import click

from ._logging import configure_logging
from .config import (
    DEFAULT_LANGUAGE,
    DEFAULT_SUGGESTION_LIMIT,
    MAX_SUGGESTION_LIMIT,
    SUPPORTED_LANGUAGES,
    BlogwikiError,
)

# ─────────────────────────────────────────────────────────────────────────────
# Output Formatting
# ─────────────────────────────────────────────────────────────────────────────


def format_table(rows: list[dict], columns: list[str], max_widths: Optional[dict] = None) -> str:
    """Format rows as a simple table."""
    if not rows:
        return ""

    max_widths = max_widths or {}

    def cell(row: dict, col: str) -> str:
        val = str(row.get(col, ""))
        limit = max_widths.get(col, 50)
        if len(val) > limit:
            val = val[: limit - 3] + "..."
        return val

    widths = {col: max([len(col)] + [len(cell(row, col)) for row in rows]) for col in columns}

    lines = [
        "  ".join(col.upper().ljust(widths[col]) for col in columns),
        "  ".join("-" * widths[col] for col in columns),
    ]
    for row in rows:
        lines.append("  ".join(cell(row, col).ljust(widths[col]) for col in columns).rstrip())

    return "\n".join(lines)


def output(data, as_json: bool = False):
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))
    else:
        click.echo(data)


def fail(message: str):
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def open_store(db_path: Optional[Path]):
    from .store import SQLiteArticleStore

    return SQLiteArticleStore(db_path)


language_option = click.option(
    "--lang",
    "-l",
    "language",
    type=click.Choice(SUPPORTED_LANGUAGES),
    default=DEFAULT_LANGUAGE,
    show_default=True,
    help="Article language",
)

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="SQLite article database (default: $BLOGWIKI_DB_PATH or ./blogwiki.sqlite)",
)


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="0.1.0", prog_name="blogwiki")
def cli():
    """blogwiki: resolve [[slug]] wiki links and suggest link targets.

    \b
    Quick start:
      blogwiki import content/        # Load articles
      blogwiki convert post.md        # Convert wiki links
      blogwiki suggest "setup"        # Autocomplete candidates
    """
    configure_logging()


# ─────────────────────────────────────────────────────────────────────────────
# Convert / Links / Headings
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"))
@language_option
@db_option
def convert(file: TextIO, language: str, db_path: Optional[Path]):
    """Convert [[slug]] references in FILE into Markdown links.

    Unpublished or unknown slugs are left as written. Use - for stdin.

    \b
    Examples:
      blogwiki convert post.md
      cat post.md | blogwiki convert - --lang=en
    """
    from .converter import convert_references

    content = file.read()
    try:
        converted = convert_references(open_store(db_path), content, language)
    except BlogwikiError as e:
        fail(str(e))

    click.echo(converted, nl=False)


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def links(file: TextIO, as_json: bool):
    """List the distinct [[slug]] references in FILE."""
    from .parser import extract_references

    slugs = extract_references(file.read())

    if as_json:
        output(slugs, as_json=True)
    elif not slugs:
        click.echo("No wiki links found.")
    else:
        for slug in slugs:
            click.echo(slug)


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.option(
    "--max-level",
    "-m",
    type=click.IntRange(1, 6),
    default=6,
    show_default=True,
    help="Deepest heading level to include",
)
@click.option("--tree", is_flag=True, help="Show headings nested as a table of contents")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def headings(file: TextIO, max_level: int, tree: bool, as_json: bool):
    """List the headings of FILE with their anchor ids.

    \b
    Examples:
      blogwiki headings post.md
      blogwiki headings post.md --max-level=3 --tree
    """
    from .parser import extract_headings, nest_headings

    found = extract_headings(file.read(), max_level)

    if as_json:
        items = nest_headings(found) if tree else found
        output([h.model_dump() for h in items], as_json=True)
        return

    if not found:
        click.echo("No headings found.")
        return

    for heading in found:
        indent = "  " * (heading.level - 1) if tree else ""
        prefix = "" if tree else "#" * heading.level + " "
        click.echo(f"{indent}{prefix}{heading.text}  (#{heading.id})")


# ─────────────────────────────────────────────────────────────────────────────
# Suggest Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("query", default="")
@language_option
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(1, MAX_SUGGESTION_LIMIT),
    default=DEFAULT_SUGGESTION_LIMIT,
    show_default=True,
    help="Max suggestions",
)
@click.option("--target", "-t", "target_slug", help="Only suggest headings of this article")
@db_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def suggest(
    query: str,
    language: str,
    limit: int,
    target_slug: Optional[str],
    db_path: Optional[Path],
    as_json: bool,
):
    """Suggest articles and headings whose text contains QUERY.

    An empty QUERY matches every published title and heading.

    \b
    Examples:
      blogwiki suggest "next"
      blogwiki suggest "" --target=intro-guide
    """
    from .suggestions import get_suggestions

    try:
        items = get_suggestions(open_store(db_path), query, language, limit, target_slug=target_slug)
    except BlogwikiError as e:
        fail(str(e))

    if as_json:
        output([item.model_dump(by_alias=True) for item in items], as_json=True)
        return

    if not items:
        click.echo("No suggestions.")
        return

    rows = []
    for item in items:
        link = item.slug if item.type == "article" else f"{item.slug}#{item.heading_id}"
        rows.append({"type": item.type, "link": link, "title": item.title})
    click.echo(format_table(rows, ["type", "link", "title"], {"link": 40, "title": 40}))


# ─────────────────────────────────────────────────────────────────────────────
# Import Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("import")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@db_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def import_(directory: Path, db_path: Optional[Path], as_json: bool):
    """Import Markdown articles with frontmatter from DIRECTORY."""
    from .importer import import_directory

    try:
        result = import_directory(open_store(db_path), directory)
    except BlogwikiError as e:
        fail(str(e))

    if as_json:
        output(result.model_dump(), as_json=True)
    else:
        click.echo(f"Imported {result.imported} translation(s) of {len(result.articles)} article(s)")
        for error in result.errors:
            click.echo(f"  ! {error.path}: {error.message}", err=True)

    if result.errors:
        sys.exit(1)


# ─────────────────────────────────────────────────────────────────────────────
# Serve Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8080, show_default=True, type=int)
@db_option
def serve(host: str, port: int, db_path: Optional[Path]):
    """Run the HTTP API (suggestions and converted articles)."""
    import uvicorn

    from .webapp import api

    if db_path:
        api.set_store(open_store(db_path))

    uvicorn.run(api.app, host=host, port=port)


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def main():
    """Entry point for the blogwiki CLI."""
    cli()


if __name__ == "__main__":
    main()
