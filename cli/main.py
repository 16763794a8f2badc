"""VaultWiki CLI entry-point for all wiki operations.

Usage:
    python cli/main.py --help

Sub-command groups:
    db        → schema setup and flush
    import    → vault / local Git / webhook payload import
    articles  → list, show and search imported articles
    folders   → folder hierarchy
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from vaultwiki.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from vaultwiki.config import settings
from vaultwiki.db import get_connection, init_db
from vaultwiki.db.flush import flush_database
from vaultwiki.logging_setup import configure_logging

from cli.commands.articles import articles_app, folders_app
from cli.commands.vault import import_app

app = typer.Typer(
    name="vaultwiki",
    help="VaultWiki CLI: import a Markdown vault and browse it.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging before any sub-command runs."""
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_file)


# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


@db_app.command("flush")
def db_flush(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete every relation, article and folder."""
    if not yes and not typer.confirm("Delete all imported content?"):
        typer.echo("[db flush] Aborted.")
        raise typer.Exit(1)

    conn = get_connection()
    init_db(conn)
    try:
        counts = flush_database(conn)
    finally:
        conn.close()
    typer.echo(
        f"[db flush] Removed {counts['relations']} relations, "
        f"{counts['articles']} articles, {counts['folders']} folders"
    )


# ---------------------------------------------------------------------------
# Import / browse commands
# ---------------------------------------------------------------------------
app.add_typer(import_app, name="import")
app.add_typer(articles_app, name="articles")
app.add_typer(folders_app, name="folders")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
