"""Import commands: full vault, local Git checkout, or a saved webhook payload."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from vaultwiki.config import settings
from vaultwiki.db import get_connection, init_db
from vaultwiki.exceptions import VaultWikiError
from vaultwiki.vault.git import import_from_local_git
from vaultwiki.vault.importer import run_import
from vaultwiki.vault.models import ImportResult
from vaultwiki.vault.webhook import import_from_webhook

import_app = typer.Typer(help="Import the vault into the database.", no_args_is_help=True)


def _report(result: ImportResult) -> None:
    stats = result.stats
    typer.echo(f"✅ {result.message}")
    typer.echo(f"   Articles imported : {stats.articles_imported}")
    typer.echo(f"   Relations created : {stats.relations_created}")


@import_app.command("vault")
def import_vault(
    path: Optional[Path] = typer.Argument(None, help="Vault directory (defaults to VAULT_PATH)."),
    subdir: Optional[str] = typer.Option(None, "--subdir", help="Only import this subdirectory."),
    wiki_root: Optional[str] = typer.Option(
        None, "--wiki-root", help="Prefix of root-relative links (defaults to WIKI_DIRECTORY)."
    ),
) -> None:
    """Import every Markdown file of a vault directory."""
    vault_path = path or settings.vault_path
    if vault_path is None:
        typer.echo("❌ No vault path given and VAULT_PATH is not set.")
        raise typer.Exit(code=1)

    conn = get_connection()
    init_db(conn)
    typer.echo(f"🚀 Importing from {vault_path} into database")
    try:
        result = run_import(
            conn,
            vault_path,
            vault_subdir=subdir,
            wiki_root=wiki_root if wiki_root is not None else settings.wiki_directory,
        )
    except (VaultWikiError, OSError) as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)
    finally:
        conn.close()
    _report(result)


@import_app.command("git")
def import_git(
    repo: Optional[Path] = typer.Argument(None, help="Local Git checkout (defaults to LOCAL_GIT_PATH)."),
    branch: Optional[str] = typer.Option(None, "--branch", help="Branch to import (defaults to GIT_BRANCH)."),
    subdir: Optional[str] = typer.Option(None, "--subdir", help="Wiki directory inside the repository."),
) -> None:
    """Update a local Git checkout and import its wiki directory."""
    conn = get_connection()
    init_db(conn)
    try:
        result = import_from_local_git(conn, repo_path=repo, branch=branch, wiki_subdir=subdir)
    except (VaultWikiError, OSError) as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)
    finally:
        conn.close()
    _report(result)


@import_app.command("webhook")
def import_webhook(
    payload_file: Path = typer.Argument(..., help="JSON file holding a GitHub push payload."),
    subdir: Optional[str] = typer.Option(None, "--subdir", help="Wiki directory inside the repository."),
) -> None:
    """Replay a saved push payload: import the files it added or modified."""
    try:
        payload = json.loads(payload_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"❌ Cannot read payload: {e}")
        raise typer.Exit(code=1)

    conn = get_connection()
    init_db(conn)
    try:
        result = import_from_webhook(conn, payload, wiki_subdir=subdir)
    except (VaultWikiError, ValueError, OSError) as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)
    finally:
        conn.close()
    _report(result)
