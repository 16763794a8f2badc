"""Commands for browsing imported articles and folders."""

from __future__ import annotations

import json

import typer

from vaultwiki.db import get_connection, init_db
from vaultwiki.db.articles import get_article_detail, list_article_paths
from vaultwiki.db.folders import get_folder_tree
from vaultwiki.db.search import search_articles

from cli.rendering import render_folder_tree

articles_app = typer.Typer(help="Browse imported articles.", no_args_is_help=True)
folders_app = typer.Typer(help="Browse the folder hierarchy.", no_args_is_help=True)


@articles_app.command("list")
def articles_list() -> None:
    """List every article path."""
    conn = get_connection()
    init_db(conn)
    try:
        paths = list_article_paths(conn)
    finally:
        conn.close()

    if not paths:
        typer.echo("No articles found.")
        return
    for path in paths:
        typer.echo(f"  {path}")


@articles_app.command("show")
def articles_show(
    path: str = typer.Argument(..., help="Article path, e.g. Topics/Fireball."),
    as_json: bool = typer.Option(False, "--json", help="Print the full record as JSON."),
) -> None:
    """Show one article with its related and mentioning articles."""
    conn = get_connection()
    init_db(conn)
    try:
        detail = get_article_detail(conn, path)
    finally:
        conn.close()

    if detail is None:
        typer.echo(f"❌ Article not found: {path}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(detail.to_dict(), indent=2, ensure_ascii=False))
        return

    article = detail.article
    typer.echo(f"# {article.title}  ({article.path})")
    if article.metadata:
        typer.echo(f"metadata: {json.dumps(article.metadata, ensure_ascii=False)}")
    typer.echo("")
    typer.echo(article.content)
    typer.echo("")
    typer.echo("Related:  " + (", ".join(a.path for a in detail.related_articles) or "-"))
    typer.echo("Mentions: " + (", ".join(a.path for a in detail.mention_articles) or "-"))


@articles_app.command("search")
def articles_search(
    query: str = typer.Argument(..., help="Search query."),
    limit: int = typer.Option(20, "--limit", help="Maximum number of results."),
) -> None:
    """Search article titles and bodies."""
    conn = get_connection()
    init_db(conn)
    try:
        results = search_articles(conn, query, limit=limit)
    finally:
        conn.close()

    if not results:
        typer.echo(f"No results for {query!r}.")
        return
    for article in results:
        typer.echo(f"  {article.path}  {article.title!r}")


@folders_app.command("tree")
def folders_tree(
    articles: bool = typer.Option(True, "--articles/--no-articles", help="List articles too."),
) -> None:
    """Print the folder hierarchy."""
    conn = get_connection()
    init_db(conn)
    try:
        root = get_folder_tree(conn)
    finally:
        conn.close()

    if root is None:
        typer.echo("No folders yet. Run an import first.")
        return
    typer.echo(render_folder_tree(root, show_articles=articles))
