"""Vault import pipeline.

``run_import`` orchestrates a full import of a vault directory:

    collect files → pass one: upsert folders + articles →
    pass two: resolve wiki links into relations → commit

Both passes run inside one SQLite transaction.  Any exception rolls back
every folder, article and relation written by the run, so a failed import
leaves the database exactly as it was.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

from vaultwiki.db.articles import upsert_article
from vaultwiki.db.connection import transaction
from vaultwiki.db.folders import resolve_folder_path
from vaultwiki.db.relations import add_relation
from vaultwiki.exceptions import VaultImportError
from vaultwiki.vault.files import collect_markdown_files
from vaultwiki.vault.frontmatter import FrontmatterParser, extract_frontmatter
from vaultwiki.vault.links import LinkIndex, parse_wiki_links
from vaultwiki.vault.models import ArticleRecord, ImportResult, ImportState, ImportStats
from vaultwiki.vault.paths import article_title, folder_path_of, format_article_path

logger = logging.getLogger(__name__)

# A source is a file name plus a callable returning its raw text, so local
# files are read lazily and webhook downloads are passed through unchanged.
Source = tuple[str, Callable[[], str]]


# ---------------------------------------------------------------------------
# Pass one: folders and articles
# ---------------------------------------------------------------------------

def _upsert_source(
    conn: sqlite3.Connection,
    name: str,
    raw_text: str,
    vault_root: str | Path | None,
    folder_cache: dict[str, int],
    parser: Optional[FrontmatterParser],
) -> ArticleRecord:
    metadata, content = extract_frontmatter(raw_text, parser=parser, source=name)
    path = format_article_path(name, vault_root)
    title = article_title(name)
    folder_path = folder_path_of(path)
    folder_id = resolve_folder_path(conn, folder_path, cache=folder_cache)

    logger.info(
        "Processing article %r with path %s (folder: %s)",
        title,
        path,
        folder_path or "root",
    )
    article = upsert_article(conn, path, title, content, metadata, folder_id)
    return ArticleRecord(
        path=article.path,
        title=article.title,
        content=article.content,
        metadata=article.metadata,
        folder_id=article.folder_id,
    )


def upsert_sources(
    conn: sqlite3.Connection,
    sources: Iterable[Source],
    vault_root: str | Path | None,
    parser: Optional[FrontmatterParser] = None,
) -> dict[str, ArticleRecord]:
    """Upsert every source, one at a time, and return them keyed by path.

    Sources are processed sequentially: a later note in the same folder
    reuses the folder row created for an earlier one.

    Raises:
        VaultImportError: On the first source that cannot be read or stored.
    """
    folder_cache: dict[str, int] = {}
    articles: dict[str, ArticleRecord] = {}

    for name, read in sources:
        try:
            record = _upsert_source(conn, name, read(), vault_root, folder_cache, parser)
        except Exception as exc:
            logger.error("Error processing file %s: %s", name, exc)
            raise VaultImportError(str(exc), stage="articles", file=name) from exc
        if record.path in articles:
            logger.warning(
                "Duplicate article path %s: %s overwrites an earlier file",
                record.path,
                name,
            )
        articles[record.path] = record

    logger.info("Upserted %d articles", len(articles))
    return articles


def upsert_articles(
    conn: sqlite3.Connection,
    files: Iterable[str | Path],
    vault_root: str | Path,
    parser: Optional[FrontmatterParser] = None,
) -> dict[str, ArticleRecord]:
    """Pass one for files on disk.  See :func:`upsert_sources`."""
    sources = (
        (str(f), lambda f=f: Path(f).read_text(encoding="utf-8"))
        for f in files
    )
    return upsert_sources(conn, sources, vault_root, parser=parser)


# ---------------------------------------------------------------------------
# Pass two: relations
# ---------------------------------------------------------------------------

def resolve_relations(
    conn: sqlite3.Connection,
    articles: Mapping[str, ArticleRecord],
    wiki_root: Optional[str] = None,
) -> int:
    """Turn the wiki links of *articles* into relation rows.

    Only links whose target is part of *articles* produce an edge; the rest
    are logged and dropped.

    Returns:
        Number of distinct edges asserted by this batch (existing rows count,
        since inserting them again is a no-op).

    Raises:
        VaultImportError: If writing an edge fails.
    """
    index = LinkIndex.build(articles, wiki_root=wiki_root)
    edges: set[tuple[str, str]] = set()

    for source_path, article in articles.items():
        for link in parse_wiki_links(article.content):
            target_path = index.resolve(link.target)
            if target_path is None:
                logger.warning(
                    "Unresolved link in %s: [[%s]]", source_path, link.target
                )
                continue

            edge = (source_path, target_path)
            if edge in edges:
                continue
            try:
                add_relation(conn, source_path, target_path)
            except sqlite3.Error as exc:
                logger.error(
                    "Failed to create relation %s -> %s: %s", source_path, target_path, exc
                )
                raise VaultImportError(
                    f"could not store relation {source_path} -> {target_path}: {exc}",
                    stage="relations",
                    file=source_path,
                ) from exc
            edges.add(edge)
            logger.debug("Created relation %s -> %s", source_path, target_path)

    logger.info("Resolved %d relations", len(edges))
    return len(edges)


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def import_sources(
    conn: sqlite3.Connection,
    sources: Iterable[Source],
    vault_root: str | Path | None,
    wiki_root: Optional[str] = None,
    parser: Optional[FrontmatterParser] = None,
    message: str = "Import completed successfully",
) -> ImportResult:
    """Run both passes over *sources* inside a single transaction."""
    state = ImportState.UPSERTING_ARTICLES
    try:
        with transaction(conn):
            logger.debug("Import state: %s", state.value)
            articles = upsert_sources(conn, sources, vault_root, parser=parser)

            state = ImportState.RESOLVING_RELATIONS
            logger.debug("Import state: %s", state.value)
            relations = resolve_relations(conn, articles, wiki_root=wiki_root)
    except BaseException:
        logger.error(
            "Import failed while %s; state: %s",
            state.value,
            ImportState.ROLLED_BACK.value,
        )
        raise

    logger.info(
        "Import state: %s (%d articles, %d relations)",
        ImportState.COMMITTED.value,
        len(articles),
        relations,
    )
    return ImportResult(
        success=True,
        message=message,
        stats=ImportStats(articles_imported=len(articles), relations_created=relations),
    )


def import_files(
    conn: sqlite3.Connection,
    files: Iterable[str | Path],
    vault_root: str | Path,
    wiki_root: Optional[str] = None,
    parser: Optional[FrontmatterParser] = None,
) -> ImportResult:
    """Import an explicit list of Markdown files that live under *vault_root*."""
    sources = (
        (str(f), lambda f=f: Path(f).read_text(encoding="utf-8"))
        for f in files
    )
    return import_sources(conn, sources, vault_root, wiki_root=wiki_root, parser=parser)


def run_import(
    conn: sqlite3.Connection,
    vault_root: str | Path,
    vault_subdir: Optional[str] = None,
    wiki_root: Optional[str] = None,
    parser: Optional[FrontmatterParser] = None,
) -> ImportResult:
    """Import every Markdown file of a vault.

    Args:
        conn: Open, initialised DB connection with no transaction in progress.
        vault_root: Directory holding the vault.
        vault_subdir: Optional subdirectory restricting the import; article
            paths are then relative to it.
        wiki_root: Folder name prefixing root-relative wiki links.
        parser: Frontmatter parser override (defaults to ``yaml.safe_load``).

    Returns:
        An :class:`~vaultwiki.vault.models.ImportResult` with statistics.

    Raises:
        VaultNotFoundError: If the vault directory does not exist.
        VaultImportError: If any file or relation fails; nothing is persisted.
    """
    root = Path(vault_root)
    if vault_subdir:
        root = root / vault_subdir
    root = root.resolve()

    logger.info("Import state: %s (%s)", ImportState.COLLECTING.value, root)
    files = collect_markdown_files(root)
    logger.info("Found %d Markdown files. Starting import...", len(files))

    return import_files(conn, files, root, wiki_root=wiki_root, parser=parser)
