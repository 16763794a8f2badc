"""Bulk removal of every imported row.

Rows are deleted in dependency order inside one transaction: relations,
then articles, then folders level by level from the deepest up to the root,
so no delete ever violates a foreign key.
"""

from __future__ import annotations

import logging
import sqlite3

from vaultwiki.db.connection import transaction

logger = logging.getLogger(__name__)


def _folder_ids_by_depth(conn: sqlite3.Connection) -> list[list[int]]:
    """Return folder ids grouped by depth, deepest level first."""
    rows = conn.execute(
        """
        WITH RECURSIVE tree(id, depth) AS (
            SELECT id, 0 FROM folders WHERE parent_id IS NULL
            UNION ALL
            SELECT f.id, t.depth + 1
            FROM   folders f
            JOIN   tree t ON f.parent_id = t.id
        )
        SELECT id, depth FROM tree ORDER BY depth DESC
        """
    ).fetchall()

    levels: dict[int, list[int]] = {}
    for row in rows:
        levels.setdefault(row["depth"], []).append(row["id"])
    return [levels[d] for d in sorted(levels, reverse=True)]


def flush_database(conn: sqlite3.Connection) -> dict[str, int]:
    """Delete all relations, articles and folders.

    Returns:
        Number of deleted rows per table.

    Raises:
        sqlite3.Error: On any storage failure; nothing is deleted in that case.
    """
    logger.info("Starting database flush")
    with transaction(conn):
        relations = conn.execute("DELETE FROM article_relations").rowcount
        logger.info("Deleted %d article relations", relations)

        articles = conn.execute("DELETE FROM articles").rowcount
        logger.info("Deleted %d articles", articles)

        folders = 0
        for level in _folder_ids_by_depth(conn):
            placeholders = ",".join("?" for _ in level)
            folders += conn.execute(
                f"DELETE FROM folders WHERE id IN ({placeholders})",  # noqa: S608
                level,
            ).rowcount
        logger.info("Deleted %d folders", folders)

    logger.info("Database flush completed")
    return {"relations": relations, "articles": articles, "folders": folders}
