"""Operations on the ``article_relations`` table."""

from __future__ import annotations

import sqlite3
from time import time

from vaultwiki.db.models import ArticleRelation


def _row_to_relation(row: sqlite3.Row) -> ArticleRelation:
    return ArticleRelation(
        article_path=row["article_path"],
        related_article_path=row["related_article_path"],
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def add_relation(
    conn: sqlite3.Connection,
    article_path: str,
    related_article_path: str,
) -> bool:
    """Record that *article_path* links to *related_article_path*.

    Uses ``INSERT OR IGNORE`` so calling it twice with the same pair is safe.
    Does not commit.

    Returns:
        ``True`` if a new row was written, ``False`` if the edge already existed.
    """
    cursor = conn.execute(
        """
        INSERT OR IGNORE INTO article_relations (article_path, related_article_path, created_at)
        VALUES (?, ?, ?)
        """,
        (article_path, related_article_path, int(time())),
    )
    return cursor.rowcount > 0


def get_relations(conn: sqlite3.Connection, article_path: str) -> list[ArticleRelation]:
    """Return outgoing edges of *article_path*."""
    rows = conn.execute(
        """
        SELECT article_path, related_article_path, created_at
        FROM   article_relations
        WHERE  article_path = ?
        ORDER  BY related_article_path
        """,
        (article_path,),
    ).fetchall()
    return [_row_to_relation(r) for r in rows]


def get_mentions(conn: sqlite3.Connection, article_path: str) -> list[ArticleRelation]:
    """Return incoming edges of *article_path* (articles that link to it)."""
    rows = conn.execute(
        """
        SELECT article_path, related_article_path, created_at
        FROM   article_relations
        WHERE  related_article_path = ?
        ORDER  BY article_path
        """,
        (article_path,),
    ).fetchall()
    return [_row_to_relation(r) for r in rows]


def list_relations(conn: sqlite3.Connection) -> list[ArticleRelation]:
    """Return every edge, ordered by source then target."""
    rows = conn.execute(
        """
        SELECT article_path, related_article_path, created_at
        FROM   article_relations
        ORDER  BY article_path, related_article_path
        """
    ).fetchall()
    return [_row_to_relation(r) for r in rows]
