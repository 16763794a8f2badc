"""Operations on the ``articles`` table.

Articles are keyed by their canonical ``path``.  ``upsert_article`` inserts
or fully replaces ``title``, ``content``, ``metadata`` and ``folder_id``; the
path itself never changes once created.  Write helpers do not commit.
"""

from __future__ import annotations

import json
import sqlite3
from time import time
from typing import Any, Optional

from vaultwiki.db.models import Article, ArticleDetail


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_article(row: sqlite3.Row) -> Article:
    return Article(
        path=row["path"],
        title=row["title"],
        content=row["content"],
        metadata=json.loads(row["metadata"] or "{}"),
        folder_id=row["folder_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def upsert_article(
    conn: sqlite3.Connection,
    path: str,
    title: str,
    content: str,
    metadata: dict[str, Any],
    folder_id: int,
) -> Article:
    """Insert the article at *path*, or replace its mutable fields.

    Returns:
        The stored :class:`~vaultwiki.db.models.Article`, read back from the
        same statement via ``RETURNING``.
    """
    now = int(time())
    rows = conn.execute(
        """
        INSERT INTO articles (path, title, content, metadata, folder_id, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(path) DO UPDATE SET
            title      = excluded.title,
            content    = excluded.content,
            metadata   = excluded.metadata,
            folder_id  = excluded.folder_id,
            updated_at = excluded.updated_at
        RETURNING *
        """,
        (path, title, content, json.dumps(metadata), folder_id, now, now),
    ).fetchall()
    return _row_to_article(rows[0])


def get_article(conn: sqlite3.Connection, path: str) -> Optional[Article]:
    """Fetch a single article by exact path.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM articles WHERE path = ?", (path,)).fetchone()
    return _row_to_article(row) if row else None


def get_article_detail(conn: sqlite3.Connection, path: str) -> Optional[ArticleDetail]:
    """Fetch an article with its related (outgoing) and mention (incoming) articles.

    ``path`` also matches a folder's ``index`` article, so ``Topics`` finds
    ``Topics/index`` when no article is stored at ``Topics`` itself.
    """
    article = get_article(conn, path) or get_article(conn, f"{path}/index")
    if article is None:
        return None

    related = conn.execute(
        """
        SELECT DISTINCT a.*
        FROM   article_relations r
        JOIN   articles a ON a.path = r.related_article_path
        WHERE  r.article_path = ?
        ORDER  BY a.path
        """,
        (article.path,),
    ).fetchall()
    mentions = conn.execute(
        """
        SELECT DISTINCT a.*
        FROM   article_relations r
        JOIN   articles a ON a.path = r.article_path
        WHERE  r.related_article_path = ?
        ORDER  BY a.path
        """,
        (article.path,),
    ).fetchall()

    return ArticleDetail(
        article=article,
        related_articles=[_row_to_article(r) for r in related],
        mention_articles=[_row_to_article(r) for r in mentions],
    )


def list_article_paths(conn: sqlite3.Connection) -> list[str]:
    """Return every article path, sorted."""
    rows = conn.execute("SELECT path FROM articles ORDER BY path").fetchall()
    return [r["path"] for r in rows]


def list_articles(
    conn: sqlite3.Connection, folder_id: Optional[int] = None
) -> list[Article]:
    """Return all articles, optionally restricted to one folder."""
    if folder_id is not None:
        rows = conn.execute(
            "SELECT * FROM articles WHERE folder_id = ? ORDER BY path", (folder_id,)
        ).fetchall()
    else:
        rows = conn.execute("SELECT * FROM articles ORDER BY path").fetchall()
    return [_row_to_article(r) for r in rows]
