"""Keyword search over article titles and bodies via SQLite FTS5."""

from __future__ import annotations

import re
import sqlite3

from vaultwiki.db.articles import _row_to_article
from vaultwiki.db.models import Article

MIN_QUERY_LENGTH = 2

_TOKEN_RE = re.compile(r"\w{2,}", re.UNICODE)


def _sanitize_fts_query(text: str) -> str:
    """Convert a search-bar string into a safe FTS5 query expression.

    FTS5 treats punctuation as query operators, which causes
    ``OperationalError: fts5: syntax error`` on raw user input.  Each word
    token (≥2 chars) is quoted as a phrase literal with a prefix wildcard so
    partially typed words still match; tokens are joined with implicit AND.
    Returns ``""`` when no tokens survive.
    """
    seen: set[str] = set()
    unique: list[str] = []
    for token in _TOKEN_RE.findall(text):
        if token.lower() not in seen:
            seen.add(token.lower())
            unique.append(token)
    return " ".join(f'"{t}"*' for t in unique)


def search_articles(conn: sqlite3.Connection, query: str, limit: int = 20) -> list[Article]:
    """Return up to *limit* articles whose title or content matches *query*.

    Queries shorter than two characters return an empty list.
    """
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        return []

    fts_query = _sanitize_fts_query(query)
    if not fts_query:
        return []

    rows = conn.execute(
        """
        SELECT a.*
        FROM   articles a
        JOIN   articles_fts f ON a.path = f.path
        WHERE  articles_fts MATCH ?
        ORDER  BY bm25(articles_fts)
        LIMIT  ?
        """,
        (fts_query, limit),
    ).fetchall()
    return [_row_to_article(r) for r in rows]
