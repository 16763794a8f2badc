"""Database initialisation and migration helpers.

``init_db(conn)`` is idempotent and safe to call on an existing database.
``migrate(conn)`` applies the pending entries of ``MIGRATIONS`` and records
each one in the ``schema_version`` table.
"""

from __future__ import annotations

import logging
import sqlite3

from vaultwiki.config import settings
from vaultwiki.db.connection import transaction

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_schema() -> str:
    """Load the bundled schema.sql."""
    return settings.schema_path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables, indexes, triggers, and virtual tables.

    This function is **idempotent**: every DDL statement uses ``IF NOT EXISTS``
    so calling it multiple times on the same database is safe.

    Args:
        conn: An open, configured SQLite connection.
    """
    sql = _read_schema()
    # executescript() handles compound statements (BEGIN…END in triggers).
    # It issues an implicit COMMIT before execution, which is fine for
    # DDL-only scripts.
    conn.executescript(sql)
    _ensure_version_table(conn)
    migrate(conn)


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            version    INTEGER PRIMARY KEY,
            applied_at INTEGER DEFAULT (unixepoch())
        )
        """
    )


def current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration version (0 if none applied)."""
    row = conn.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_version"
    ).fetchone()
    return row[0] if row else 0


# Ordered (version, sql) changes layered on top of schema.sql.  Append new
# entries here; never renumber or edit an entry that has shipped.
MIGRATIONS: list[tuple[int, str]] = []


def migrate(conn: sqlite3.Connection) -> int:
    """Apply every entry of :data:`MIGRATIONS` newer than the stored version.

    Each migration runs in its own transaction together with its
    ``schema_version`` row, so a failing statement leaves the version where
    it was and the error propagates.

    Returns:
        The number of migrations applied.
    """
    applied = current_version(conn)
    pending = [(v, sql) for v, sql in sorted(MIGRATIONS) if v > applied]
    for version, sql in pending:
        with transaction(conn):
            conn.execute(sql)
            conn.execute("INSERT INTO schema_version(version) VALUES (?)", (version,))
        logger.info("Applied schema migration %d", version)
    return len(pending)
