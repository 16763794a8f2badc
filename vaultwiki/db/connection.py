"""SQLite connection factory and transaction scope.

Usage::

    from vaultwiki.db.connection import get_connection, transaction

    conn = get_connection()
    with transaction(conn):
        conn.execute("INSERT INTO folders(name) VALUES ('root')")
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from vaultwiki.config import settings


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    Steps performed on every new connection:
    1. Enable ``PRAGMA foreign_keys = ON``.
    2. Switch to WAL journal mode for concurrent readers.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A configured :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    # Autocommit mode: multi-statement work goes through transaction().
    conn = sqlite3.connect(str(path), check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row

    # PRAGMAs
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")

    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the enclosed block as one atomic unit of work.

    Commits when the block exits normally and rolls back on *any* exception,
    including ``KeyboardInterrupt`` and task cancellation, before re-raising.
    Write helpers in :mod:`vaultwiki.db` never commit on their own, so every
    write issued inside the block belongs to this transaction.
    """
    conn.execute("BEGIN")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    else:
        conn.commit()


@contextmanager
def connection_scope(db_path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    """Open a dedicated connection for the enclosed block and close it after.

    Long-running writers (imports, flushes) use their own connection so the
    shared read connection only ever sees committed rows.
    """
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()
