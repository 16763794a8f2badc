"""Database layer package.

Public re-exports so callers can write::

    from vaultwiki.db import get_connection, init_db, transaction
"""

from vaultwiki.db.connection import connection_scope, get_connection, transaction
from vaultwiki.db.migrations import init_db

__all__ = ["connection_scope", "get_connection", "init_db", "transaction"]
