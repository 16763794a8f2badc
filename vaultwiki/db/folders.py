"""Operations on the ``folders`` table.

Folders form a single tree under the ``root`` folder.  Creation is an
upsert-by-unique-key: ``INSERT OR IGNORE`` against the
``(name, IFNULL(parent_id, 0))`` unique index, followed by a keyed lookup,
so two callers racing on the same segment converge on one row.

None of the write helpers commit; the caller owns the transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from vaultwiki.db.models import Folder, FolderTreeNode

logger = logging.getLogger(__name__)

ROOT_FOLDER_NAME = "root"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_folder(row: sqlite3.Row) -> Folder:
    return Folder(
        id=row["id"],
        name=row["name"],
        parent_id=row["parent_id"],
        created_at=row["created_at"],
    )


def _find_folder_id(
    conn: sqlite3.Connection, name: str, parent_id: Optional[int]
) -> Optional[int]:
    row = conn.execute(
        "SELECT id FROM folders WHERE name = ? AND parent_id IS ?",
        (name, parent_id),
    ).fetchone()
    return row["id"] if row else None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_or_create_folder(
    conn: sqlite3.Connection, name: str, parent_id: Optional[int]
) -> int:
    """Return the id of folder *name* under *parent_id*, creating it if absent."""
    cursor = conn.execute(
        "INSERT OR IGNORE INTO folders (name, parent_id) VALUES (?, ?)",
        (name, parent_id),
    )
    if cursor.rowcount:
        logger.info("Created folder %r (id=%d, parent=%s)", name, cursor.lastrowid, parent_id)
        return cursor.lastrowid  # type: ignore[return-value]

    folder_id = _find_folder_id(conn, name, parent_id)
    if folder_id is None:
        raise sqlite3.IntegrityError(
            f"Folder {name!r} under parent {parent_id} was neither inserted nor found"
        )
    logger.debug("Found existing folder %r (id=%d)", name, folder_id)
    return folder_id


def ensure_root_folder(conn: sqlite3.Connection) -> int:
    """Ensure the unique root folder exists and return its id."""
    return get_or_create_folder(conn, ROOT_FOLDER_NAME, None)


def resolve_folder_path(
    conn: sqlite3.Connection,
    folder_path: str,
    cache: Optional[dict[str, int]] = None,
) -> int:
    """Materialise *folder_path* (``"a/b/c"``) under root and return the leaf id.

    Args:
        conn: Open DB connection.
        folder_path: Slash-separated folder path; ``""`` or ``"."`` is root.
        cache: Optional prefix → id memo shared across calls of one import
            run.  Only ids created or found inside the current transaction
            may be stored in it.

    Returns:
        The id of the deepest folder in *folder_path*.
    """
    if cache is not None and folder_path in cache:
        return cache[folder_path]

    current_id = ensure_root_folder(conn)
    if not folder_path or folder_path == ".":
        if cache is not None:
            cache[folder_path] = current_id
        return current_id

    prefix = ""
    for segment in (s for s in folder_path.split("/") if s):
        prefix = f"{prefix}/{segment}" if prefix else segment
        if cache is not None and prefix in cache:
            current_id = cache[prefix]
            continue
        current_id = get_or_create_folder(conn, segment, current_id)
        if cache is not None:
            cache[prefix] = current_id

    if cache is not None:
        cache[folder_path] = current_id
    return current_id


def get_folder(conn: sqlite3.Connection, folder_id: int) -> Optional[Folder]:
    """Fetch a single folder by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM folders WHERE id = ?", (folder_id,)).fetchone()
    return _row_to_folder(row) if row else None


def list_folders(conn: sqlite3.Connection) -> list[Folder]:
    """Return all folders ordered by id."""
    rows = conn.execute("SELECT * FROM folders ORDER BY id").fetchall()
    return [_row_to_folder(r) for r in rows]


def get_folder_tree(conn: sqlite3.Connection) -> Optional[FolderTreeNode]:
    """Return the nested folder tree rooted at ``root`` (``None`` when empty).

    Each node carries its articles as ``{"title", "path"}`` dicts.  Child
    folders and articles are sorted by name / title.
    """
    folders = list_folders(conn)
    if not folders:
        return None

    nodes = {
        f.id: FolderTreeNode(id=f.id, name=f.name, parent_id=f.parent_id)
        for f in folders
    }
    for row in conn.execute(
        "SELECT title, path, folder_id FROM articles ORDER BY title, path"
    ):
        node = nodes.get(row["folder_id"])
        if node is not None:
            node.articles.append({"title": row["title"], "path": row["path"]})

    root: Optional[FolderTreeNode] = None
    for node in nodes.values():
        if node.parent_id is None:
            if node.name == ROOT_FOLDER_NAME:
                root = node
        elif node.parent_id in nodes:
            nodes[node.parent_id].children.append(node)

    for node in nodes.values():
        node.children.sort(key=lambda n: n.name.lower())
    return root
