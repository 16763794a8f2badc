"""Folder tree endpoint.

Routes
------
GET /folders/tree    Nested folders with their articles, rooted at ``root``
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request

from vaultwiki.db.folders import get_folder_tree

router = APIRouter()


@router.get("/tree")
def tree(request: Request) -> Optional[dict[str, Any]]:
    """Return the folder tree, or ``null`` before the first import."""
    root = get_folder_tree(request.app.state.db)
    return root.to_dict() if root else None
