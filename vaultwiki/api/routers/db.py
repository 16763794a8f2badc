"""Import and flush endpoints.

Routes
------
POST /db/import   Body: {"mode": "local" | "local-git", ...}   → ImportResult
POST /db/flush    Delete every relation, article and folder
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from vaultwiki.config import settings
from vaultwiki.db.connection import connection_scope
from vaultwiki.db.flush import flush_database
from vaultwiki.vault.git import import_from_local_git
from vaultwiki.vault.importer import run_import

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ImportRequest(BaseModel):
    mode: Literal["local", "local-git"] = "local"
    vault_path: Optional[str] = None
    vault_subdir: Optional[str] = None
    local_git_path: Optional[str] = None
    branch: Optional[str] = None


class ImportStatsResponse(BaseModel):
    articlesImported: int
    relationsCreated: int


class ImportResponse(BaseModel):
    success: bool
    message: str
    stats: ImportStatsResponse


class FlushResponse(BaseModel):
    success: bool
    message: str
    counts: dict[str, int]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "details": str(exc)},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/import", response_model=ImportResponse)
def import_vault(request: Request, body: Optional[ImportRequest] = None) -> Any:
    """Import the vault from a directory or a local Git checkout.

    Runs on its own connection; readers on the shared connection see the
    previous committed state until the import commits.
    On failure the import transaction has already been rolled back.
    """
    body = body or ImportRequest()

    with request.app.state.import_lock, connection_scope() as conn:
        try:
            if body.mode == "local-git":
                result = import_from_local_git(
                    conn,
                    repo_path=body.local_git_path,
                    branch=body.branch,
                    wiki_subdir=body.vault_subdir,
                )
            else:
                vault_path = body.vault_path or settings.vault_path
                if not vault_path:
                    raise ValueError("VAULT_PATH is not set and no vault_path was given")
                result = run_import(
                    conn,
                    vault_path,
                    vault_subdir=body.vault_subdir,
                    wiki_root=settings.wiki_directory,
                )
        except Exception as exc:
            logger.exception("Error importing content")
            return _error_response(exc)

    return result.to_dict()


@router.post("/flush", response_model=FlushResponse)
def flush(request: Request) -> Any:
    """Delete all imported content in dependency order."""
    with request.app.state.import_lock, connection_scope() as conn:
        try:
            counts = flush_database(conn)
        except Exception as exc:
            logger.exception("Error flushing database")
            return _error_response(exc)

    return {"success": True, "message": "Database flushed successfully", "counts": counts}
