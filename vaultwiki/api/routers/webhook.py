"""GitHub push webhook.

Routes
------
POST /webhook/github    Push event payload → incremental import

Only pushes to the configured branch (``GIT_BRANCH``) are imported; other
branches are acknowledged and skipped.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from vaultwiki.config import settings
from vaultwiki.db.connection import connection_scope
from vaultwiki.vault.webhook import branch_of, import_from_webhook

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/github")
def github_push(request: Request, payload: dict[str, Any] = Body(...)) -> Any:
    """Import the Markdown files changed by a push to the tracked branch."""
    branch = branch_of(payload)
    if branch != settings.git_branch:
        return {
            "success": True,
            "message": f"Skipped import for branch {branch} (only processing {settings.git_branch})",
        }

    with request.app.state.import_lock, connection_scope() as conn:
        try:
            result = import_from_webhook(
                conn,
                payload,
                wiki_subdir=settings.wiki_directory,
            )
        except Exception as exc:
            logger.exception("Error processing webhook")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "details": str(exc),
                },
            )

    return result.to_dict()
