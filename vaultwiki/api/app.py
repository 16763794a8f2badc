"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging, opens a single SQLite read connection
(shared across requests via ``request.app.state.db``) and initialises the
schema.  Imports and flushes open their own connection for the length of
the run, so readers only see committed rows.  On shutdown the read
connection is closed.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /articles  article lookup, path listing, keyword search
    /folders   folder tree for the navigation sidebar
    /db        import and flush operations
    /webhook   GitHub push webhook (incremental import)
"""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vaultwiki import __version__
from vaultwiki.config import settings
from vaultwiki.db import get_connection, init_db
from vaultwiki.logging_setup import configure_logging

from vaultwiki.api.routers import articles as articles_router
from vaultwiki.api.routers import db as db_router
from vaultwiki.api.routers import folders as folders_router
from vaultwiki.api.routers import webhook as webhook_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB on startup and close it on shutdown."""
    configure_logging(settings.log_level, settings.log_file)
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    try:
        yield
    finally:
        conn.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="VaultWiki API",
        description=(
            "Serves an imported Obsidian vault: articles with their related "
            "and mentioning articles, keyword search, the folder tree, and "
            "import / flush operations."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Imports and flushes mutate the whole store; run at most one at a time.
    app.state.import_lock = threading.Lock()

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(articles_router.router, prefix="/articles", tags=["articles"])
    app.include_router(folders_router.router, prefix="/folders", tags=["folders"])
    app.include_router(db_router.router, prefix="/db", tags=["db"])
    app.include_router(webhook_router.router, prefix="/webhook", tags=["webhook"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn vaultwiki.api.app:app --reload
app = create_app()
