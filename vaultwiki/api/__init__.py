"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from vaultwiki.api import app

    uvicorn vaultwiki.api:app --reload
"""

from vaultwiki.api.app import app

__all__ = ["app"]
