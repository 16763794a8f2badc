"""Article read endpoints.

Routes
------
GET /articles/paths           Every article path (for static page generation)
GET /articles/search?q=...    Keyword search over titles and bodies
GET /articles/{path}          One article with related and mentioning articles
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from vaultwiki.db.articles import get_article_detail, list_article_paths
from vaultwiki.db.search import search_articles

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class ArticleSummary(BaseModel):
    title: str
    content: str
    path: str
    metadata: dict[str, Any]


class ArticleResponse(ArticleSummary):
    folder_id: int
    related_articles: list[ArticleSummary]
    mention_articles: list[ArticleSummary]


class SearchResponse(BaseModel):
    articles: list[ArticleSummary]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/paths", response_model=list[str])
def paths(request: Request) -> list[str]:
    """Return every article path, sorted."""
    return list_article_paths(request.app.state.db)


@router.get("/search", response_model=SearchResponse)
def search(request: Request, q: str = "", limit: int = 20) -> dict[str, Any]:
    """Search articles; queries shorter than two characters return nothing."""
    articles = search_articles(request.app.state.db, q, limit=limit)
    return {"articles": [a.summary() for a in articles]}


@router.get("/{path:path}", response_model=ArticleResponse)
def get_article(path: str, request: Request) -> dict[str, Any]:
    """Fetch an article (or a folder's ``index`` article) by path."""
    detail = get_article_detail(request.app.state.db, path.strip("/"))
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Article not found: {path!r}")
    return detail.to_dict()
