"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class Folder:
    id: int
    name: str
    parent_id: Optional[int]
    created_at: int


@dataclass
class Article:
    path: str
    title: str
    content: str
    metadata: dict[str, Any]
    folder_id: int
    created_at: int
    updated_at: int

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def metadata_json(self) -> str:
        """Serialise metadata dict to a JSON string for storage."""
        return json.dumps(self.metadata)

    def summary(self) -> dict[str, Any]:
        """The shape used for related / mention lists."""
        return {
            "title": self.title,
            "content": self.content,
            "path": self.path,
            "metadata": self.metadata,
        }


@dataclass
class ArticleRelation:
    article_path: str
    related_article_path: str
    created_at: int


@dataclass
class ArticleDetail:
    """An article together with its outgoing and incoming relations."""

    article: Article
    related_articles: list[Article] = field(default_factory=list)
    mention_articles: list[Article] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = self.article.summary()
        data["folder_id"] = self.article.folder_id
        data["related_articles"] = [a.summary() for a in self.related_articles]
        data["mention_articles"] = [a.summary() for a in self.mention_articles]
        return data


@dataclass
class FolderTreeNode:
    id: int
    name: str
    parent_id: Optional[int]
    articles: list[dict[str, str]] = field(default_factory=list)
    children: list[FolderTreeNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
