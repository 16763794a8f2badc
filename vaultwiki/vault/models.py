"""Data models for the vault import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ImportState(str, Enum):
    """Lifecycle of one import run."""

    IDLE = "idle"
    COLLECTING = "collecting"
    UPSERTING_ARTICLES = "upserting_articles"
    RESOLVING_RELATIONS = "resolving_relations"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class ArticleRecord:
    """An article processed in pass one, as seen by relation resolution."""

    path: str
    title: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    folder_id: int | None = None


@dataclass
class ImportStats:
    articles_imported: int = 0
    relations_created: int = 0


@dataclass
class ImportResult:
    success: bool
    message: str
    stats: ImportStats = field(default_factory=ImportStats)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape returned by the API and printed by the CLI."""
        return {
            "success": self.success,
            "message": self.message,
            "stats": {
                "articlesImported": self.stats.articles_imported,
                "relationsCreated": self.stats.relations_created,
            },
        }
