"""Wiki-link parsing and resolution.

Links look like ``[[Target]]`` or ``[[Target|Display]]``.  A target is
resolved against the articles of one import run in two ways:

1. Root-relative: ``[[<wiki root>/Topics/Fireball]]`` names a path directly.
2. Title: ``[[Fireball]]`` matches the article titled ``Fireball``
   (spaces and underscores are equivalent).

A root-relative target never falls back to title matching.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, NamedTuple, Optional, Protocol

from vaultwiki.vault.paths import format_article_path

logger = logging.getLogger(__name__)

# Pattern for wiki links: [[PageName]] or [[PageName|Display Text]]
WIKI_LINK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")


class WikiLink(NamedTuple):
    target: str
    display: Optional[str]


class _Titled(Protocol):
    path: str
    title: str


def parse_wiki_links(content: str) -> list[WikiLink]:
    """Extract all wiki links from *content*, in order of appearance."""
    links = []
    for match in WIKI_LINK_PATTERN.finditer(content):
        target, sep, display = match.group(1).partition("|")
        links.append(WikiLink(target.strip(), display.strip() if sep else None))
    return links


def normalize_title(title: str) -> str:
    return title.strip().replace(" ", "_")


@dataclass(frozen=True)
class LinkIndex:
    """Immutable lookup tables over one batch of articles.

    Build it once per import run with :meth:`build`; every link of the run
    is then resolved without rescanning the batch.
    """

    paths: frozenset[str]
    titles: Mapping[str, str]
    wiki_root: str = ""
    ambiguous: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls, articles: Mapping[str, _Titled], wiki_root: Optional[str] = None
    ) -> LinkIndex:
        """Index *articles* (path → record) by normalized title.

        When several articles share a normalized title, the one whose path
        sorts first wins and a warning is logged.
        """
        titles: dict[str, str] = {}
        ambiguous: set[str] = set()
        for path in sorted(articles):
            key = normalize_title(articles[path].title)
            if key in titles:
                ambiguous.add(key)
                continue
            titles[key] = path

        for key in sorted(ambiguous):
            logger.warning(
                "Ambiguous title %r: links by title resolve to %s", key, titles[key]
            )

        return cls(
            paths=frozenset(articles),
            titles=titles,
            wiki_root=(wiki_root or "").replace("\\", "/").strip("/"),
            ambiguous=frozenset(ambiguous),
        )

    def resolve(self, target: str) -> Optional[str]:
        """Return the path *target* refers to, or ``None`` when unresolved."""
        target = target.strip()
        if self.wiki_root and target.replace("\\", "/").startswith(self.wiki_root + "/"):
            relative = target[len(self.wiki_root) + 1:].rstrip("\\")
            candidate = format_article_path(relative, "")
            return candidate if candidate in self.paths else None

        return self.titles.get(normalize_title(target))
