"""Incremental import driven by a GitHub push webhook.

Instead of scanning a directory, the Markdown files added or modified by the
pushed commits are downloaded from the raw-content host and run through the
same two import passes as a full import.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx

from vaultwiki.config import settings
from vaultwiki.vault.files import MARKDOWN_SUFFIX
from vaultwiki.vault.frontmatter import FrontmatterParser
from vaultwiki.vault.importer import import_sources
from vaultwiki.vault.models import ImportResult

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, str, str, list[str]], list[tuple[str, str]]]


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------

def branch_of(payload: dict[str, Any]) -> Optional[str]:
    """Branch name of a push payload (``refs/heads/main`` → ``main``)."""
    ref = payload.get("ref")
    if not ref:
        return None
    return ref.removeprefix("refs/heads/")


def repository_of(payload: dict[str, Any]) -> tuple[str, str]:
    """Return ``(owner, repo)`` of a push payload (empty strings if unknown)."""
    repository = payload.get("repository") or {}
    owner_info = repository.get("owner") or {}
    owner = owner_info.get("name") or owner_info.get("login") or ""
    name = repository.get("name") or ""
    if (not owner or not name) and "/" in (repository.get("full_name") or ""):
        owner, name = repository["full_name"].split("/", 1)
    return owner, name


def _in_subdir(file_path: str, wiki_subdir: str) -> bool:
    subdir = wiki_subdir.strip("/")
    return not subdir or file_path.startswith(subdir + "/")


def extract_modified_files(payload: dict[str, Any], wiki_subdir: str = "") -> list[str]:
    """Unique Markdown files added or modified by the pushed commits.

    Only files inside *wiki_subdir* (when given) are kept.  Order is first
    appearance across commits.
    """
    modified: list[str] = []
    for commit in payload.get("commits") or []:
        for file_path in [*(commit.get("added") or []), *(commit.get("modified") or [])]:
            if not file_path.endswith(MARKDOWN_SUFFIX):
                continue
            if not _in_subdir(file_path, wiki_subdir):
                continue
            if file_path not in modified:
                modified.append(file_path)
    return modified


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------

def fetch_file_contents(
    owner: str,
    repo: str,
    branch: str,
    files: list[str],
) -> list[tuple[str, str]]:
    """Download the raw text of *files* at *branch*.

    Files that cannot be fetched are logged and skipped.

    Returns:
        ``(repository path, text)`` pairs for every file fetched.
    """
    contents: list[tuple[str, str]] = []
    base = settings.raw_content_base_url.rstrip("/")

    with httpx.Client(timeout=settings.request_timeout, follow_redirects=True) as client:
        for file_path in files:
            url = f"{base}/{owner}/{repo}/{branch}/{quote(file_path)}"
            logger.info("Fetching content from %s", url)
            try:
                response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.warning("Failed to fetch %s: %s", file_path, exc)
                continue
            contents.append((file_path, response.text))

    return contents


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def import_from_webhook(
    conn: sqlite3.Connection,
    payload: Optional[dict[str, Any]],
    wiki_subdir: Optional[str] = None,
    wiki_root: Optional[str] = None,
    fetch: Fetcher = fetch_file_contents,
    parser: Optional[FrontmatterParser] = None,
) -> ImportResult:
    """Import the Markdown files changed by a push payload.

    Relation resolution only sees the changed files, exactly as a full
    import only sees the files it collected.

    Raises:
        ValueError: If *payload* is missing.
        VaultImportError: If any downloaded file fails to import.
    """
    if not payload:
        raise ValueError("Webhook payload is required")

    subdir = (wiki_subdir if wiki_subdir is not None else settings.wiki_directory).strip("/")
    owner, repo = repository_of(payload)
    branch = branch_of(payload) or settings.git_branch

    logger.info("Processing webhook payload from %s/%s (branch: %s)", owner, repo, branch)

    modified = extract_modified_files(payload, subdir)
    logger.info("Found %d modified markdown files", len(modified))
    if not modified:
        logger.info("No markdown files were modified, skipping import")
        return ImportResult(success=True, message="No markdown files were modified")

    documents = fetch(owner, repo, branch, modified)
    sources = ((name, lambda text=text: text) for name, text in documents)
    return import_sources(
        conn,
        sources,
        subdir or None,
        wiki_root=wiki_root if wiki_root is not None else subdir,
        parser=parser,
        message="Webhook import completed successfully",
    )
