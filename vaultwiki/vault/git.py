"""Import from a local Git checkout of the vault.

The checkout is switched to the configured branch and, when ``origin`` has
that branch, fast-forwarded with ``git pull`` before the wiki directory is
imported with :func:`~vaultwiki.vault.importer.run_import`.
"""

from __future__ import annotations

import logging
import sqlite3
import subprocess
from pathlib import Path
from typing import Optional

from vaultwiki.config import settings
from vaultwiki.exceptions import VaultImportError, VaultNotFoundError
from vaultwiki.vault.frontmatter import FrontmatterParser
from vaultwiki.vault.importer import run_import
from vaultwiki.vault.models import ImportResult

logger = logging.getLogger(__name__)


def _git(repo_path: Path, *args: str) -> str:
    """Run ``git -C <repo_path> <args>`` and return its stdout."""
    try:
        completed = subprocess.run(
            ["git", "-C", str(repo_path), *args],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        stderr = getattr(exc, "stderr", "") or ""
        raise VaultImportError(
            f"git {' '.join(args)} failed: {stderr.strip() or exc}", stage="git"
        ) from exc
    return completed.stdout


def sync_repository(repo_path: Path, branch: str) -> None:
    """Check out *branch* and pull it from ``origin`` when the remote has it."""
    _git(repo_path, "checkout", branch)
    logger.info("Checked out branch: %s", branch)

    if not _git(repo_path, "remote").strip():
        logger.info("No remote configured, using local branch only")
        return

    if not _git(repo_path, "ls-remote", "--heads", "origin", branch).strip():
        logger.info("No remote branch %s found, using local branch", branch)
        return

    _git(repo_path, "pull", "origin", branch)
    logger.info("Pulled latest changes from origin/%s", branch)


def import_from_local_git(
    conn: sqlite3.Connection,
    repo_path: Optional[str | Path] = None,
    branch: Optional[str] = None,
    wiki_subdir: Optional[str] = None,
    wiki_root: Optional[str] = None,
    parser: Optional[FrontmatterParser] = None,
) -> ImportResult:
    """Update a local Git checkout and import its wiki directory.

    Unset arguments fall back to ``LOCAL_GIT_PATH``, ``GIT_BRANCH`` and
    ``WIKI_DIRECTORY``.

    Raises:
        VaultNotFoundError: If the repository or wiki directory is missing.
        VaultImportError: If a git command or the import fails.
    """
    path = Path(repo_path) if repo_path else settings.local_git_path
    if path is None:
        raise VaultNotFoundError(
            "Local Git path is not provided and LOCAL_GIT_PATH is not set"
        )
    git_branch = branch or settings.git_branch
    subdir = (wiki_subdir if wiki_subdir is not None else settings.wiki_directory).strip("/")

    logger.info(
        "Importing from local Git repository: %s (branch: %s, subdir: %s)",
        path,
        git_branch,
        subdir or "root",
    )

    if not (path / ".git").exists():
        raise VaultNotFoundError(f"No Git repository found at {path}")

    sync_repository(path, git_branch)

    return run_import(
        conn,
        path,
        vault_subdir=subdir or None,
        wiki_root=wiki_root if wiki_root is not None else subdir,
        parser=parser,
    )
