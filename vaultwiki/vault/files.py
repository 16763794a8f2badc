"""Markdown file discovery inside a vault directory."""

from __future__ import annotations

import os
from pathlib import Path

from vaultwiki.exceptions import VaultNotFoundError

MARKDOWN_SUFFIX = ".md"


def collect_markdown_files(root_dir: str | Path) -> list[Path]:
    """Recursively collect every ``*.md`` file under *root_dir*.

    Every subdirectory is visited, hidden ones included, with no depth limit.
    Results are absolute paths in directory-entry order, which is not
    guaranteed to be sorted.

    Raises:
        VaultNotFoundError: If *root_dir* does not exist or is not a directory.
    """
    root = Path(root_dir).resolve()
    if not root.is_dir():
        raise VaultNotFoundError(f"Vault directory not found: {root}")

    files: list[Path] = []
    _walk(root, files)
    return files


def _walk(directory: Path, files: list[Path]) -> None:
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file() and entry.name.endswith(MARKDOWN_SUFFIX):
                files.append(Path(entry.path))
            elif entry.is_dir():
                _walk(Path(entry.path), files)
