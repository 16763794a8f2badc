"""Canonical article paths, folder paths and titles."""

from __future__ import annotations

import posixpath
from pathlib import Path, PurePosixPath

from vaultwiki.vault.files import MARKDOWN_SUFFIX

INDEX_NAME = "index"


def _to_slashes(value: str | Path) -> str:
    return str(value).replace("\\", "/")


def format_article_path(file_path: str | Path, vault_root: str | Path | None) -> str:
    """Return the canonical storage path of *file_path* inside *vault_root*.

    The vault root (and its trailing separator) is stripped, separators
    become ``/``, the ``.md`` extension is dropped and spaces become ``_``::

        >>> format_article_path("/vault/a/b c.md", "/vault")
        'a/b_c'

    An empty *vault_root* formats an already-relative path.
    """
    path = _to_slashes(file_path)
    root = _to_slashes(vault_root) if vault_root else ""
    if root and root != ".":
        root = posixpath.normpath(root).rstrip("/")
        if path.startswith(root + "/"):
            path = path[len(root) + 1:]
    path = path.lstrip("/")
    if path.endswith(MARKDOWN_SUFFIX):
        path = path[: -len(MARKDOWN_SUFFIX)]
    return path.replace(" ", "_")


def folder_path_of(article_path: str) -> str:
    """Everything before the last segment of *article_path*; ``""`` means root."""
    head, sep, _ = article_path.rpartition("/")
    return head if sep else ""


def article_title(file_path: str | Path) -> str:
    """Title of the note at *file_path*: its file name without ``.md``.

    A note named ``index`` takes the name of its parent directory instead.
    """
    pure = PurePosixPath(_to_slashes(file_path))
    name = pure.name
    if name.endswith(MARKDOWN_SUFFIX):
        name = name[: -len(MARKDOWN_SUFFIX)]
    if name == INDEX_NAME and pure.parent.name:
        return pure.parent.name
    return name
