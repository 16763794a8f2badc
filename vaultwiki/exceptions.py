"""Exception hierarchy for VaultWiki."""

from __future__ import annotations

from typing import Optional


class VaultWikiError(Exception):
    """Base exception for VaultWiki."""


class VaultNotFoundError(VaultWikiError, FileNotFoundError):
    """The vault root (or a required directory inside it) does not exist."""


class VaultImportError(VaultWikiError):
    """An import run failed and its transaction was rolled back.

    Attributes:
        stage: Pipeline stage that failed (``collecting``, ``articles``,
            ``relations``, ``git`` or ``webhook``).
        file: Source file being processed when the failure happened, if any.
    """

    def __init__(self, message: str, stage: str, file: Optional[str] = None) -> None:
        self.stage = stage
        self.file = file
        detail = f"[{stage}] {message}"
        if file:
            detail = f"{detail} (file: {file})"
        super().__init__(detail)
