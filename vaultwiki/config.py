"""Centralised settings for the VaultWiki backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _optional_path(var: str) -> Optional[Path]:
    value = os.environ.get(var)
    return Path(value) if value else None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("VAULTWIKI_WORKSPACE", Path.home() / ".vaultwiki_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "wiki.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Vault source
    # ------------------------------------------------------------------
    vault_path: Optional[Path] = field(
        default_factory=lambda: _optional_path("VAULT_PATH")
    )
    # Subdirectory holding the wiki inside a repository, and the prefix
    # used by root-relative wiki links such as [[Wiki/Topics/Fireball]].
    wiki_directory: str = field(
        default_factory=lambda: os.environ.get("WIKI_DIRECTORY", "")
    )
    local_git_path: Optional[Path] = field(
        default_factory=lambda: _optional_path("LOCAL_GIT_PATH")
    )
    git_branch: str = field(
        default_factory=lambda: os.environ.get("GIT_BRANCH", "main")
    )

    # ------------------------------------------------------------------
    # Webhook fetches
    # ------------------------------------------------------------------
    raw_content_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "RAW_CONTENT_BASE_URL", "https://raw.githubusercontent.com"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )
    log_file: Optional[Path] = field(
        default_factory=lambda: _optional_path("LOG_FILE")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from vaultwiki.config import settings
settings = Settings()
