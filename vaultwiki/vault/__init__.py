"""Vault import pipeline package."""

from vaultwiki.vault.files import collect_markdown_files
from vaultwiki.vault.frontmatter import extract_frontmatter
from vaultwiki.vault.importer import import_files, run_import
from vaultwiki.vault.models import ImportResult, ImportStats
from vaultwiki.vault.paths import folder_path_of, format_article_path

__all__ = [
    "collect_markdown_files",
    "extract_frontmatter",
    "folder_path_of",
    "format_article_path",
    "import_files",
    "run_import",
    "ImportResult",
    "ImportStats",
]
