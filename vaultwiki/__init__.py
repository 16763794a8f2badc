"""VaultWiki: imports an Obsidian vault into SQLite and serves it as a wiki."""

__version__ = "0.1.0"
