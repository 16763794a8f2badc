"""Utilities for rendering the folder tree in the CLI."""

from __future__ import annotations

from vaultwiki.db.models import FolderTreeNode

FOLDER_ICON = "📁"
ARTICLE_ICON = "📄"


def render_folder_tree(root: FolderTreeNode, show_articles: bool = True) -> str:
    """Render the folder tree as ASCII art.

    Args:
        root: The ``root`` folder node returned by ``get_folder_tree``.
        show_articles: Also list the articles of every folder.

    Returns:
        String representation of the tree.
    """
    lines = [f"{FOLDER_ICON} {root.name}"]

    def _render(node: FolderTreeNode, prefix: str) -> None:
        entries: list[tuple[str, FolderTreeNode | None]] = [
            (f"{FOLDER_ICON} {child.name}", child) for child in node.children
        ]
        if show_articles:
            entries += [
                (f"{ARTICLE_ICON} {a['title']} ({a['path']})", None)
                for a in node.articles
            ]

        count = len(entries)
        for i, (label, child) in enumerate(entries):
            is_last = i == count - 1
            connector = "└── " if is_last else "├── "
            lines.append(f"{prefix}{connector}{label}")
            if child is not None:
                _render(child, prefix + ("    " if is_last else "│   "))

    _render(root, "")
    return "\n".join(lines)
