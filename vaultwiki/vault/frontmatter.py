"""YAML frontmatter extraction.

A note may start with a block delimited by two lines containing exactly
``---``.  The enclosed text is decoded by a pluggable parser (PyYAML's
``safe_load`` by default).  Extraction never fails: anything unusable falls
back to empty metadata and the whole trimmed text as content.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Any, Callable, Optional

import yaml

logger = logging.getLogger(__name__)

FrontmatterParser = Callable[[str], Any]

FRONTMATTER_PATTERN = re.compile(
    r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def _to_json_value(value: Any) -> Any:
    """Coerce decoded YAML into values ``json.dumps`` accepts."""
    if isinstance(value, dict):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_json_value(v) for v in value]
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def extract_frontmatter(
    raw_text: str,
    parser: Optional[FrontmatterParser] = None,
    source: str = "<text>",
) -> tuple[dict[str, Any], str]:
    """Split *raw_text* into ``(metadata, content)``.

    Args:
        raw_text: Full file text.
        parser: Callable turning the block text into a mapping; it may raise.
            Defaults to :func:`yaml.safe_load`.
        source: Name used in the warning logged when the block is unusable.

    Returns:
        The decoded metadata (``{}`` on fallback) and the body with the
        frontmatter block removed and surrounding whitespace trimmed.
    """
    parse = parser or yaml.safe_load
    match = FRONTMATTER_PATTERN.match(raw_text)
    if not match:
        return {}, raw_text.strip()

    try:
        metadata = parse(match.group(1))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error parsing frontmatter in %s: %s", source, exc)
        return {}, raw_text.strip()

    if not isinstance(metadata, dict):
        logger.warning(
            "Frontmatter in %s is not a mapping (got %s); ignoring it",
            source,
            type(metadata).__name__,
        )
        return {}, raw_text.strip()

    return _to_json_value(metadata), raw_text[match.end():].strip()
