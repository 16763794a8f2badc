"""Logging configuration shared by the CLI and the API.

Every module logs through ``logging.getLogger(__name__)``; this module only
attaches handlers to the ``vaultwiki`` package logger.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATE_FORMAT = "%d/%m/%Y-%H:%M:%S"


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """Attach a console handler (and optionally a file handler) to ``vaultwiki``.

    Calling it again replaces the handlers installed by a previous call, so
    the CLI and the API lifespan can both call it safely.
    """
    root = logging.getLogger("vaultwiki")
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        if getattr(handler, "_vaultwiki", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._vaultwiki = True  # type: ignore[attr-defined]
    root.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._vaultwiki = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    return root
