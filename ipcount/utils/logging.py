# ipcount/utils/logging.py

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER = "ipcount"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger living under the package namespace.

    Module loggers are created with ``get_logger(__name__)``; names outside
    the package are nested under ``ipcount`` so a single handler covers them.
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str = "WARNING", *, to_file: Optional[str] = None) -> None:
    if to_file:
        handler: logging.Handler = logging.FileHandler(to_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers.clear()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.addHandler(handler)
