"""Shared log format for the journal tools: one stream handler, UTC timestamps."""

from __future__ import annotations

import logging
import time
from typing import Optional

from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_HANDLER_NAME = "tradejournal-root-handler"


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or settings.log_level).upper()
    return getattr(logging, name, logging.INFO)


def _journal_handler(root: logging.Logger) -> Optional[logging.Handler]:
    for handler in root.handlers:
        if handler.name == _HANDLER_NAME:
            return handler
    return None


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Attach the journal handler once; later calls only change the level.

    Without an explicit level the ``LOG_LEVEL`` setting applies.
    """
    root = logging.getLogger()
    handler = _journal_handler(root)
    if handler is None:
        handler = logging.StreamHandler()
        handler.name = _HANDLER_NAME
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        root.addHandler(handler)

    resolved = _resolve_level(level)
    root.setLevel(resolved)
    handler.setLevel(resolved)
    return root


def get_logger(name: str) -> logging.Logger:
    if _journal_handler(logging.getLogger()) is None:
        setup_logging()
    return logging.getLogger(name)
