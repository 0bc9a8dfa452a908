"""Logging configuration for the chatterbrain package."""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LEVEL_ENV_VAR = "CHATTERBRAIN_LOG_LEVEL"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LEVEL_ENV_VAR, logging.INFO)
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        msg = f"Unknown log level {level!r}"
        raise ValueError(msg)
    return resolved


def configure_logging(level: Union[int, str, None] = None, handler: Optional[logging.Handler] = None) -> None:
    """Configure root logging with a consistent format.

    ``level`` may be a number or a name such as ``"debug"``; when omitted the
    ``CHATTERBRAIN_LOG_LEVEL`` environment variable is used, falling back to INFO.
    """
    logging.basicConfig(level=_resolve_level(level), format=_DEFAULT_FORMAT, handlers=[handler] if handler else None)


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured for the given ``name``."""
    return logging.getLogger(name)
