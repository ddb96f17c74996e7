"""Logging setup for the payroll_office logger hierarchy."""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, Union

_LOGGER_NAME = "payroll_office"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: Union[int, str] = logging.INFO, *, stream: Any = None) -> None:
    """Install one stream handler on the package logger (idempotent)."""
    global _configured
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if _configured:
        return
    _configured = True

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)


def reset_logging(level: Optional[int] = logging.WARNING) -> None:
    """Drop handlers installed by configure_logging. Used by tests."""
    global _configured
    _configured = False
    logger = logging.getLogger(_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)
