"""Logging setup shared by the FairSplit API, allocation engine, and counter store.

Messages use a pipe-separated `key=value` tail (for example
`Rent split computed | rooms=3 | currency=EUR`) so request logs stay greppable.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from backend.utils.config import get_settings


_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stdout handler once, at `FAIRSPLIT_LOG_LEVEL` unless `level` is given.

    Later calls are no-ops, so the first module imported decides the level.
    """

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    settings = get_settings()
    resolved_level = (level or settings.log_level).upper()

    logging.basicConfig(
        level=resolved_level,
        format=(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        ),
        stream=sys.stdout,
    )
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for `name`, configuring the root handler on first use."""
    configure_logging()
    return logging.getLogger(name)
