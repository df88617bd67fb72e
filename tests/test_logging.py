from __future__ import annotations

import logging

from backend.utils.logger import configure_logging, get_logger


def test_get_logger_returns_named_module_logger() -> None:
    logger = get_logger("backend.services.allocation_service")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "backend.services.allocation_service"


def test_configure_logging_is_idempotent() -> None:
    get_logger(__name__)
    handlers_before = list(logging.getLogger().handlers)
    configure_logging("DEBUG")
    assert logging.getLogger().handlers == handlers_before
