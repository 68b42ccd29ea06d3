"""Tests for logging configuration."""

import logging

from diet_web.app_logging import configure_logging


def test_configure_logging_installs_one_handler() -> None:
    logger = logging.getLogger("diet_web")
    logger.handlers.clear()

    configure_logging(logging.DEBUG)
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False


def test_module_loggers_use_app_format() -> None:
    logger = logging.getLogger("diet_web")
    logger.handlers.clear()
    configure_logging()
    record = logging.LogRecord(
        "diet_web.services.session", logging.WARNING, __file__, 1, "expired", None, None
    )

    formatted = logger.handlers[0].format(record)

    assert formatted == "WARNING: diet_web.services.session: expired"
