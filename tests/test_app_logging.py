"""Tests for logging configuration."""

import logging

from alcotrack.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("alcotrack")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_level_from_environment(monkeypatch) -> None:
    logger = logging.getLogger("alcotrack")
    monkeypatch.setenv("ALCOTRACK_LOG_LEVEL", "debug")
    configure_logging()
    assert logger.level == logging.DEBUG

    monkeypatch.setenv("ALCOTRACK_LOG_LEVEL", "chatty")
    configure_logging()
    assert logger.level == logging.INFO
