"""Logging configuration helpers."""

import logging
import os


def configure_logging() -> None:
    """Configure the alcotrack logger with a single stream handler.

    The level comes from ALCOTRACK_LOG_LEVEL (default INFO).
    """
    logger = logging.getLogger("alcotrack")
    level = logging.getLevelName(os.environ.get("ALCOTRACK_LOG_LEVEL", "INFO").upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
