"""
Logging for the badminton_group package.

Modules log through get_logger(__name__). The presentation layer calls
setup_logging() once at start-up; LOG_LEVEL (DEBUG|INFO|WARNING|ERROR|CRITICAL)
picks the level, and DEBUG shows every ledger entry and match transition.
"""
from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER = "badminton_group"

VERBOSE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONCISE_FORMAT = "%(levelname).1s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the package logger and set its level."""
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = logging.getLevelName(name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stdout)
    fmt = VERBOSE_FORMAT if numeric_level <= logging.DEBUG else CONCISE_FORMAT
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
