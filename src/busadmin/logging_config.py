"""Console logging setup (stdout only, cloud friendly)."""

from __future__ import annotations

import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the package logger."""
    logger = logging.getLogger(__package__)
    logger.setLevel(level or settings.log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Remove any pre-existing handlers to avoid duplicates
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(handler)
    return logger
