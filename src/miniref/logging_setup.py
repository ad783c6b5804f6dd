from __future__ import annotations

import logging
import sys

APP_LOGGER = "miniref"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a console handler to the ``miniref`` logger (once)."""
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug("Logging initialized at %s", logging.getLevelName(logger.level))
    return logger
