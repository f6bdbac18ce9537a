"""Logging setup shared by every notemark module."""

import logging
import os
import sys

LOG_LEVEL_ENV = "NOTEMARK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: str | None) -> int:
    name = (level or os.getenv(LOG_LEVEL_ENV, "WARNING")).upper()
    numeric_level = getattr(logging, name, None)
    if not isinstance(numeric_level, int):
        return logging.WARNING
    return numeric_level


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """
    Return a logger that writes to stdout with the notemark format.

    Handlers are only attached once per logger name, so repeated calls from
    module imports are cheap and never duplicate output.

    Args:
        name: Logger name (typically __name__)
        level: Optional level name overriding NOTEMARK_LOG_LEVEL

    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    numeric_level = _parse_level(level)
    logger.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)

    # Children of "notemark" get their own handler, don't print twice
    logger.propagate = False

    return logger


def set_level(level: str) -> None:
    """Change the level of every notemark logger created so far."""
    numeric_level = _parse_level(level)
    for name, logger in logging.root.manager.loggerDict.items():
        if not isinstance(logger, logging.Logger):
            continue
        if name == "notemark" or name.startswith("notemark."):
            logger.setLevel(numeric_level)
            for handler in logger.handlers:
                handler.setLevel(numeric_level)


default_logger = get_logger("notemark")
