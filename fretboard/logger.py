"""
Logging setup for the fretboard package.

Library modules call logging.getLogger(__name__) and never print. The CLI
(or an embedding application) calls setup_logging() once to attach a
console handler to the "fretboard" logger.
"""

import logging
import sys
import time

LOGGER_NAME = "fretboard"

logger = logging.getLogger(LOGGER_NAME)


class CompactFormatter(logging.Formatter):
    """One-letter level, timestamp and source location in front of the message."""

    def format(self, record):
        timestamp = time.strftime("%m-%d %H:%M:%S", time.localtime(record.created))
        level = record.levelname[0]
        message = super().format(record)
        return f"{level} {LOGGER_NAME} {timestamp} {record.filename}:{record.lineno}] {message}"


def verbosity_to_level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, stream=None, level=None) -> logging.Logger:
    """
    Configure the package logger.

    `level` (a name like "INFO" or a number) wins over `verbosity` when given.
    Calling it again only changes the level; a second handler is never added.
    """
    if level is None:
        level = verbosity_to_level(verbosity)
    elif isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")
    logger.setLevel(level)

    existing = [h for h in logger.handlers if getattr(h, "_fretboard_handler", False)]
    if existing:
        for handler in existing:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(CompactFormatter())
    handler._fretboard_handler = True
    logger.addHandler(handler)
    return logger


def is_debug() -> bool:
    """Check whether debug logging is enabled for the package."""
    return logger.isEnabledFor(logging.DEBUG)
