"""Logging utilities for fixture-packages.

Diagnostics follow the verbosity steps of the host package manager: regular
messages at INFO, ``-v`` adds VERBOSE notes (adopted namespaces, ignored path
entries) and ``-vv`` adds DEBUG traces.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "fixture_packages"

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

_VERBOSITY_LEVELS = (logging.INFO, VERBOSE, logging.DEBUG)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the fixture_packages hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level, saturating at DEBUG."""
    index = min(max(int(verbosity), 0), len(_VERBOSITY_LEVELS) - 1)
    return _VERBOSITY_LEVELS[index]


def configure_logging(
    *, verbosity: int = 0, log_file: Path | None = None
) -> logging.Logger:
    """Configure the package logger with console output and optional file sink.

    The console only shows what ``verbosity`` asks for; the file sink always
    records VERBOSE and above so a quiet run still leaves the adopted entries
    behind.
    """
    level = level_for_verbosity(verbosity)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        logging.Formatter("[fixture-packages] %(levelname)s %(message)s")
    )
    logger.addHandler(stream_handler)

    logger_level = level
    if log_file is not None:
        file_level = min(level, VERBOSE)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        logger_level = min(level, file_level)

    logger.setLevel(logger_level)
    return logger


__all__ = ["VERBOSE", "configure_logging", "get_logger", "level_for_verbosity"]
