"""Logging utilities for umlgen commands and services."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

_LOGGER_NAME = "umlgen"
_CONSOLE_FORMAT = "[umlgen] %(levelname)s %(message)s"
_DEBUG_FORMAT = "[umlgen] %(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the umlgen hierarchy, e.g. `umlgen.extractors.java`."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Send umlgen logs to stderr (never stdout, which carries diagrams).

    Verbose mode adds the emitting logger name so extractor debug lines can be
    told apart; `log_file` adds a timestamped sink at the same level.
    """
    level = _resolve_level(verbose, quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_DEBUG_FORMAT if verbose else _CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
