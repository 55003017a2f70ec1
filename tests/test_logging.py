"""Tests for umlgen.logging."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from umlgen.logging import configure_logging, get_logger


def test_verbose_logging_names_the_emitting_logger() -> None:
    stream = io.StringIO()
    configure_logging(verbose=True, stream=stream)

    get_logger("extractors.java").debug("Found %d declarations", 2)

    assert stream.getvalue() == "[umlgen] DEBUG umlgen.extractors.java: Found 2 declarations\n"


def test_quiet_logging_drops_info_and_reconfiguring_replaces_handlers(tmp_path: Path) -> None:
    first = io.StringIO()
    configure_logging(stream=first)
    second = io.StringIO()
    log_file = tmp_path / "umlgen.log"
    logger = configure_logging(quiet=True, stream=second, log_file=log_file)

    get_logger("pipeline").info("hidden")
    get_logger("pipeline").warning("shown")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 2
    assert first.getvalue() == ""
    assert second.getvalue() == "[umlgen] WARNING shown\n"
    assert "WARNING umlgen.pipeline: shown" in log_file.read_text(encoding="utf-8")
    configure_logging(stream=io.StringIO())
