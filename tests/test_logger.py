from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from cardflow.core.logger import debug_session, get_logger


def test_get_logger_is_singleton() -> None:
    logger = get_logger()
    assert logger is get_logger()
    assert logger.name == "cardflow"
    assert logger.propagate is False


def test_debug_session_appends_and_detaches(tmp_path: Path) -> None:
    logger = get_logger()
    previous = logger.level
    handlers = list(logger.handlers)
    log_path = tmp_path / "debug" / "session.log"

    with debug_session(log_path, logger) as path:
        assert logger.level == logging.DEBUG
        logger.debug("detail record")

    assert path == log_path
    assert logger.handlers == handlers
    assert logger.level == previous
    text = log_path.read_text(encoding="utf-8")
    assert "=== New session started ===" in text
    assert "detail record" in text
    assert "=== Session ended ===" in text

    with debug_session(log_path, logger):
        pass
    assert log_path.read_text(encoding="utf-8").count("=== New session started ===") == 2


def test_debug_session_closes_on_error(tmp_path: Path) -> None:
    logger = get_logger()
    handlers = list(logger.handlers)
    log_path = tmp_path / "session.log"

    with pytest.raises(RuntimeError):
        with debug_session(log_path, logger):
            raise RuntimeError("boom")

    assert logger.handlers == handlers
    assert log_path.read_text(encoding="utf-8").rstrip().endswith("=== Session ended ===")


def test_debug_session_keeps_shared_handlers_quiet(tmp_path: Path) -> None:
    logger = get_logger()
    stream = io.StringIO()
    shared = logging.StreamHandler(stream)
    logger.addHandler(shared)
    log_path = tmp_path / "session.log"
    try:
        with debug_session(log_path, logger):
            logger.debug("slot lookup detail")
            logger.info("record processed")
    finally:
        logger.removeHandler(shared)

    assert shared.level == logging.NOTSET
    console = stream.getvalue()
    assert "record processed" in console
    assert "slot lookup detail" not in console
    assert "slot lookup detail" in log_path.read_text(encoding="utf-8")
