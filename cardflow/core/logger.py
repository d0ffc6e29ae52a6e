from __future__ import annotations

import logging
import platform
import sys
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator

from .workspace import _work_dir


_LOGGER: logging.Logger | None = None

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the configured application logger writing to <workspace>/logs/app.log.

    Creates the directory if needed. Uses rotating file handler.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    if log_dir is None:
        base = _work_dir() / "logs"
    else:
        base = Path(log_dir)
    base.mkdir(parents=True, exist_ok=True)
    log_path = base / "app.log"

    logger = logging.getLogger("cardflow")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    file_handler = RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)
    logger.addHandler(console)

    _LOGGER = logger
    return logger


@contextmanager
def debug_session(log_path: Path, logger: logging.Logger | None = None) -> Iterator[Path]:
    """Append DEBUG records to ``log_path`` for the duration of the block.

    The handler is detached and closed on exit, including when the block raises.
    """

    logger = logger or get_logger()
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    previous_level = logger.level
    # Shared handlers stay at the pre-session level
    shared = [(existing, existing.level) for existing in logger.handlers]
    for existing, level in shared:
        existing.setLevel(max(level, logger.getEffectiveLevel()))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.info("=== New session started ===")
    logger.info("Platform: %s, Python %s", platform.platform(), platform.python_version())
    try:
        yield log_path
    finally:
        logger.info("=== Session ended ===")
        logger.removeHandler(handler)
        handler.close()
        logger.setLevel(previous_level)
        for existing, level in shared:
            existing.setLevel(level)
