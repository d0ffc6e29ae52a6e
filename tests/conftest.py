from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("CARDFLOW_HOME", tempfile.mkdtemp(prefix="cardflow-tests-"))

from cardflow.config import LayoutConfig, load_layout_config
from cardflow.core.logger import get_logger
from cardflow.services.document import Document, MemoryHost

TEMPLATE_PATH = ROOT / "cardflow" / "config" / "memorial_template.yaml"
HEADER = "Name,Profession,Overdose,Year of Death,Age,Image Path"

get_logger()


class FixedWidthMeasurer:
    """Every character is ``char_width * size`` wide; height equals size."""

    def __init__(self, char_width: float = 0.5) -> None:
        self.char_width = char_width
        self.calls = 0

    def measure(self, text: str, size: float, font: str | None = None) -> tuple[float, float]:
        self.calls += 1
        return len(text) * size * self.char_width, float(size)


@pytest.fixture()
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


@pytest.fixture()
def layout() -> LayoutConfig:
    return load_layout_config()


@pytest.fixture()
def host(measurer) -> MemoryHost:
    return MemoryHost(measurer)


@pytest.fixture()
def master(host) -> Document:
    return host.open_template(TEMPLATE_PATH)


@pytest.fixture()
def make_image(tmp_path) -> Callable[..., Path]:
    def _make(name: str = "photo.png", size: tuple[int, int] = (40, 20)) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=(120, 80, 40)).save(path)
        return path

    return _make


@pytest.fixture()
def write_csv(tmp_path) -> Callable[..., Path]:
    def _write(*rows: str, header: str = HEADER, name: str = "people.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def app_caplog(caplog):
    """caplog wired to the non-propagating ``cardflow`` logger."""

    logger = logging.getLogger("cardflow")
    logger.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)
