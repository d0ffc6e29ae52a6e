"""In-memory document host backed by Pillow.

Templates are YAML layer trees. Text extents come from Pillow font metrics and
imported images are opened with Pillow only to read their pixel extent.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageFont

from cardflow.core.errors import DocumentError

from .base import DocumentHost, ImportedImage
from .model import Document, Layer, PixelLayer
from .template import load_template

LOGGER = logging.getLogger(__name__)


class PillowTextMeasurer:
    """Measure rendered text width/height with Pillow fonts."""

    def __init__(self, default_font: str | None = None) -> None:
        self.default_font = default_font
        self._fonts: dict[tuple[str | None, float], ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def _font(self, font: str | None, size: float):
        key = (font or self.default_font, size)
        cached = self._fonts.get(key)
        if cached is not None:
            return cached
        path = key[0]
        try:
            loaded = ImageFont.truetype(path, size) if path else ImageFont.load_default(size=size)
        except OSError as exc:
            raise DocumentError(f"Unable to load font {path!r}: {exc}") from exc
        self._fonts[key] = loaded
        return loaded

    def measure(self, text: str, size: float, font: str | None = None) -> tuple[float, float]:
        left, top, right, bottom = self._font(font, size).getbbox(text)
        return float(right - left), float(bottom - top)


class MemoryHost(DocumentHost):
    """Document host keeping every document in memory."""

    def __init__(self, measurer=None) -> None:
        self.measurer = measurer or PillowTextMeasurer()
        self.active: Document | None = None
        self.documents: dict[str, Document] = {}

    def open_template(self, path: Path) -> Document:
        document = load_template(path, self.measurer)
        self.documents[document.name] = document
        self.active = document
        LOGGER.info("Opened template %s (%s)", document.name, path)
        return document

    def duplicate(self, document: Document, name: str) -> Document:
        copy = document.copy(name)
        self.documents[name] = copy
        self.active = copy
        LOGGER.info("Created document %s from %s", name, document.name)
        return copy

    def import_image(self, path: Path) -> ImportedImage:
        try:
            with Image.open(path) as image:
                image.load()
                width, height = image.size
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DocumentError(f"Unable to open image {path}: {exc}") from exc
        LOGGER.debug("Imported image %s (%dx%d)", path, width, height)
        return ImportedImage(source=str(path), width=width, height=height)

    def paste(self, document: Document, image: ImportedImage, before: Layer) -> PixelLayer:
        parent = before.parent
        if parent is None:
            raise DocumentError(f"Layer '{before.name}' is not attached to {document.name}")
        # Pasted content lands centred on the canvas
        layer = PixelLayer(
            Path(image.source).stem or "Pasted",
            image.width,
            image.height,
            left=(document.width - image.width) / 2,
            top=(document.height - image.height) / 2,
            source=image.source,
        )
        parent.insert_before(layer, before)
        return layer


__all__ = ["MemoryHost", "PillowTextMeasurer"]
