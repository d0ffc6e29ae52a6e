from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from .model import Document, Layer, PixelLayer


@dataclass(frozen=True)
class ImportedImage:
    """Copied pixel content of an opened image, ready to paste."""

    source: str
    width: int
    height: int


class DocumentHost(ABC):
    """Interface for the document-editing backend that templates live in."""

    @abstractmethod
    def open_template(self, path: Path) -> Document:
        """Open the master template document."""

    @abstractmethod
    def duplicate(self, document: Document, name: str) -> Document:
        """Copy ``document`` under ``name``; the copy becomes the active document."""

    @abstractmethod
    def import_image(self, path: Path) -> ImportedImage:
        """Open an external image, select and copy its extent, and close it."""

    @abstractmethod
    def paste(self, document: Document, image: ImportedImage, before: Layer) -> PixelLayer:
        """Paste copied content into ``document`` directly above ``before``."""


@dataclass
class DocumentContext:
    """Explicit editing target handed to every fill operation."""

    host: DocumentHost
    document: Document
    source_path: str | None = None

    @property
    def root(self):
        return self.document.root


__all__ = ["DocumentContext", "DocumentHost", "ImportedImage"]
