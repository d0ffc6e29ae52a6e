"""Document host interface, layer model and the in-memory host."""

from .base import DocumentContext, DocumentHost, ImportedImage
from .memory import MemoryHost, PillowTextMeasurer
from .model import Bounds, Document, FrameLayer, Layer, LayerGroup, PixelLayer, SlotKind, TextLayer
from .template import TemplateValidationError, build_document, load_template

__all__ = [
    "Bounds",
    "Document",
    "DocumentContext",
    "DocumentHost",
    "FrameLayer",
    "ImportedImage",
    "Layer",
    "LayerGroup",
    "MemoryHost",
    "PillowTextMeasurer",
    "PixelLayer",
    "SlotKind",
    "TemplateValidationError",
    "TextLayer",
    "build_document",
    "load_template",
]
