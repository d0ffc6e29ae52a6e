"""Named slot lookup inside a document's layer tree."""

from .resolver import SlotResolver

__all__ = ["SlotResolver"]
