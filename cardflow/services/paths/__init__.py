"""File path normalization and validation."""

from .resolver import PathResolver

__all__ = ["PathResolver"]
