"""Path resolution utilities for tabular sources and image references."""

from __future__ import annotations

import logging
import os
import re
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Iterable

from cardflow.core.errors import PathError


LOGGER = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]+")
_WINDOWS_ABSOLUTE = re.compile(r"^[A-Za-z]:\\")
_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:")
_ILLEGAL_CHARS = {
    "windows": re.compile(r'[<>:"|?*\x00-\x1F]'),
    "posix": re.compile(r"\x00"),
}


class PathResolver:
    """Normalize, resolve and validate paths for one filesystem flavour."""

    def __init__(self, flavour: str | None = None, *, max_length: int = 255) -> None:
        if flavour is None:
            flavour = "windows" if os.name == "nt" else "posix"
        if flavour not in _ILLEGAL_CHARS:
            raise ValueError(f"unknown path flavour: {flavour}")
        self.flavour = flavour
        self.max_length = max_length
        self.separator = "\\" if flavour == "windows" else "/"

    # ------------------------------------------------------------------
    def normalize(self, path: str | None) -> str:
        """Collapse runs of either slash style into the canonical separator."""

        if not path:
            return ""
        text = path.strip()
        lead = _SEPARATORS.match(text)
        unc = self.flavour == "windows" and lead is not None and len(lead.group()) >= 2
        collapsed = _SEPARATORS.sub(lambda _: self.separator, text)
        if unc:
            # UNC shares keep their double leading separator
            collapsed = self.separator + collapsed
        return collapsed

    def is_absolute(self, path: str | None) -> bool:
        if not path:
            return False
        if self.flavour == "windows":
            text = path.strip().replace("/", "\\")
            return bool(_WINDOWS_ABSOLUTE.match(text)) or text.startswith("\\\\")
        return path.strip().startswith("/")

    def resolve_relative(self, base_path: str, path: str) -> str:
        """Resolve ``path`` against the directory that contains ``base_path``."""

        if not path:
            return ""
        if self.is_absolute(path):
            return self.normalize(path)
        parent = str(self._pure(self.normalize(base_path)).parent)
        return parent.rstrip(self.separator) + self.separator + self.normalize(path)

    def validate(self, path: str | None, allowed_extensions: Iterable[str] | None = None) -> None:
        """Raise ``PathError`` when ``path`` breaks a length, character or extension rule."""

        if not path or not path.strip():
            raise PathError("Empty file path")
        if len(path) > self.max_length:
            raise PathError(f"File path exceeds maximum length of {self.max_length} characters")
        body = path
        if self.flavour == "windows":
            body = _WINDOWS_DRIVE.sub("", path.strip(), count=1)
        if _ILLEGAL_CHARS[self.flavour].search(body):
            raise PathError("File path contains invalid characters")
        allowed = [ext.lower().lstrip(".") for ext in (allowed_extensions or [])]
        if allowed:
            suffix = self._pure(path.strip()).suffix.lower().lstrip(".")
            if suffix not in allowed:
                raise PathError(f"Invalid file extension. Allowed: {', '.join(allowed)}")
        LOGGER.debug("paths.validate ok path=%s", path)

    # ------------------------------------------------------------------
    def _pure(self, path: str) -> PurePath:
        if self.flavour == "windows":
            return PureWindowsPath(path)
        return PurePosixPath(path)


__all__ = ["PathResolver"]
