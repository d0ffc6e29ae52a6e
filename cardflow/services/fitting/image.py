"""Cover-fit placement of external images into frame slots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from cardflow.core.errors import CardFlowError, ImageProcessingError, PathError
from cardflow.services.document.base import DocumentContext
from cardflow.services.document.model import Bounds, FrameLayer, PixelLayer
from cardflow.services.paths import PathResolver
from cardflow.services.slots import SlotResolver

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitTransform:
    """Uniform scale about the image centre, then a translation."""

    scale: float
    dx: float
    dy: float


def cover_fit(frame: Bounds, image: Bounds) -> FitTransform:
    """Scale so the image covers the frame on both axes, centred on it.

    Raises:
        ValueError: When the image has zero width or height.
    """

    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"image has zero extent ({image.width}x{image.height})")
    scale = max(frame.width / image.width, frame.height / image.height)
    # Scaling is anchored at the image centre, so the centre does not move.
    frame_cx, frame_cy = frame.center
    image_cx, image_cy = image.center
    return FitTransform(scale=scale, dx=frame_cx - image_cx, dy=frame_cy - image_cy)


class ImageFitter:
    """Import an image and place it cover-fitted and clipped inside a frame."""

    def __init__(
        self,
        paths: PathResolver,
        slots: SlotResolver,
        allowed_extensions: tuple[str, ...],
        exists: Callable[[str], bool] | None = None,
    ) -> None:
        self.paths = paths
        self.slots = slots
        self.allowed_extensions = allowed_extensions
        self.exists = exists or (lambda p: Path(p).is_file())

    def resolve_source(self, source: str, base_path: str | None) -> str:
        if base_path:
            return self.paths.resolve_relative(base_path, source)
        return self.paths.normalize(source)

    def place(self, ctx: DocumentContext, source: str, frame_name: str) -> PixelLayer:
        """Paste ``source`` above frame ``frame_name`` and fit it.

        Raises:
            SlotResolutionError: When the frame does not exist.
            ImageProcessingError: When the image cannot be validated, opened or placed.
        """

        frame = self.slots.resolve_frame(ctx.root, frame_name)
        if not isinstance(frame, FrameLayer):
            raise ImageProcessingError(source, f"'{frame_name}' is not a frame")

        try:
            self.paths.validate(source, self.allowed_extensions)
        except PathError as exc:
            raise ImageProcessingError(source, exc) from exc

        resolved = self.resolve_source(source, ctx.source_path)
        if not self.exists(resolved):
            raise ImageProcessingError(resolved, "file not found")

        try:
            imported = ctx.host.import_image(Path(resolved))
            if imported.width <= 0 or imported.height <= 0:
                raise ImageProcessingError(resolved, "image has zero extent")
            layer = ctx.host.paste(ctx.document, imported, before=frame)
            transform = cover_fit(frame.bounds, layer.bounds)
            layer.resize(transform.scale)
            layer.clip()
            layer.translate(transform.dx, transform.dy)
        except ImageProcessingError:
            raise
        except (CardFlowError, OSError, ValueError) as exc:
            raise ImageProcessingError(resolved, exc) from exc

        LOGGER.info(
            "Placed image %s into %s (scale=%.3f)",
            resolved,
            frame_name,
            transform.scale,
        )
        return layer


__all__ = ["FitTransform", "ImageFitter", "cover_fit"]
