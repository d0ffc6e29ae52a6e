"""Layer-tree document model.

Children are kept top-first, matching the stacking order of the layers
panel: index 0 is drawn above index 1. A pasted image placed "before" a frame
sits directly above it, and clipping ties it to the frame beneath.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Protocol


class SlotKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned extent as (left, top, right, bottom)."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def intersect(self, other: "Bounds") -> "Bounds":
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = max(left, min(self.right, other.right))
        bottom = max(top, min(self.bottom, other.bottom))
        return Bounds(left, top, right, bottom)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


class TextMeasurer(Protocol):
    def measure(self, text: str, size: float, font: str | None = None) -> tuple[float, float]:
        """Return the rendered (width, height) of ``text`` at ``size``."""


class Layer:
    """Base class for every node of the layer tree."""

    kind: SlotKind | None = None

    def __init__(self, name: str) -> None:
        self.name = name
        self.parent: LayerGroup | None = None

    @property
    def bounds(self) -> Bounds:  # pragma: no cover - overridden
        raise NotImplementedError

    def clone(self) -> "Layer":  # pragma: no cover - overridden
        raise NotImplementedError

    def snapshot(self) -> dict[str, Any]:  # pragma: no cover - overridden
        raise NotImplementedError


class LayerGroup(Layer):
    """Container holding nested groups and leaf layers."""

    def __init__(self, name: str, layers: list[Layer] | None = None) -> None:
        super().__init__(name)
        self.layers: list[Layer] = []
        for layer in layers or []:
            self.append(layer)

    def append(self, layer: Layer) -> None:
        layer.parent = self
        self.layers.append(layer)

    def insert_before(self, layer: Layer, target: Layer) -> None:
        """Insert ``layer`` directly above ``target`` in the stacking order."""

        index = self.layers.index(target)
        layer.parent = self
        self.layers.insert(index, layer)

    def below(self, layer: Layer) -> Layer | None:
        index = self.layers.index(layer)
        if index + 1 < len(self.layers):
            return self.layers[index + 1]
        return None

    @property
    def groups(self) -> list["LayerGroup"]:
        return [layer for layer in self.layers if isinstance(layer, LayerGroup)]

    @property
    def leaves(self) -> list[Layer]:
        return [layer for layer in self.layers if not isinstance(layer, LayerGroup)]

    @property
    def bounds(self) -> Bounds:
        boxes = [layer.bounds for layer in self.layers]
        if not boxes:
            return Bounds(0, 0, 0, 0)
        return Bounds(
            min(b.left for b in boxes),
            min(b.top for b in boxes),
            max(b.right for b in boxes),
            max(b.bottom for b in boxes),
        )

    def walk(self) -> Iterator[Layer]:
        for layer in self.layers:
            yield layer
            if isinstance(layer, LayerGroup):
                yield from layer.walk()

    def clone(self) -> "LayerGroup":
        return LayerGroup(self.name, [layer.clone() for layer in self.layers])

    def snapshot(self) -> dict[str, Any]:
        return {"group": self.name, "layers": [layer.snapshot() for layer in self.layers]}


class TextLayer(Layer):
    """Text slot anchored at its top-left position.

    The rendered extent is re-measured on every ``bounds`` access, so it always
    reflects the current contents and font size.
    """

    kind = SlotKind.TEXT

    def __init__(
        self,
        name: str,
        position: tuple[float, float],
        measurer: TextMeasurer,
        *,
        contents: str = "",
        size: float = 12,
        font: str | None = None,
    ) -> None:
        super().__init__(name)
        self.position = position
        self.measurer = measurer
        self.contents = contents
        self.size = size
        self.font = font

    @property
    def bounds(self) -> Bounds:
        x, y = self.position
        if not self.contents:
            return Bounds(x, y, x, y)
        width, height = self.measurer.measure(self.contents, self.size, self.font)
        return Bounds(x, y, x + width, y + height)

    def clone(self) -> "TextLayer":
        return TextLayer(
            self.name,
            self.position,
            self.measurer,
            contents=self.contents,
            size=self.size,
            font=self.font,
        )

    def snapshot(self) -> dict[str, Any]:
        return {
            "text": self.name,
            "contents": self.contents,
            "size": self.size,
            "bounds": list(self.bounds.as_tuple()),
        }


class FrameLayer(Layer):
    """Fixed-shape image frame that pasted content is clipped to."""

    kind = SlotKind.IMAGE

    def __init__(self, name: str, bounds: Bounds) -> None:
        super().__init__(name)
        self._bounds = bounds

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    def clone(self) -> "FrameLayer":
        return FrameLayer(self.name, self._bounds)

    def snapshot(self) -> dict[str, Any]:
        return {"frame": self.name, "bounds": list(self._bounds.as_tuple())}


class PixelLayer(Layer):
    """Raster content pasted from an imported image."""

    kind = SlotKind.IMAGE

    def __init__(self, name: str, width: float, height: float, *, left: float = 0, top: float = 0, source: str | None = None) -> None:
        super().__init__(name)
        self.width = width
        self.height = height
        self.left = left
        self.top = top
        self.scale = 1.0
        self.source = source
        self.clip_target: Layer | None = None

    @property
    def bounds(self) -> Bounds:
        return Bounds(
            self.left,
            self.top,
            self.left + self.width * self.scale,
            self.top + self.height * self.scale,
        )

    @property
    def visible_bounds(self) -> Bounds:
        if self.clip_target is None:
            return self.bounds
        return self.bounds.intersect(self.clip_target.bounds)

    def resize(self, factor: float) -> None:
        """Scale uniformly, keeping the layer's centre fixed."""

        cx, cy = self.bounds.center
        self.scale *= factor
        self.left = cx - self.width * self.scale / 2
        self.top = cy - self.height * self.scale / 2

    def translate(self, dx: float, dy: float) -> None:
        self.left += dx
        self.top += dy

    def clip(self) -> None:
        """Clip to the layer directly beneath in the parent group."""

        if self.parent is None:
            raise ValueError(f"layer '{self.name}' has no parent to clip within")
        below = self.parent.below(self)
        if below is None:
            raise ValueError(f"layer '{self.name}' has no layer beneath to clip to")
        self.clip_target = below

    def clone(self) -> "PixelLayer":
        copy = PixelLayer(self.name, self.width, self.height, left=self.left, top=self.top, source=self.source)
        copy.scale = self.scale
        return copy

    def snapshot(self) -> dict[str, Any]:
        return {
            "pixels": self.name,
            "source": self.source,
            "scale": self.scale,
            "bounds": list(self.bounds.as_tuple()),
            "clipped_to": self.clip_target.name if self.clip_target is not None else None,
        }


class Document:
    """A template document: a named root group plus canvas size."""

    def __init__(self, name: str, width: float, height: float, root: LayerGroup, path: str | None = None) -> None:
        self.name = name
        self.width = width
        self.height = height
        self.root = root
        self.path = path

    def copy(self, name: str) -> "Document":
        root = self.root.clone()
        _restore_clips(self.root, root)
        return Document(name, self.width, self.height, root, path=self.path)

    def snapshot(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "layers": [layer.snapshot() for layer in self.root.layers],
        }


def _restore_clips(source: LayerGroup, target: LayerGroup) -> None:
    for original, copied in zip(source.layers, target.layers):
        if isinstance(original, PixelLayer) and original.clip_target is not None and isinstance(copied, PixelLayer):
            copied.clip_target = target.layers[source.layers.index(original.clip_target)]
        elif isinstance(original, LayerGroup) and isinstance(copied, LayerGroup):
            _restore_clips(original, copied)


__all__ = [
    "Bounds",
    "Document",
    "FrameLayer",
    "Layer",
    "LayerGroup",
    "PixelLayer",
    "SlotKind",
    "TextLayer",
    "TextMeasurer",
]
