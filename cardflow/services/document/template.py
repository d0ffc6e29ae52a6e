"""YAML loader for template layer trees."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from cardflow.core.errors import ConfigError

from .model import Bounds, Document, FrameLayer, Layer, LayerGroup, TextLayer, TextMeasurer


class TemplateValidationError(ConfigError):
    """Raised when a template file does not describe a valid layer tree."""


def load_template(path: str | Path, measurer: TextMeasurer) -> Document:
    template_path = Path(path)
    if not template_path.exists():
        raise ConfigError(f"Template file not found: {template_path}")
    with template_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise TemplateValidationError("Template must be a mapping")
    return build_document(data, measurer, path=str(template_path))


def build_document(data: Mapping[str, Any], measurer: TextMeasurer, *, path: str | None = None) -> Document:
    name = data.get("name") or (Path(path).stem if path else "template")
    try:
        width = float(data.get("width", 0))
        height = float(data.get("height", 0))
    except (TypeError, ValueError) as exc:
        raise TemplateValidationError(f"width/height must be numeric: {exc}") from exc
    if width <= 0 or height <= 0:
        raise TemplateValidationError("Template width and height must be positive")
    default_font = data.get("font")
    layers = data.get("layers")
    if not isinstance(layers, list):
        raise TemplateValidationError("Template must define a layers list")
    root = LayerGroup(str(name), [_build_layer(node, measurer, default_font, f"layers[{i}]") for i, node in enumerate(layers)])
    return Document(str(name), width, height, root, path=path)


def _build_layer(node: Any, measurer: TextMeasurer, default_font: str | None, where: str) -> Layer:
    if not isinstance(node, Mapping):
        raise TemplateValidationError(f"{where} must be a mapping")
    if "group" in node:
        children = node.get("layers") or []
        if not isinstance(children, list):
            raise TemplateValidationError(f"{where}.layers must be a list")
        return LayerGroup(
            _name(node["group"], where),
            [_build_layer(child, measurer, default_font, f"{where}.layers[{i}]") for i, child in enumerate(children)],
        )
    if "text" in node:
        position = _numbers(node.get("position"), 2, f"{where}.position")
        return TextLayer(
            _name(node["text"], where),
            (position[0], position[1]),
            measurer,
            contents=str(node.get("contents", "")),
            size=float(node.get("size", 12)),
            font=node.get("font", default_font),
        )
    if "frame" in node:
        left, top, right, bottom = _numbers(node.get("bounds"), 4, f"{where}.bounds")
        if right <= left or bottom <= top:
            raise TemplateValidationError(f"{where}.bounds must have positive width and height")
        return FrameLayer(_name(node["frame"], where), Bounds(left, top, right, bottom))
    raise TemplateValidationError(f"{where} must be one of group, text or frame")


def _name(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value:
        raise TemplateValidationError(f"{where} needs a non-empty name")
    return value


def _numbers(value: Any, count: int, where: str) -> list[float]:
    if not isinstance(value, list) or len(value) != count:
        raise TemplateValidationError(f"{where} must be a list of {count} numbers")
    try:
        return [float(item) for item in value]
    except (TypeError, ValueError) as exc:
        raise TemplateValidationError(f"{where} must be a list of {count} numbers") from exc


__all__ = ["TemplateValidationError", "build_document", "load_template"]
