"""Layout configuration for CardFlow runs.

Loads the layout YAML (text fitting limits, frame and slot names, group
addressing, CSV schema and path rules) into immutable dataclasses. Every node
is validated on load so a bad file fails before any document is touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from cardflow.core.errors import ConfigError
from cardflow.core.workspace import default_layout_path


RECORD_FIELDS = ("name", "profession", "cause", "year_of_death", "age", "image_path")


class LayoutValidationError(ConfigError):
    """Raised when a layout configuration fails validation."""


@dataclass(frozen=True)
class TextFitSettings:
    """Limits for the greedy font shrink."""

    max_width: float = 620
    initial_size: float = 45
    min_size: float = 1
    step: float = 0.5


@dataclass(frozen=True)
class SlotBinding:
    """Maps one record field onto a named text slot inside a profile group."""

    field: str
    slot: str
    subgroup: str | None = None
    fit: bool = False


@dataclass(frozen=True)
class CsvSchema:
    """Expected header row plus required and numeric column indices."""

    headers: tuple[str, ...]
    required: tuple[int, ...]
    numeric: tuple[int, ...] = ()

    @property
    def expected_columns(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class PathSettings:
    allowed_image_extensions: tuple[str, ...]
    allowed_source_extensions: tuple[str, ...] = ("csv",)
    max_path_length: int = 255


@dataclass(frozen=True)
class DebugSettings:
    enabled: bool = False
    log_file: str = "cardflow_debug.log"


@dataclass(frozen=True)
class LayoutConfig:
    """Complete layout configuration passed once to a run."""

    text: TextFitSettings
    frames: tuple[str, ...]
    group_prefix: str
    subgroup_fallback: bool
    slots: tuple[SlotBinding, ...]
    max_profiles: int
    instance_name: str
    csv: CsvSchema
    paths: PathSettings
    debug: DebugSettings

    def frame_for(self, position: int) -> str:
        """Return the frame name for the zero-based record position."""

        return self.frames[position]

    def group_for(self, position: int) -> str:
        return f"{self.group_prefix}{position + 1}"


def load_layout_config(path: str | Path | None = None) -> LayoutConfig:
    """Load and validate a layout YAML file (defaults to the bundled layout)."""

    layout_path = Path(path) if path else default_layout_path()
    raw = _load_yaml(layout_path)
    return build_layout_config(raw)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Layout file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError("Layout configuration must be a mapping")
    return data


def build_layout_config(data: Mapping[str, Any]) -> LayoutConfig:
    text = _build_text(data.get("text"))
    frames = _string_tuple(data.get("frames"), "frames")
    group = data.get("group") or {}
    if not isinstance(group, Mapping):
        raise LayoutValidationError("group must be a mapping")
    prefix = group.get("prefix", "profile-")
    if not isinstance(prefix, str) or not prefix:
        raise LayoutValidationError("group.prefix must be a non-empty string")
    slots = _build_slots(data.get("slots"))
    max_profiles = _positive_int(data.get("max_profiles", 3), "max_profiles")
    if max_profiles > len(frames):
        raise LayoutValidationError(f"max_profiles ({max_profiles}) exceeds the number of frames ({len(frames)})")
    instance_name = data.get("instance_name", "{sequence}.psd")
    if not isinstance(instance_name, str) or "{sequence}" not in instance_name:
        raise LayoutValidationError("instance_name must be a string containing '{sequence}'")
    csv_schema = _build_csv(data.get("csv"))
    if len(csv_schema.headers) != len(RECORD_FIELDS):
        raise LayoutValidationError(f"csv.headers must list {len(RECORD_FIELDS)} columns")
    return LayoutConfig(
        text=text,
        frames=frames,
        group_prefix=prefix,
        subgroup_fallback=bool(group.get("subgroup_fallback", True)),
        slots=slots,
        max_profiles=max_profiles,
        instance_name=instance_name,
        csv=csv_schema,
        paths=_build_paths(data.get("paths")),
        debug=_build_debug(data.get("debug")),
    )


def _build_text(node: Any) -> TextFitSettings:
    if node is None:
        return TextFitSettings()
    if not isinstance(node, Mapping):
        raise LayoutValidationError("text must be a mapping")
    defaults = TextFitSettings()
    try:
        settings = TextFitSettings(
            max_width=float(node.get("max_width", defaults.max_width)),
            initial_size=float(node.get("initial_size", defaults.initial_size)),
            min_size=float(node.get("min_size", defaults.min_size)),
            step=float(node.get("step", defaults.step)),
        )
    except (TypeError, ValueError) as exc:
        raise LayoutValidationError(f"text settings must be numeric: {exc}") from exc
    if settings.step <= 0:
        raise LayoutValidationError("text.step must be positive")
    if settings.min_size <= 0 or settings.min_size > settings.initial_size:
        raise LayoutValidationError("text.min_size must be positive and not above text.initial_size")
    return settings


def _build_slots(node: Any) -> tuple[SlotBinding, ...]:
    if not isinstance(node, list) or not node:
        raise LayoutValidationError("slots must be a non-empty list")
    bindings = []
    for idx, item in enumerate(node):
        if not isinstance(item, Mapping):
            raise LayoutValidationError(f"slots[{idx}] must be a mapping")
        field = item.get("field")
        if field not in RECORD_FIELDS or field == "image_path":
            raise LayoutValidationError(f"slots[{idx}].field must be one of {', '.join(RECORD_FIELDS[:-1])}")
        slot = item.get("slot")
        if not isinstance(slot, str) or not slot:
            raise LayoutValidationError(f"slots[{idx}].slot must be a non-empty string")
        subgroup = item.get("subgroup")
        if subgroup is not None and (not isinstance(subgroup, str) or not subgroup):
            raise LayoutValidationError(f"slots[{idx}].subgroup must be a non-empty string")
        bindings.append(SlotBinding(field=field, slot=slot, subgroup=subgroup, fit=bool(item.get("fit", False))))
    return tuple(bindings)


def _build_csv(node: Any) -> CsvSchema:
    if not isinstance(node, Mapping):
        raise LayoutValidationError("csv must be a mapping")
    headers = _string_tuple(node.get("headers"), "csv.headers")
    required = _index_tuple(node.get("required", []), "csv.required", len(headers))
    numeric = _index_tuple(node.get("numeric", []), "csv.numeric", len(headers))
    return CsvSchema(headers=headers, required=required, numeric=numeric)


def _build_paths(node: Any) -> PathSettings:
    if not isinstance(node, Mapping):
        raise LayoutValidationError("paths must be a mapping")
    extensions = tuple(ext.lower().lstrip(".") for ext in _string_tuple(node.get("allowed_image_extensions"), "paths.allowed_image_extensions"))
    sources = tuple(
        ext.lower().lstrip(".")
        for ext in _string_tuple(node.get("allowed_source_extensions", ["csv"]), "paths.allowed_source_extensions")
    )
    return PathSettings(
        allowed_image_extensions=extensions,
        allowed_source_extensions=sources,
        max_path_length=_positive_int(node.get("max_path_length", 255), "paths.max_path_length"),
    )


def _build_debug(node: Any) -> DebugSettings:
    if node is None:
        return DebugSettings()
    if not isinstance(node, Mapping):
        raise LayoutValidationError("debug must be a mapping")
    log_file = node.get("log_file", "cardflow_debug.log")
    if not isinstance(log_file, str) or not log_file:
        raise LayoutValidationError("debug.log_file must be a non-empty string")
    return DebugSettings(enabled=bool(node.get("enabled", False)), log_file=log_file)


def _string_tuple(node: Any, label: str) -> tuple[str, ...]:
    if not isinstance(node, list) or not node:
        raise LayoutValidationError(f"{label} must be a non-empty list")
    values = []
    for idx, value in enumerate(node):
        if not isinstance(value, str) or not value.strip():
            raise LayoutValidationError(f"{label}[{idx}] must be a non-empty string")
        values.append(value.strip())
    return tuple(values)


def _index_tuple(node: Any, label: str, width: int) -> tuple[int, ...]:
    if not isinstance(node, list):
        raise LayoutValidationError(f"{label} must be a list of column indices")
    indices = []
    for value in node:
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < width:
            raise LayoutValidationError(f"{label} contains an invalid column index: {value!r}")
        indices.append(value)
    return tuple(indices)


def _positive_int(value: Any, label: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise LayoutValidationError(f"{label} must be a positive integer")
    return value


__all__ = [
    "CsvSchema",
    "DebugSettings",
    "LayoutConfig",
    "LayoutValidationError",
    "PathSettings",
    "RECORD_FIELDS",
    "SlotBinding",
    "TextFitSettings",
    "build_layout_config",
    "load_layout_config",
]
