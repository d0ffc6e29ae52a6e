from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from cardflow.config import LayoutValidationError, RECORD_FIELDS, build_layout_config, load_layout_config
from cardflow.core.errors import ConfigError
from cardflow.core.workspace import default_layout_path


def _raw() -> dict:
    return yaml.safe_load(default_layout_path().read_text(encoding="utf-8"))


def test_bundled_layout_defaults() -> None:
    config = load_layout_config()

    assert config.text.max_width == 620
    assert config.text.initial_size == 45
    assert config.text.step == 0.5
    assert config.frames == ("profile-frame-left", "profile-frame-center", "profile-frame-right")
    assert config.max_profiles == 3
    assert config.group_for(0) == "profile-1"
    assert config.frame_for(2) == "profile-frame-right"
    assert config.instance_name.format(sequence=1) == "1.psd"
    assert config.csv.expected_columns == len(RECORD_FIELDS)
    assert config.csv.headers[2] == "Overdose"
    assert config.csv.numeric == (3, 4)
    assert [b.field for b in config.slots if b.fit] == ["name", "profession", "cause"]
    age = next(b for b in config.slots if b.field == "age")
    assert age.subgroup == "age-details"
    assert "psd" in config.paths.allowed_image_extensions


def test_layout_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    data = _raw()
    data["max_profiles"] = 2
    custom = tmp_path / "custom.yaml"
    custom.write_text(yaml.safe_dump(data), encoding="utf-8")
    monkeypatch.setenv("CARDFLOW_LAYOUT", str(custom))

    assert load_layout_config().max_profiles == 2


def test_missing_layout_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_layout_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda d: d.update(max_profiles=4), "exceeds the number of frames"),
        (lambda d: d["text"].update(step=0), "step"),
        (lambda d: d["text"].update(min_size=50), "min_size"),
        (lambda d: d.update(instance_name="out.psd"), "sequence"),
        (lambda d: d["slots"].append({"field": "image_path", "slot": "profile-photo"}), "field"),
        (lambda d: d["csv"]["headers"].pop(), "csv.headers"),
    ],
)
def test_invalid_layouts(mutate, message) -> None:
    data = _raw()
    mutate(data)
    with pytest.raises(LayoutValidationError, match=message):
        build_layout_config(data)
