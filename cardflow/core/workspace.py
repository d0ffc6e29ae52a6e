from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv


load_dotenv(override=False)

HOME_ENV = "CARDFLOW_HOME"
LAYOUT_ENV = "CARDFLOW_LAYOUT"


def _is_frozen() -> bool:
    return getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS")


def _package_root() -> Path:
    # When frozen (PyInstaller onefile), resources are under sys._MEIPASS
    if _is_frozen():
        return Path(getattr(sys, "_MEIPASS")) / "cardflow"  # type: ignore[arg-type]
    # In source layout, this file is under <root>/cardflow/core
    return Path(__file__).resolve().parents[1]


def _config_dir() -> Path:
    return _package_root() / "config"


def _work_dir() -> Path:
    """Writable base for runtime files (logs/reports/snapshots)."""
    env = os.getenv(HOME_ENV)
    if env:
        return Path(env)
    return Path.home() / "CardFlow"


def ensure_work_dirs() -> dict[str, Path]:
    base = _work_dir()
    logs = base / "logs"
    reports = base / "reports"
    out = base / "out"
    for p in (logs, reports, out):
        p.mkdir(parents=True, exist_ok=True)
    return {"base": base, "logs": logs, "reports": reports, "out": out}


def default_layout_path() -> Path:
    env = os.getenv(LAYOUT_ENV)
    if env:
        return resolve_config_path(env)
    return _config_dir() / "layout.yaml"


def resolve_config_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    # Bare file names refer to the bundled config directory when present there
    bundled = _config_dir() / p
    if len(p.parts) == 1 and bundled.exists():
        return bundled
    return Path.cwd() / p
