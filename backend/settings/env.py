from __future__ import annotations

import os
from pathlib import Path


def repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def map_config_path() -> Path:
    return Path(
        os.getenv("MARINER_MAP_CONFIG") or (repo_root() / "config" / "map.yaml")
    )


def overlay_prefs_path() -> Path:
    # Store under repo so it stays local to the checkout.
    return Path(
        os.getenv("MARINER_PREFS_PATH")
        or (repo_root() / "data" / "prefs" / "overlay.duckdb")
    )


def overlay_prefs_enabled() -> bool:
    v = (os.getenv("MARINER_OVERLAY_PREFS") or "1").strip().lower()
    return v not in {"0", "false", "no", "off"}
