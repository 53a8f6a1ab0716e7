from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import yaml

from settings.env import map_config_path
from settings.types import MapConfig

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid map config yaml root: {path}")
    return data


def load_map_config(path: Path | None = None) -> MapConfig:
    p = path or map_config_path()
    if not p.exists():
        logger.info("Map config %s not found, using built-in defaults", p)
        return MapConfig()
    cfg = MapConfig.model_validate(_load_yaml(p))
    logger.debug("Loaded map config from %s", p)
    return cfg


@lru_cache(maxsize=1)
def get_map_config() -> MapConfig:
    return load_map_config()


def clear_config_cache() -> None:
    """
    Drop the cached config so the next `get_map_config()` re-reads the YAML.

    Useful in tests and during development; the file is otherwise read once per process.
    """
    get_map_config.cache_clear()
