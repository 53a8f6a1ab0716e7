from __future__ import annotations

import logging
import threading

import duckdb

from overlay.store import OverlayPreferenceStore, open_overlay_store
from settings.env import overlay_prefs_enabled, overlay_prefs_path
from settings.loader import get_map_config

logger = logging.getLogger(__name__)

_STORE: OverlayPreferenceStore | None = None
_STORE_LOCK = threading.RLock()


def get_overlay_store() -> OverlayPreferenceStore | None:
    global _STORE
    if not overlay_prefs_enabled():
        return None
    with _STORE_LOCK:
        path = overlay_prefs_path()
        if _STORE is not None:
            # If env/config changes the path during a dev session (or across tests),
            # reopen the store on the new path.
            if _STORE.path.resolve() == path.resolve():
                return _STORE
            try:
                _STORE.close()
            except duckdb.Error:
                logger.debug("Previous overlay store was already closed")
            _STORE = None

        overlay = get_map_config().overlay
        _STORE = open_overlay_store(
            path,
            default_enabled=overlay.enabledByDefault,
            default_layers=overlay.defaultLayers,
        )
        return _STORE


def reset_overlay_store() -> None:
    global _STORE
    with _STORE_LOCK:
        if _STORE is not None:
            _STORE.reset()
            _STORE = None
        else:
            overlay_prefs_path().unlink(missing_ok=True)
