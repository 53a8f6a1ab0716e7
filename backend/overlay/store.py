from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import duckdb

from overlay.layers import DEFAULT_LAYERS, OverlayPreferences
from overlay.sql import (
    CREATE_OVERLAY_PREFS_TABLE_SQL,
    LIST_OVERLAY_VIEWS_SQL,
    SELECT_OVERLAY_PREFS_SQL,
    UPSERT_OVERLAY_PREFS_SQL,
)

logger = logging.getLogger(__name__)


def _decode_layers(raw: str | None) -> list[int]:
    try:
        data = json.loads(raw or "[]")
    except ValueError:
        logger.warning("Ignoring malformed stored overlay layers: %r", raw)
        return []
    if not isinstance(data, list):
        return []
    out: list[int] = []
    for v in data:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            continue
    return out


@dataclass
class OverlayPreferenceStore:
    """
    Chart-overlay settings per logical map view, persisted in DuckDB.

    Views that were never saved get the defaults (overlay on, base chart layers).
    """

    path: Path
    conn: duckdb.DuckDBPyConnection
    default_enabled: bool = True
    default_layers: frozenset[int] = DEFAULT_LAYERS
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def ensure_schema(self) -> None:
        with self._lock:
            self.conn.execute(CREATE_OVERLAY_PREFS_TABLE_SQL)

    def defaults(self, view_id: str) -> OverlayPreferences:
        return OverlayPreferences.create(
            view_id, enabled=self.default_enabled, layers=self.default_layers
        )

    def load(self, view_id: str) -> OverlayPreferences:
        with self._lock:
            row = self.conn.execute(SELECT_OVERLAY_PREFS_SQL, [view_id]).fetchone()
        if row is None:
            return self.defaults(view_id)
        enabled, layers_json = row
        return OverlayPreferences.create(
            view_id, enabled=bool(enabled), layers=_decode_layers(layers_json)
        )

    def save(self, prefs: OverlayPreferences) -> OverlayPreferences:
        # Normalize again so layer 0 is on disk whenever the overlay is enabled.
        p = OverlayPreferences.create(prefs.view_id, enabled=prefs.enabled, layers=prefs.layers)
        with self._lock:
            self.conn.execute(
                UPSERT_OVERLAY_PREFS_SQL,
                [p.view_id, p.enabled, json.dumps(p.sorted_layers()), int(time.time() * 1000)],
            )
        logger.info(
            "Saved overlay prefs for %s: enabled=%s layers=%s",
            p.view_id,
            p.enabled,
            p.sorted_layers(),
        )
        return p

    def views(self) -> list[str]:
        with self._lock:
            return [str(r[0]) for r in self.conn.execute(LIST_OVERLAY_VIEWS_SQL).fetchall()]

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    def reset(self) -> None:
        # Delete the database file; the store is unusable afterwards.
        with self._lock:
            try:
                self.conn.close()
            except duckdb.Error:
                logger.debug("Overlay prefs connection already closed")
            self.path.unlink(missing_ok=True)


def open_overlay_store(
    path: Path,
    *,
    default_enabled: bool = True,
    default_layers: Iterable[int] = DEFAULT_LAYERS,
) -> OverlayPreferenceStore:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = duckdb.connect(str(path))
    store = OverlayPreferenceStore(
        path=path,
        conn=conn,
        default_enabled=default_enabled,
        default_layers=frozenset(int(x) for x in default_layers),
    )
    store.ensure_schema()
    return store
