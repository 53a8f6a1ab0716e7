from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from geo.region import MapRegion
from markers.aggregator import AnnotationAggregator, VisibleSet
from markers.reconcile import AnnotationDiff, reconcile, split_diff
from markers.region_control import RegionChangeController
from markers.types import Annotation, AnnotationKind
from overlay.layers import OverlayPreferences
from overlay.store import OverlayPreferenceStore
from settings.types import MapConfig

logger = logging.getLogger(__name__)


class RenderSurface(Protocol):
    """
    Whatever draws the markers (a map widget, a web client, a test double).
    """

    def visible_set_changed(self, visible: VisibleSet) -> None: ...

    def apply_diff(self, diff: AnnotationDiff) -> None: ...


class SelectionHandler(Protocol):
    def nav_unit_selected(self, nav_unit_id: str) -> None: ...

    def tidal_height_station_selected(self, station_id: str, name: str) -> None: ...

    def tidal_current_station_selected(
        self, station_id: str, current_bin: int, name: str
    ) -> None: ...

    def buoy_station_selected(self, station_id: str, name: str) -> None: ...


@dataclass
class MapSession:
    """
    Handle for one live map view.

    Wires the aggregator, the region throttle and the reconciler to a render surface.
    Anything outside the map (toolbar buttons, loaders, an HTTP adapter) talks to the
    map through this object; it is passed in, never looked up globally.
    """

    surface: RenderSurface
    config: MapConfig = field(default_factory=MapConfig)
    view_id: str = "map"
    selection: SelectionHandler | None = None
    prefs_store: OverlayPreferenceStore | None = None

    aggregator: AnnotationAggregator = field(init=False)
    regions: RegionChangeController = field(init=False)

    _rendered: list[Annotation] = field(default_factory=list, repr=False)
    _last_diff: AnnotationDiff = field(default_factory=AnnotationDiff, repr=False)
    _overlay: OverlayPreferences = field(init=False, repr=False)
    _render_lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __post_init__(self) -> None:
        cfg = self.config
        self.aggregator = AnnotationAggregator(
            cell_size=cfg.grid.cellSizeDeg,
            max_annotations=cfg.visible.maxAnnotations,
            padding_cells=cfg.grid.paddingCells,
            listeners=[self._on_visible_set],
        )
        self.regions = RegionChangeController(
            throttle_s=cfg.region.throttleSeconds,
            deadzone_deg=cfg.region.deadzoneDeg,
        )
        if self.prefs_store is not None:
            self._overlay = self.prefs_store.load(self.view_id)
        else:
            self._overlay = OverlayPreferences.create(
                self.view_id,
                enabled=cfg.overlay.enabledByDefault,
                layers=cfg.overlay.defaultLayers,
            )

        d = cfg.defaultRegion
        self.aggregator.set_region(
            MapRegion(
                center_lat=d.lat, center_lon=d.lon, lat_delta=d.latDelta, lon_delta=d.lonDelta
            )
        )

    # ---- annotations

    @property
    def rendered(self) -> list[Annotation]:
        with self._render_lock:
            return list(self._rendered)

    @property
    def last_diff(self) -> AnnotationDiff:
        return self._last_diff

    @property
    def region(self) -> MapRegion | None:
        return self.aggregator.current_region

    def region_did_change(self, region: MapRegion, now: float | None = None) -> bool:
        accepted = self.regions.accept(region, now)
        if accepted is None:
            return False
        logger.debug(
            "Region accepted: center=(%.4f, %.4f) span=(%.4f, %.4f)",
            accepted.center_lat,
            accepted.center_lon,
            accepted.lat_delta,
            accepted.lon_delta,
        )
        self.aggregator.set_region(accepted)
        return True

    def ingest(self, kind: AnnotationKind, records: Iterable[Any]) -> list[Annotation]:
        return self.aggregator.ingest(kind, records)

    def replace(self, kind: AnnotationKind, records: Iterable[Any]) -> list[Annotation]:
        return self.aggregator.replace(kind, records)

    def annotation_tapped(
        self, kind: AnnotationKind, id: str, current_bin: int | None = None
    ) -> Annotation | None:
        kind = AnnotationKind(kind)
        a = self.aggregator.find_by_id(kind, id, current_bin)
        if a is None:
            logger.warning("Tapped %s %r is not loaded", kind.value, id)
            return None
        if self.selection is not None and a.id:
            _route_selection(self.selection, a)
        return a

    def _on_visible_set(self, visible: VisibleSet) -> None:
        rc = self.config.reconcile
        with self._render_lock:
            self.surface.visible_set_changed(visible)
            diff = reconcile(
                self._rendered,
                visible,
                full_replace_count_delta=rc.fullReplaceCountDelta,
                full_replace_max_count=rc.fullReplaceMaxCount,
            )
            self._last_diff = diff
            if diff.is_empty:
                return
            for part in split_diff(diff, rc.chunkSize):
                self.surface.apply_diff(part)
            self._rendered = list(visible)

    # ---- chart overlay

    @property
    def overlay(self) -> OverlayPreferences:
        return self._overlay

    def set_overlay_enabled(self, enabled: bool) -> OverlayPreferences:
        return self._store_overlay(self._overlay.toggled(enabled))

    def add_chart_layer(self, layer_id: int) -> OverlayPreferences:
        return self._store_overlay(self._overlay.with_layer(layer_id))

    def remove_chart_layer(self, layer_id: int) -> OverlayPreferences:
        return self._store_overlay(self._overlay.without_layer(layer_id))

    def update_overlay(self, *, enabled: bool, layers: Iterable[int]) -> OverlayPreferences:
        return self._store_overlay(
            OverlayPreferences.create(self.view_id, enabled=enabled, layers=layers)
        )

    def _store_overlay(self, prefs: OverlayPreferences) -> OverlayPreferences:
        if self.prefs_store is not None:
            prefs = self.prefs_store.save(prefs)
        self._overlay = prefs
        return prefs


def _route_selection(handler: SelectionHandler, a: Annotation) -> None:
    if a.kind is AnnotationKind.nav_unit:
        handler.nav_unit_selected(a.id)
    elif a.kind is AnnotationKind.tidal_height_station:
        handler.tidal_height_station_selected(a.id, a.name)
    elif a.kind is AnnotationKind.tidal_current_station:
        handler.tidal_current_station_selected(a.id, a.current_bin or 0, a.name)
    elif a.kind is AnnotationKind.buoy_station:
        handler.buoy_station_selected(a.id, a.name)
    else:
        raise ValueError(f"Unknown annotation kind: {a.kind!r}")
