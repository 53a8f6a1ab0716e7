from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, Request

from api.schemas import (
    ApiAnnotation,
    ApiIngestResult,
    ApiOverlay,
    ApiRegionChange,
    ApiRegionResult,
    ApiTap,
    record_list,
)
from geo.region import MapRegion
from markers.aggregator import VisibleSet
from markers.reconcile import AnnotationDiff
from markers.types import AnnotationKind, source_key
from overlay.layers import CHART_LAYERS
from overlay.store import OverlayPreferenceStore
from render.build_map import build_map_payload
from session.map_session import MapSession
from settings.types import MapConfig

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class ClientSurface:
    """
    Server-side stand-in for the remote map: remembers what the client was told to draw.
    """

    visible: VisibleSet = ()
    diffs_applied: int = 0

    def visible_set_changed(self, visible: VisibleSet) -> None:
        self.visible = visible

    def apply_diff(self, diff: AnnotationDiff) -> None:
        self.diffs_applied += 1


@dataclass
class SessionRegistry:
    config: MapConfig
    prefs_store: OverlayPreferenceStore | None = None
    _sessions: dict[str, MapSession] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def get(self, view_id: str) -> MapSession:
        vid = (view_id or "").strip() or "map"
        with self._lock:
            s = self._sessions.get(vid)
            if s is None:
                s = MapSession(
                    surface=ClientSurface(),
                    config=self.config,
                    view_id=vid,
                    prefs_store=self.prefs_store,
                )
                self._sessions[vid] = s
                logger.info("Opened map session %s", vid)
            return s

    def close(self, view_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(view_id, None) is not None


def _registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


@router.get("/chart-layers")
def chart_layers() -> list[dict[str, Any]]:
    return [{"id": l.id, "name": l.name, "description": l.description} for l in CHART_LAYERS]


@router.post("/views/{view_id}/records/{kind}", response_model=ApiIngestResult)
def ingest_records(
    view_id: str,
    kind: AnnotationKind,
    request: Request,
    body: Any = Body(...),
    replace: bool = Query(default=False),
) -> ApiIngestResult:
    session = _registry(request).get(view_id)
    records = record_list(body)
    try:
        batch = session.replace(kind, records) if replace else session.ingest(kind, records)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return ApiIngestResult(
        kind=kind,
        ingested=len(batch),
        counts=session.aggregator.counts(),
        loading=session.aggregator.is_loading_any,
    )


@router.post("/views/{view_id}/region", response_model=ApiRegionResult)
def region_changed(view_id: str, body: ApiRegionChange, request: Request) -> ApiRegionResult:
    session = _registry(request).get(view_id)
    region = MapRegion(
        center_lat=body.center.lat,
        center_lon=body.center.lon,
        lat_delta=body.span.latDelta,
        lon_delta=body.span.lonDelta,
    )
    accepted = session.region_did_change(region, now=body.t)
    visible = len(session.rendered)
    if not accepted:
        return ApiRegionResult(accepted=False, visible=visible)
    diff = session.last_diff
    return ApiRegionResult(
        accepted=True,
        visible=visible,
        fullReplace=diff.full_replace,
        added=[f"{a.kind.value}:{source_key(a)}" for a in diff.to_add],
        removed=[f"{a.kind.value}:{source_key(a)}" for a in diff.to_remove],
    )


@router.get("/views/{view_id}/visible")
def visible_payload(view_id: str, request: Request) -> dict[str, Any]:
    session = _registry(request).get(view_id)
    region = session.region
    if region is None:
        raise HTTPException(status_code=409, detail="Map region not set")
    return build_map_payload(
        session.aggregator.compute_visible_set(region),
        region,
        overlay=session.overlay,
        loading=session.aggregator.is_loading_any,
    )


@router.post("/views/{view_id}/tap", response_model=ApiAnnotation)
def annotation_tapped(view_id: str, body: ApiTap, request: Request) -> ApiAnnotation:
    session = _registry(request).get(view_id)
    a = session.annotation_tapped(body.kind, body.id, body.currentBin)
    if a is None:
        raise HTTPException(status_code=404, detail=f"Unknown {body.kind.value}: {body.id}")
    return ApiAnnotation.from_annotation(a)


@router.get("/views/{view_id}/overlay", response_model=ApiOverlay)
def get_overlay(view_id: str, request: Request) -> ApiOverlay:
    prefs = _registry(request).get(view_id).overlay
    return ApiOverlay(enabled=prefs.enabled, layers=prefs.sorted_layers())


@router.put("/views/{view_id}/overlay", response_model=ApiOverlay)
def put_overlay(view_id: str, body: ApiOverlay, request: Request) -> ApiOverlay:
    prefs = _registry(request).get(view_id).update_overlay(
        enabled=body.enabled, layers=body.layers
    )
    return ApiOverlay(enabled=prefs.enabled, layers=prefs.sorted_layers())
