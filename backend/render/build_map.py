from __future__ import annotations

from typing import Any, Sequence

from geo.region import MapRegion
from markers.types import Annotation, AnnotationKind
from overlay.layers import OverlayPreferences
from render.traces import trace_markers, trace_region_bbox
from render.view import region_to_zoom


def build_map_payload(
    visible: Sequence[Annotation],
    region: MapRegion,
    *,
    overlay: OverlayPreferences | None = None,
    loading: bool = False,
    viewport: dict[str, int] | None = None,
) -> dict[str, Any]:
    """
    Plotly `scattermapbox` payload for the current visible set.

    One trace per annotation kind, so the legend doubles as a kind filter on the client.
    """
    data: list[dict[str, Any]] = [trace_region_bbox(region)]
    counts: dict[str, int] = {}
    for kind in AnnotationKind:
        trace = trace_markers(kind, visible, region)
        counts[kind.value] = len(trace["lat"])
        if trace["lat"]:
            data.append(trace)

    width = int((viewport or {}).get("width") or 900)
    height = int((viewport or {}).get("height") or 600)
    layout: dict[str, Any] = {
        "mapbox": {
            "center": {"lat": region.center_lat, "lon": region.center_lon},
            "zoom": region_to_zoom(region, width=width, height=height),
            "style": "carto-positron",
        },
        "margin": {"l": 0, "r": 0, "t": 0, "b": 0},
        "showlegend": True,
        "meta": {
            "stats": {
                "visible": len(visible),
                "countsByKind": counts,
                "loading": bool(loading),
            },
            "overlay": {
                "enabled": overlay.enabled,
                "layers": overlay.sorted_layers(),
            }
            if overlay is not None
            else None,
        },
    }
    return {"data": data, "layout": layout}
