from __future__ import annotations

from typing import Any, Sequence

from geo.aoi import BBox
from geo.distance import geodesic_distance_m, meters_to_nautical_miles
from geo.region import MapRegion
from markers.style import marker_style
from markers.types import Annotation, AnnotationKind


def trace_region_bbox(region: MapRegion) -> dict[str, Any]:
    b: BBox = region.bbox().normalized()
    lons = [b.min_lon, b.max_lon, b.max_lon, b.min_lon, b.min_lon]
    lats = [b.min_lat, b.min_lat, b.max_lat, b.max_lat, b.min_lat]
    return {
        "type": "scattermapbox",
        "name": "Region (query bbox)",
        "lon": lons,
        "lat": lats,
        "mode": "lines",
        "line": {"color": "rgba(55, 71, 79, 0.7)", "width": 1},
        "hoverinfo": "skip",
        "showlegend": False,
    }


def _hover_label(a: Annotation, region: MapRegion) -> str:
    nm = meters_to_nautical_miles(
        geodesic_distance_m(region.center_lat, region.center_lon, a.lat, a.lon)
    )
    label = a.name or a.id
    if a.current_bin is not None:
        label = f"{label} (bin {a.current_bin})"
    return f"{label} · {nm:.1f} nm"


def trace_markers(
    kind: AnnotationKind, annotations: Sequence[Annotation], region: MapRegion
) -> dict[str, Any]:
    style = marker_style(kind)
    pts = [a for a in annotations if a.kind is kind]
    return {
        "type": "scattermapbox",
        "name": style.title,
        "lon": [a.lon for a in pts],
        "lat": [a.lat for a in pts],
        "mode": "markers",
        "text": [_hover_label(a, region) for a in pts],
        # Lets the client resolve taps back to (kind, id, bin).
        "customdata": [[kind.value, a.id, a.current_bin] for a in pts],
        "marker": {"size": style.size, "color": style.color, "symbol": style.symbol},
        "hovertemplate": "%{text}<extra></extra>",
    }
