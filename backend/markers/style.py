from __future__ import annotations

from dataclasses import dataclass

from markers.types import AnnotationKind


@dataclass(frozen=True)
class MarkerStyle:
    title: str
    color: str
    # Maki icon name understood by mapbox symbol layers.
    symbol: str
    size: int = 9


def marker_style(kind: AnnotationKind) -> MarkerStyle:
    kind = AnnotationKind(kind)
    if kind is AnnotationKind.nav_unit:
        return MarkerStyle(title="Navigation units", color="rgba(30, 136, 229, 0.9)", symbol="harbor")
    if kind is AnnotationKind.tidal_height_station:
        return MarkerStyle(title="Tide stations", color="rgba(67, 160, 71, 0.9)", symbol="water")
    if kind is AnnotationKind.tidal_current_station:
        return MarkerStyle(title="Current stations", color="rgba(251, 140, 0, 0.9)", symbol="triangle")
    if kind is AnnotationKind.buoy_station:
        return MarkerStyle(title="Buoys", color="rgba(229, 57, 53, 0.9)", symbol="circle")
    raise ValueError(f"Unknown annotation kind: {kind!r}")
