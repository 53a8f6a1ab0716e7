from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

# Chart framework; the tile service renders nothing useful without it.
BASE_LAYER_ID = 0

DEFAULT_LAYERS: frozenset[int] = frozenset({0, 1, 2, 6})


@dataclass(frozen=True)
class ChartLayer:
    id: int
    name: str
    description: str


CHART_LAYERS: tuple[ChartLayer, ...] = (
    ChartLayer(0, "Chart Framework", "Basic chart outline and geographic framework"),
    ChartLayer(1, "Land Areas", "Coastlines and land mass features"),
    ChartLayer(2, "Hydrography", "Water areas and basic depth information"),
    ChartLayer(3, "Depth Contours", "Depth contour lines"),
    ChartLayer(4, "Soundings", "Individual depth measurements"),
    ChartLayer(5, "Navigation Aids", "Buoys, beacons, and lights"),
    ChartLayer(6, "Harbors & Ports", "Harbor infrastructure and port facilities"),
    ChartLayer(7, "Hazards", "Rocks, wrecks, and underwater obstructions"),
    ChartLayer(8, "Restricted Areas", "Anchorage areas and restricted zones"),
    ChartLayer(9, "Seabed Features", "Bottom characteristics and features"),
    ChartLayer(10, "Traffic Schemes", "Traffic separation schemes and routing"),
    ChartLayer(11, "Text & Labels", "Place names and chart annotations"),
    ChartLayer(12, "Additional Features", "Supplementary chart information"),
    ChartLayer(13, "Deep Water Routes", "Deep water routing information"),
    ChartLayer(14, "Quality of Data", "Data quality indicators"),
)

_KNOWN_IDS = frozenset(layer.id for layer in CHART_LAYERS)


def normalize_layers(layers: Iterable[int] | None, *, enabled: bool) -> frozenset[int]:
    """
    Drop unknown ids; force the base layer whenever the overlay is on.
    """
    out = {int(x) for x in (layers or []) if int(x) in _KNOWN_IDS}
    if enabled:
        out.add(BASE_LAYER_ID)
    return frozenset(out)


@dataclass(frozen=True)
class OverlayPreferences:
    view_id: str
    enabled: bool
    layers: frozenset[int]

    @classmethod
    def create(
        cls, view_id: str, *, enabled: bool, layers: Iterable[int] | None
    ) -> "OverlayPreferences":
        return cls(
            view_id=view_id,
            enabled=bool(enabled),
            layers=normalize_layers(layers, enabled=bool(enabled)),
        )

    def toggled(self, enabled: bool) -> "OverlayPreferences":
        return OverlayPreferences.create(self.view_id, enabled=enabled, layers=self.layers)

    def with_layer(self, layer_id: int) -> "OverlayPreferences":
        return OverlayPreferences.create(
            self.view_id, enabled=self.enabled, layers={*self.layers, int(layer_id)}
        )

    def without_layer(self, layer_id: int) -> "OverlayPreferences":
        if int(layer_id) == BASE_LAYER_ID:
            return self
        return replace(self, layers=frozenset(x for x in self.layers if x != int(layer_id)))

    def sorted_layers(self) -> list[int]:
        return sorted(self.layers)
