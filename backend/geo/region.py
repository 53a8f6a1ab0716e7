from __future__ import annotations

import math
from dataclasses import dataclass

from geo.aoi import BBox


@dataclass(frozen=True)
class MapRegion:
    """
    Visible map viewport: a center plus a span, all in degrees.

    The bounding box extends the full span on each side of the center, so a region
    with span (0.05, 0.05) covers 0.1 x 0.1 degrees. This matches how the map view
    reports regions and keeps a little slack around the viewport edges.
    """

    center_lat: float
    center_lon: float
    lat_delta: float
    lon_delta: float

    def bbox(self) -> BBox:
        return BBox.around(self.center_lat, self.center_lon, self.lat_delta, self.lon_delta)

    def planar_distance(self, lat: float, lon: float) -> float:
        # Degree-space distance; good enough for ranking at map zoom levels.
        return math.hypot(lat - self.center_lat, lon - self.center_lon)


def is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    """
    True when a station position is usable for indexing.

    Station datasets report decommissioned or unsurveyed stations with null
    positions, and some with (0, 0) as a "no fix" placeholder.
    """
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    if lat == 0 and lon == 0:
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
