from __future__ import annotations

import math

from geo.region import MapRegion


def region_to_zoom(region: MapRegion, *, width: int = 900, height: int = 600) -> float:
    b = region.bbox().normalized()
    return bbox_to_zoom(b.min_lon, b.min_lat, b.max_lon, b.max_lat, width=width, height=height)


def bbox_to_zoom(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    *,
    width: int,
    height: int,
) -> float:
    # WebMercator bbox -> zoom heuristic.
    def lat_to_rad(lat: float) -> float:
        lat = max(-85.0, min(85.0, lat))
        s = math.sin(lat * math.pi / 180.0)
        return math.log((1 + s) / (1 - s)) / 2.0

    lat_rad_min = lat_to_rad(min_lat)
    lat_rad_max = lat_to_rad(max_lat)
    lon_delta = max_lon - min_lon
    lat_delta = (lat_rad_max - lat_rad_min) * 180.0 / math.pi

    # avoid division by zero
    lon_delta = max(lon_delta, 1e-6)
    lat_delta = max(lat_delta, 1e-6)

    # 256px tiles
    zoom_x = math.log2((width * 360.0) / (256.0 * lon_delta))
    zoom_y = math.log2((height * 170.0) / (256.0 * lat_delta))
    return float(max(0.0, min(zoom_x, zoom_y, 22.0)))
