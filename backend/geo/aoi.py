from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BBox:
    """
    Lat/lon rectangle in degrees, latitude first to match how map regions are reported.
    """

    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @classmethod
    def around(cls, lat: float, lon: float, half_lat: float, half_lon: float) -> "BBox":
        half_lat, half_lon = abs(half_lat), abs(half_lon)
        return cls(
            min_lat=lat - half_lat,
            min_lon=lon - half_lon,
            max_lat=lat + half_lat,
            max_lon=lon + half_lon,
        )

    def normalized(self) -> "BBox":
        lat_lo, lat_hi = sorted((self.min_lat, self.max_lat))
        lon_lo, lon_hi = sorted((self.min_lon, self.max_lon))
        return BBox(min_lat=lat_lo, min_lon=lon_lo, max_lat=lat_hi, max_lon=lon_hi)

    def contains(self, lat: float, lon: float) -> bool:
        # Edges are inside.
        b = self.normalized()
        return b.min_lat <= lat <= b.max_lat and b.min_lon <= lon <= b.max_lon
