from __future__ import annotations

from functools import lru_cache

from pyproj import Geod

METERS_PER_NAUTICAL_MILE = 1852.0


@lru_cache(maxsize=1)
def wgs84_geod() -> Geod:
    return Geod(ellps="WGS84")


def geodesic_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Ellipsoidal distance in meters.

    Ranking uses the planar approximation in `MapRegion.planar_distance`; this one is
    only for distances shown to the user.
    """
    _az12, _az21, dist = wgs84_geod().inv(lon1, lat1, lon2, lat2)
    return float(dist)


def meters_to_nautical_miles(meters: float) -> float:
    return float(meters) / METERS_PER_NAUTICAL_MILE
