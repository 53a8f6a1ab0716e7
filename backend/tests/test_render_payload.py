from __future__ import annotations

from geo.distance import geodesic_distance_m, meters_to_nautical_miles
from geo.region import MapRegion
from markers.types import BuoyMarker, NavUnitMarker, TidalCurrentMarker
from overlay.layers import OverlayPreferences
from render.build_map import build_map_payload
from render.view import region_to_zoom


REGION = MapRegion(center_lat=37.805, center_lon=-122.415, lat_delta=0.05, lon_delta=0.05)


def test_payload_has_one_trace_per_present_kind():
    visible = [
        NavUnitMarker(id="nu-1", name="Pier 39", lat=37.80, lon=-122.41),
        TidalCurrentMarker(id="SFB1201", name="Golden Gate", lat=37.81, lon=-122.47, current_bin=14),
        BuoyMarker(id="46026", name="", lat=37.79, lon=-122.43),
    ]
    overlay = OverlayPreferences.create("map", enabled=True, layers=[3])
    payload = build_map_payload(visible, REGION, overlay=overlay)

    assert set(payload.keys()) == {"data", "layout"}
    names = [t["name"] for t in payload["data"]]
    assert names == ["Region (query bbox)", "Navigation units", "Current stations", "Buoys"]

    current = payload["data"][2]
    assert current["customdata"] == [["tidalCurrentStation", "SFB1201", 14]]
    assert "bin 14" in current["text"][0]
    # Unnamed markers fall back to their id.
    assert payload["data"][3]["text"][0].startswith("46026")

    meta = payload["layout"]["meta"]
    assert meta["stats"]["visible"] == 3
    assert meta["stats"]["countsByKind"]["tidalHeightStation"] == 0
    assert meta["overlay"] == {"enabled": True, "layers": [0, 3]}
    assert payload["layout"]["mapbox"]["center"] == {"lat": 37.805, "lon": -122.415}


def test_zoom_grows_as_region_shrinks():
    wide = MapRegion(center_lat=37.8, center_lon=-122.4, lat_delta=2.0, lon_delta=2.0)
    narrow = MapRegion(center_lat=37.8, center_lon=-122.4, lat_delta=0.01, lon_delta=0.01)
    assert region_to_zoom(narrow) > region_to_zoom(wide)


def test_geodesic_distance_is_in_meters():
    # One minute of latitude is close to one nautical mile.
    d = geodesic_distance_m(37.0, -122.0, 37.0 + 1 / 60, -122.0)
    assert 1800.0 < d < 1900.0
    assert abs(meters_to_nautical_miles(d) - 1.0) < 0.02
