from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from overlay.singleton import reset_overlay_store
from settings.loader import clear_config_cache


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("MARINER_PREFS_PATH", str(tmp_path / "overlay.duckdb"))
    monkeypatch.setenv("MARINER_OVERLAY_PREFS", "1")
    clear_config_cache()
    yield TestClient(create_app())
    reset_overlay_store()
    clear_config_cache()


UNITS = [
    {"navUnitId": "nu-1", "navUnitName": "Pier 39", "latitude": 37.80, "longitude": -122.41},
    {"navUnitId": "nu-2", "navUnitName": "Aquatic Park", "latitude": 37.81, "longitude": -122.42},
    {"navUnitId": "nu-3", "navUnitName": "No fix", "latitude": 0, "longitude": 0},
]


def test_ingest_region_and_visible_payload(client):
    resp = client.post("/views/map/records/navUnit", json=UNITS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["ingested"] == 2
    assert body["counts"]["navUnit"] == 2

    resp = client.post(
        "/views/map/region",
        json={"center": {"lat": 37.805, "lon": -122.415}, "span": {"latDelta": 0.05, "lonDelta": 0.05}},
    )
    assert resp.status_code == 200
    region = resp.json()
    assert region["accepted"] is True
    assert region["visible"] == 2

    resp = client.get("/views/map/visible")
    assert resp.status_code == 200
    payload = resp.json()
    units = [t for t in payload["data"] if t["name"] == "Navigation units"]
    assert len(units) == 1
    assert len(units[0]["lat"]) == 2


def test_region_far_away_reports_removed_ids(client):
    client.post("/views/map/records/navUnit", json=UNITS)
    resp = client.post(
        "/views/map/region",
        json={"center": {"lat": 47.6, "lon": -122.3}, "span": {"latDelta": 0.05, "lonDelta": 0.05}, "t": 50.0},
    )
    body = resp.json()
    assert body["accepted"] is True
    assert sorted(body["removed"]) == ["navUnit:nu-1", "navUnit:nu-2"]
    assert body["visible"] == 0

    resp = client.post(
        "/views/map/region",
        json={"center": {"lat": 37.8, "lon": -122.4}, "span": {"latDelta": 0.05, "lonDelta": 0.05}, "t": 50.1},
    )
    assert resp.json()["accepted"] is False


def test_replace_refreshes_a_kind(client):
    client.post("/views/map/records/buoyStation", json={"stations": [{"id": "a", "name": "", "lat": 37.8, "lon": -122.4}]})
    resp = client.post(
        "/views/map/records/buoyStation?replace=true",
        json=[{"id": "b", "name": "", "lat": 37.8, "lon": -122.4}],
    )
    assert resp.json()["counts"]["buoyStation"] == 1


def test_tap_resolves_annotation_or_404(client):
    client.post(
        "/views/map/records/tidalCurrentStation",
        json=[{"id": "SFB1201", "name": "Golden Gate", "lat": 37.81, "lng": -122.47, "currentBin": 14}],
    )
    resp = client.post("/views/map/tap", json={"kind": "tidalCurrentStation", "id": "SFB1201", "currentBin": 14})
    assert resp.status_code == 200
    assert resp.json()["sourceKey"] == "SFB1201_14"

    resp = client.post("/views/map/tap", json={"kind": "buoyStation", "id": "nope"})
    assert resp.status_code == 404


def test_unknown_kind_is_rejected(client):
    resp = client.post("/views/map/records/lighthouse", json=[])
    assert resp.status_code == 422


def test_overlay_roundtrip_forces_base_layer(client):
    resp = client.get("/views/details/overlay")
    assert resp.json() == {"enabled": True, "layers": [0, 1, 2, 6]}

    resp = client.put("/views/details/overlay", json={"enabled": True, "layers": [3, 5]})
    assert resp.json() == {"enabled": True, "layers": [0, 3, 5]}

    # Another view keeps its own defaults.
    assert client.get("/views/map/overlay").json()["layers"] == [0, 1, 2, 6]


def test_chart_layer_catalogue(client):
    rows = client.get("/chart-layers").json()
    assert rows[0] == {"id": 0, "name": "Chart Framework", "description": "Basic chart outline and geographic framework"}
    assert len(rows) == 15
