from __future__ import annotations

from geo.region import MapRegion
from markers.region_control import RegionChangeController


def _region(lat: float, lon: float, span: float = 0.05) -> MapRegion:
    return MapRegion(center_lat=lat, center_lon=lon, lat_delta=span, lon_delta=span)


def test_first_event_is_always_accepted():
    ctl = RegionChangeController()
    r = _region(37.8, -122.4)
    assert ctl.accept(r, now=0.0) is r
    assert ctl.last_accepted_region is r


def test_events_inside_throttle_window_are_rejected():
    ctl = RegionChangeController(throttle_s=0.3)
    assert ctl.accept(_region(37.8, -122.4), now=10.0) is not None
    assert ctl.accept(_region(38.5, -123.0), now=10.1) is None


def test_events_after_throttle_window_with_large_delta_are_accepted():
    ctl = RegionChangeController(throttle_s=0.3)
    assert ctl.accept(_region(37.8, -122.4), now=10.0) is not None
    moved = _region(38.5, -123.0)
    assert ctl.accept(moved, now=10.5) is moved


def test_sub_deadzone_moves_are_rejected_even_after_throttle():
    ctl = RegionChangeController(throttle_s=0.3, deadzone_deg=0.001)
    assert ctl.accept(_region(37.8, -122.4), now=10.0) is not None
    assert ctl.accept(_region(37.8005, -122.4005), now=11.0) is None


def test_zoom_only_change_passes_deadzone():
    ctl = RegionChangeController()
    ctl.accept(_region(37.8, -122.4, span=0.05), now=0.0)
    assert ctl.accept(_region(37.8, -122.4, span=0.2), now=1.0) is not None


def test_rejected_events_do_not_move_the_throttle_window():
    ctl = RegionChangeController(throttle_s=0.3)
    ctl.accept(_region(37.8, -122.4), now=0.0)
    assert ctl.accept(_region(38.0, -122.4), now=0.2) is None
    # 0.35s after the last *accepted* event.
    assert ctl.accept(_region(38.0, -122.4), now=0.35) is not None


def test_reset_forgets_history():
    ctl = RegionChangeController()
    ctl.accept(_region(37.8, -122.4), now=0.0)
    ctl.reset()
    assert ctl.last_accepted_region is None
    assert ctl.accept(_region(37.8, -122.4), now=0.01) is not None


def test_uses_injected_clock_when_now_is_omitted():
    ticks = iter([100.0, 100.05, 101.0])
    ctl = RegionChangeController(clock=lambda: next(ticks))
    assert ctl.accept(_region(37.8, -122.4)) is not None
    assert ctl.accept(_region(39.0, -122.4)) is None
    assert ctl.accept(_region(39.0, -122.4)) is not None


def test_switching_between_caller_and_server_clocks_restarts_throttle():
    ctl = RegionChangeController(clock=lambda: 500_000.0)
    assert ctl.accept(_region(37.8, -122.4)) is not None
    # Caller timestamps are far behind the server clock; they must not read as throttled.
    assert ctl.accept(_region(47.6, -122.3), now=50.0) is not None
    assert ctl.accept(_region(37.8, -122.4), now=50.1) is None
    assert ctl.accept(_region(37.8, -122.4)) is not None


def test_timestamp_running_backwards_is_accepted():
    ctl = RegionChangeController(throttle_s=0.3)
    assert ctl.accept(_region(37.8, -122.4), now=1000.0) is not None
    assert ctl.accept(_region(47.6, -122.3), now=3.0) is not None
    assert ctl.accept(_region(37.8, -122.4), now=3.1) is None
