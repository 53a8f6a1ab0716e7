from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from geo.region import MapRegion

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_S = 0.3
DEFAULT_DEADZONE_DEG = 0.001


@dataclass
class RegionChangeController:
    """
    Throttle + deadzone filter for region-change events.

    Map views report a new region on every frame of a pan/zoom gesture. An event is
    accepted only when at least `throttle_s` has passed since the last accepted one and
    it moved more than `deadzone_deg` (center lat, center lon or span lat-delta).

    Timestamps passed as `now` come from the caller's clock, omitted ones from `clock`.
    The two are never compared: switching between them restarts the throttle window,
    and so does a timestamp that runs backwards.
    """

    throttle_s: float = DEFAULT_THROTTLE_S
    deadzone_deg: float = DEFAULT_DEADZONE_DEG
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    _last_region: MapRegion | None = field(default=None, repr=False)
    _last_time: float | None = field(default=None, repr=False)
    _last_external: bool | None = field(default=None, repr=False)

    @property
    def last_accepted_region(self) -> MapRegion | None:
        return self._last_region

    def accept(self, region: MapRegion, now: float | None = None) -> MapRegion | None:
        external = now is not None
        t = float(now) if external else self.clock()

        last_time = self._last_time
        if self._last_external is not None and external != self._last_external:
            logger.debug("Region change clock source switched, restarting throttle window")
            last_time = None
        if last_time is not None and 0.0 <= (t - last_time) < self.throttle_s:
            logger.debug("Region change throttled (%.3fs since last)", t - last_time)
            return None

        last = self._last_region
        if last is not None and self._within_deadzone(last, region):
            logger.debug("Region change below deadzone, ignoring")
            return None

        self._last_region = region
        self._last_time = t
        self._last_external = external
        return region

    def reset(self) -> None:
        self._last_region = None
        self._last_time = None
        self._last_external = None

    def _within_deadzone(self, last: MapRegion, region: MapRegion) -> bool:
        dz = self.deadzone_deg
        return (
            abs(region.center_lat - last.center_lat) < dz
            and abs(region.center_lon - last.center_lon) < dz
            and abs(region.lat_delta - last.lat_delta) < dz
        )
