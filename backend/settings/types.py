from __future__ import annotations

from pydantic import BaseModel, Field


class GridSettings(BaseModel):
    # 0.05 degrees is roughly 5.5 km at the equator.
    cellSizeDeg: float = Field(default=0.05, gt=0.0, le=10.0)
    # Extra ring of cells queried around the viewport so edge markers don't pop.
    paddingCells: int = Field(default=1, ge=0, le=10)


class VisibleSettings(BaseModel):
    maxAnnotations: int = Field(default=100, ge=1, le=10_000)


class RegionSettings(BaseModel):
    throttleSeconds: float = Field(default=0.3, ge=0.0)
    deadzoneDeg: float = Field(default=0.001, ge=0.0)


class ReconcileSettings(BaseModel):
    fullReplaceCountDelta: int = Field(default=50, ge=0)
    fullReplaceMaxCount: int = Field(default=200, ge=0)
    chunkSize: int = Field(default=50, ge=1)


class DefaultRegion(BaseModel):
    # San Francisco Bay, used until the first location fix or region change.
    lat: float = Field(default=37.7749, ge=-90.0, le=90.0)
    lon: float = Field(default=-122.4194, ge=-180.0, le=180.0)
    latDelta: float = Field(default=0.05, gt=0.0)
    lonDelta: float = Field(default=0.05, gt=0.0)


class OverlaySettings(BaseModel):
    enabledByDefault: bool = True
    defaultLayers: list[int] = Field(default_factory=lambda: [0, 1, 2, 6])


class MapConfig(BaseModel):
    grid: GridSettings = Field(default_factory=GridSettings)
    visible: VisibleSettings = Field(default_factory=VisibleSettings)
    region: RegionSettings = Field(default_factory=RegionSettings)
    reconcile: ReconcileSettings = Field(default_factory=ReconcileSettings)
    defaultRegion: DefaultRegion = Field(default_factory=DefaultRegion)
    overlay: OverlaySettings = Field(default_factory=OverlaySettings)
