from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, TypeAlias, Union

# Decimal places kept when comparing coordinates for identity (~0.1m).
IDENTITY_DECIMALS = 6


class AnnotationKind(str, Enum):
    nav_unit = "navUnit"
    tidal_height_station = "tidalHeightStation"
    tidal_current_station = "tidalCurrentStation"
    buoy_station = "buoyStation"


@dataclass(frozen=True)
class NavUnitMarker:
    kind: ClassVar[AnnotationKind] = AnnotationKind.nav_unit

    id: str
    name: str
    lat: float
    lon: float

    @property
    def current_bin(self) -> int | None:
        return None


@dataclass(frozen=True)
class TidalHeightMarker:
    kind: ClassVar[AnnotationKind] = AnnotationKind.tidal_height_station

    id: str
    name: str
    lat: float
    lon: float

    @property
    def current_bin(self) -> int | None:
        return None


@dataclass(frozen=True)
class TidalCurrentMarker:
    """
    One station id can report currents at several depths; each depth is a bin and
    gets its own marker.
    """

    kind: ClassVar[AnnotationKind] = AnnotationKind.tidal_current_station

    id: str
    name: str
    lat: float
    lon: float
    current_bin: int | None = None


@dataclass(frozen=True)
class BuoyMarker:
    kind: ClassVar[AnnotationKind] = AnnotationKind.buoy_station

    id: str
    name: str
    lat: float
    lon: float

    @property
    def current_bin(self) -> int | None:
        return None


Annotation: TypeAlias = Union[NavUnitMarker, TidalHeightMarker, TidalCurrentMarker, BuoyMarker]

IdentityKey: TypeAlias = tuple[str, str, Optional[int], float, float]


def identity_key(a: Annotation) -> IdentityKey:
    """
    Key used to decide whether two annotations render as the same marker.
    """
    return (
        a.kind.value,
        a.id,
        a.current_bin,
        round(a.lat, IDENTITY_DECIMALS),
        round(a.lon, IDENTITY_DECIMALS),
    )


def source_key(a: Annotation) -> str:
    # Matches the "<station>_<bin>" ids used by the current prediction screens.
    if a.current_bin is not None:
        return f"{a.id}_{a.current_bin}"
    return a.id


def make_annotation(
    kind: AnnotationKind,
    *,
    id: str,
    name: str,
    lat: float,
    lon: float,
    current_bin: int | None = None,
) -> Annotation:
    if kind is AnnotationKind.nav_unit:
        return NavUnitMarker(id=id, name=name, lat=lat, lon=lon)
    if kind is AnnotationKind.tidal_height_station:
        return TidalHeightMarker(id=id, name=name, lat=lat, lon=lon)
    if kind is AnnotationKind.tidal_current_station:
        return TidalCurrentMarker(id=id, name=name, lat=lat, lon=lon, current_bin=current_bin)
    if kind is AnnotationKind.buoy_station:
        return BuoyMarker(id=id, name=name, lat=lat, lon=lon)
    raise ValueError(f"Unknown annotation kind: {kind!r}")
