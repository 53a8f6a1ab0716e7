from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from markers.types import Annotation, AnnotationKind, source_key


class ApiCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class ApiSpan(BaseModel):
    latDelta: float = Field(gt=0.0, le=180.0)
    lonDelta: float = Field(gt=0.0, le=360.0)


class ApiRegionChange(BaseModel):
    center: ApiCenter
    span: ApiSpan
    # Optional client timestamp (seconds); server monotonic clock when omitted.
    t: float | None = None


class ApiTap(BaseModel):
    kind: AnnotationKind
    id: str
    currentBin: int | None = None


class ApiOverlay(BaseModel):
    enabled: bool
    layers: list[int] = Field(default_factory=list)


class ApiAnnotation(BaseModel):
    kind: AnnotationKind
    id: str
    sourceKey: str
    name: str
    lat: float
    lon: float
    currentBin: int | None = None

    @classmethod
    def from_annotation(cls, a: Annotation) -> "ApiAnnotation":
        return cls(
            kind=a.kind,
            id=a.id,
            sourceKey=source_key(a),
            name=a.name,
            lat=a.lat,
            lon=a.lon,
            currentBin=a.current_bin,
        )


class ApiRegionResult(BaseModel):
    accepted: bool
    visible: int
    fullReplace: bool = False
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class ApiIngestResult(BaseModel):
    kind: AnnotationKind
    ingested: int
    counts: dict[str, int]
    loading: bool


def record_list(body: Any) -> list[Any]:
    # Accept either a bare list or the feed envelope {"stations": [...]}.
    if isinstance(body, dict):
        body = body.get("stations") or body.get("navUnits") or []
    return list(body or [])
