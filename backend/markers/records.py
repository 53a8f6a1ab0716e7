from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


def _lenient_float(v: Any) -> float | None:
    # Feeds send "", "n/a", null or garbage for unsurveyed positions.
    if v is None or isinstance(v, bool):
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _lenient_int(v: Any) -> int | None:
    f = _lenient_float(v)
    if f is None or f != f or f in (float("inf"), float("-inf")):
        return None
    return int(f)


LenientFloat = Annotated[float | None, BeforeValidator(_lenient_float)]
LenientInt = Annotated[int | None, BeforeValidator(_lenient_int)]


class StationRecord(BaseModel):
    """
    Minimal shape every station/unit loader delivers.

    Field aliases cover the spellings used by the upstream feeds
    (`lat`/`lng`, `navUnitId`, `navUnitName`, ...). Unparsable positions come through
    as None and are dropped later by the coordinate filter.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("id", "navUnitId", "stationId"))
    name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("name", "navUnitName", "stationName"),
    )
    latitude: LenientFloat = Field(
        default=None, validation_alias=AliasChoices("latitude", "lat")
    )
    longitude: LenientFloat = Field(
        default=None, validation_alias=AliasChoices("longitude", "lng", "lon")
    )


class CurrentStationRecord(StationRecord):
    current_bin: LenientInt = Field(
        default=None, validation_alias=AliasChoices("current_bin", "currentBin", "bin")
    )


def coerce_records(
    raw: list[Any], *, current: bool = False
) -> list[StationRecord]:
    """
    Accept model instances or plain dicts (as decoded from JSON).

    Records that still fail validation (no id, not an object) are logged and dropped so
    one bad row never costs the rest of the batch.
    """
    model = CurrentStationRecord if current else StationRecord
    out: list[StationRecord] = []
    dropped = 0
    for r in raw or []:
        if isinstance(r, StationRecord):
            out.append(r)
            continue
        try:
            out.append(model.model_validate(r))
        except ValidationError as e:
            dropped += 1
            logger.debug("Dropping malformed record %r: %s", r, e)
    if dropped:
        logger.info("Dropped %d malformed %s records", dropped, model.__name__)
    return out
