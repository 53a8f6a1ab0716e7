from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Protocol

from markers.types import AnnotationKind
from session.map_session import MapSession

logger = logging.getLogger(__name__)


class StationSource(Protocol):
    """
    One of the four data loaders (nav units, tide stations, current stations, buoys).
    """

    kind: AnnotationKind

    async def load(self) -> list[Any]: ...


@dataclass(frozen=True)
class JsonFileSource:
    """
    Records from a JSON file on disk.

    Accepts either a bare list of records or the API envelope `{"stations": [...]}`.
    """

    kind: AnnotationKind
    path: Path

    async def load(self) -> list[Any]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> list[Any]:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("stations") or data.get("navUnits") or []
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of records in {self.path}")
        return data


async def load_source(session: MapSession, source: StationSource) -> int:
    """
    Run one loader and hand its batch to the session. Returns the number ingested.

    Failures are logged and clear the loading flag; the other loaders keep going.
    """
    agg = session.aggregator
    kind = AnnotationKind(source.kind)
    if agg.is_loading(kind):
        logger.debug("%s already loading, skipping", kind.value)
        return 0

    agg.set_loading(kind, True)
    try:
        records = await source.load()
        return len(session.ingest(kind, records))
    except Exception:
        logger.exception("Error loading %s", kind.value)
        return 0
    finally:
        agg.set_loading(kind, False)


async def load_all(session: MapSession, sources: Iterable[StationSource]) -> dict[str, int]:
    """
    Run every loader concurrently. Returns ingested counts per kind (summed when two
    sources share a kind).
    """
    sources = list(sources)
    results = await asyncio.gather(*(load_source(session, s) for s in sources))
    out: dict[str, int] = {}
    for s, n in zip(sources, results):
        key = AnnotationKind(s.kind).value
        out[key] = out.get(key, 0) + n
    return out
