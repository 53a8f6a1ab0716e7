from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from geo.grid import DEFAULT_CELL_SIZE_DEG, SpatialGrid
from geo.region import MapRegion, is_valid_coordinate
from markers.records import StationRecord, coerce_records
from markers.types import Annotation, AnnotationKind, make_annotation

logger = logging.getLogger(__name__)

DEFAULT_MAX_ANNOTATIONS = 100

VisibleSet = tuple[Annotation, ...]
VisibleSetListener = Callable[[VisibleSet], None]


def to_annotation(kind: AnnotationKind, record: StationRecord) -> Annotation | None:
    """
    Convert one raw record; None when it has no usable position.
    """
    if not is_valid_coordinate(record.latitude, record.longitude):
        return None
    return make_annotation(
        kind,
        id=str(record.id),
        name=record.name or "",
        lat=float(record.latitude),  # type: ignore[arg-type]
        lon=float(record.longitude),  # type: ignore[arg-type]
        current_bin=getattr(record, "current_bin", None),
    )


@dataclass
class AnnotationAggregator:
    """
    Owns every loaded annotation and answers "what should be drawn for this region".

    Notes:
    - Four loaders (nav units, tide stations, current stations, buoys) deliver batches
      independently and in any order; all mutations happen under one lock.
    - `ingest` appends. Loading the same kind twice duplicates entries; use `replace`
      for refreshes.
    - Visible-set computation is synchronous and never waits on I/O.
    """

    cell_size: float = DEFAULT_CELL_SIZE_DEG
    max_annotations: int = DEFAULT_MAX_ANNOTATIONS
    padding_cells: int = 1
    listeners: list[VisibleSetListener] = field(default_factory=list, repr=False)

    _grid: SpatialGrid = field(init=False, repr=False)
    _all: list[Annotation] = field(default_factory=list, repr=False)
    _loading: dict[AnnotationKind, bool] = field(
        default_factory=lambda: {k: False for k in AnnotationKind}, repr=False
    )
    _region: MapRegion | None = field(default=None, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __post_init__(self) -> None:
        self._grid = SpatialGrid(cell_size=self.cell_size)

    # ---- loading flags

    def set_loading(self, kind: AnnotationKind, value: bool) -> None:
        with self._lock:
            self._loading[AnnotationKind(kind)] = bool(value)

    def is_loading(self, kind: AnnotationKind) -> bool:
        with self._lock:
            return self._loading[AnnotationKind(kind)]

    @property
    def is_loading_any(self) -> bool:
        with self._lock:
            return any(self._loading.values())

    # ---- ingestion

    def ingest(self, kind: AnnotationKind, records: Iterable[Any]) -> list[Annotation]:
        kind = AnnotationKind(kind)
        batch = self._convert(kind, records)
        with self._lock:
            self._grid.insert(batch)
            self._all.extend(batch)
            self._loading[kind] = False
            logger.info(
                "Ingested %d %s annotations (total %d)", len(batch), kind.value, len(self._all)
            )
            self._publish_current()
        return batch

    def clear(self, kind: AnnotationKind) -> int:
        """
        Drop every annotation of `kind` and rebuild the grid from the rest.
        """
        kind = AnnotationKind(kind)
        with self._lock:
            kept = [a for a in self._all if a.kind is not kind]
            removed = len(self._all) - len(kept)
            self._all = kept
            self._grid.clear()
            self._grid.insert(kept)
            if removed:
                self._publish_current()
        if removed:
            logger.info("Cleared %d %s annotations", removed, kind.value)
        return removed

    def replace(self, kind: AnnotationKind, records: Iterable[Any]) -> list[Annotation]:
        kind = AnnotationKind(kind)
        batch = self._convert(kind, records)
        with self._lock:
            kept = [a for a in self._all if a.kind is not kind]
            self._all = [*kept, *batch]
            self._grid.clear()
            self._grid.insert(self._all)
            self._loading[kind] = False
            logger.info("Replaced %s batch with %d annotations", kind.value, len(batch))
            self._publish_current()
        return batch

    # ---- queries

    @property
    def current_region(self) -> MapRegion | None:
        return self._region

    def set_region(self, region: MapRegion) -> VisibleSet:
        with self._lock:
            self._region = region
            visible = self.compute_visible_set(region)
            self._notify(visible)
        return visible

    def compute_visible_set(self, region: MapRegion) -> VisibleSet:
        with self._lock:
            candidates = self._grid.annotations_overlapping(region, padding=self.padding_cells)
        # sorted() is stable, so ties keep insertion order.
        ranked = sorted(candidates, key=lambda a: region.planar_distance(a.lat, a.lon))
        return tuple(ranked[: self.max_annotations])

    def find_by_id(
        self, kind: AnnotationKind, id: str, current_bin: int | None = None
    ) -> Annotation | None:
        kind = AnnotationKind(kind)
        with self._lock:
            for a in self._all:
                if a.kind is not kind or a.id != id:
                    continue
                if current_bin is not None and a.current_bin != current_bin:
                    continue
                return a
        return None

    def all_annotations(self) -> list[Annotation]:
        with self._lock:
            return list(self._all)

    def counts(self) -> dict[str, int]:
        out = {k.value: 0 for k in AnnotationKind}
        with self._lock:
            for a in self._all:
                out[a.kind.value] += 1
        return out

    def __len__(self) -> int:
        with self._lock:
            return len(self._grid)

    # ---- internals

    def _convert(self, kind: AnnotationKind, records: Iterable[Any]) -> list[Annotation]:
        parsed = coerce_records(
            list(records), current=kind is AnnotationKind.tidal_current_station
        )
        out: list[Annotation] = []
        for r in parsed:
            a = to_annotation(kind, r)
            if a is not None:
                out.append(a)
        skipped = len(parsed) - len(out)
        if skipped:
            logger.debug("Skipped %d %s records without a usable position", skipped, kind.value)
        return out

    def _publish_current(self) -> None:
        # Callers hold _lock so listeners see visible sets in mutation order.
        region = self._region
        if region is None:
            return
        self._notify(self.compute_visible_set(region))

    def _notify(self, visible: VisibleSet) -> None:
        for listener in list(self.listeners):
            listener(visible)
