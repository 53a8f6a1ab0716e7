from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, TypeAlias

from geo.region import MapRegion
from markers.types import Annotation

CellKey: TypeAlias = tuple[int, int]

DEFAULT_CELL_SIZE_DEG = 0.05


def cell_key(lat: float, lon: float, cell_size: float = DEFAULT_CELL_SIZE_DEG) -> CellKey:
    # floor (not truncation) so cells don't double up across the equator/meridian.
    return (int(math.floor(lat / cell_size)), int(math.floor(lon / cell_size)))


@dataclass
class SpatialGrid:
    """
    Uniform lat/lon hash grid over annotations.

    Notes:
    - Each annotation lives in exactly one cell, picked from its coordinate.
    - Callers filter out missing/NaN coordinates before inserting.
    - There is no per-item delete; owners rebuild with `clear()` + `insert()`.
    """

    cell_size: float = DEFAULT_CELL_SIZE_DEG
    _cells: dict[CellKey, list[Annotation]] = field(default_factory=dict, repr=False)
    _count: int = field(default=0, repr=False)

    def key_for(self, lat: float, lon: float) -> CellKey:
        return cell_key(lat, lon, self.cell_size)

    def insert(self, annotations: Iterable[Annotation]) -> None:
        for a in annotations:
            self._cells.setdefault(self.key_for(a.lat, a.lon), []).append(a)
            self._count += 1

    def cell_ranges(
        self, region: MapRegion, *, padding: int = 0
    ) -> tuple[range, range]:
        """
        Inclusive latitude-cell and longitude-cell ranges covering the region bbox.
        """
        b = region.bbox().normalized()
        min_lat_cell, min_lon_cell = self.key_for(b.min_lat, b.min_lon)
        max_lat_cell, max_lon_cell = self.key_for(b.max_lat, b.max_lon)
        pad = max(0, int(padding))
        return (
            range(min_lat_cell - pad, max_lat_cell + pad + 1),
            range(min_lon_cell - pad, max_lon_cell + pad + 1),
        )

    def cells_overlapping(self, region: MapRegion, *, padding: int = 0) -> list[CellKey]:
        """
        Cell keys whose extent intersects the region bbox, widened by `padding` cells.
        """
        lat_cells, lon_cells = self.cell_ranges(region, padding=padding)
        out: list[CellKey] = []
        for lat_cell in lat_cells:
            for lon_cell in lon_cells:
                out.append((lat_cell, lon_cell))
        return out

    def annotations_overlapping(
        self, region: MapRegion, *, padding: int = 0
    ) -> list[Annotation]:
        """
        Same result set as `annotations_in_cells(cells_overlapping(...))`.

        Zoomed far out, the key range can hold millions of mostly-empty cells; in that
        case walking the populated cells is cheaper than enumerating keys.
        """
        lat_cells, lon_cells = self.cell_ranges(region, padding=padding)
        if len(lat_cells) * len(lon_cells) <= len(self._cells):
            return self.annotations_in_cells(self.cells_overlapping(region, padding=padding))

        out: list[Annotation] = []
        for (lat_cell, lon_cell), bucket in self._cells.items():
            if lat_cell in lat_cells and lon_cell in lon_cells:
                out.extend(bucket)
        return out

    def annotations_in_cells(self, keys: Iterable[CellKey]) -> list[Annotation]:
        out: list[Annotation] = []
        for k in keys:
            bucket = self._cells.get(k)
            if bucket:
                out.extend(bucket)
        return out

    def clear(self) -> None:
        self._cells.clear()
        self._count = 0

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return self._count
