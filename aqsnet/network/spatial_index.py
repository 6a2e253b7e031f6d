"""
Module: Spatial Index
Coarse lat/lon grid used to prefilter neighbour candidates before computing
exact great-circle distances.

Each station is assigned to the cell (floor(lon / cell), floor(lat / cell)).
Candidates for a station are all stations in its own cell and the 8 cells
around it. This is an approximation: it only guarantees that every station
within the cutoff radius is returned when the radius does not exceed roughly
one cell width (1 degree of latitude is ~111 km, 1 degree of longitude
shrinks with cos(latitude)). False positives are fine, they are pruned by the
exact distance check in DistanceGraph.

Cells do not wrap around the antimeridian: stations just east of -180 and
just west of +180 longitude fall in cells -180 and 179 (for 1 degree cells)
and are never candidates for each other, however close they are.
"""
from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from aqsnet.network.station import Station

Cell = Tuple[int, int]


class SpatialIndex:
    def __init__(self, cell_size_degrees: float = 1.0):
        if not cell_size_degrees > 0:
            raise ValueError(f"cell_size_degrees must be positive, got {cell_size_degrees}")
        self.cell_size_degrees = cell_size_degrees
        self.cells: Dict[Cell, List[str]] = defaultdict(list)

    def cell_of(self, latitude: float, longitude: float) -> Cell:
        return (
            math.floor(longitude / self.cell_size_degrees),
            math.floor(latitude / self.cell_size_degrees),
        )

    def build(self, stations: Iterable[Station]) -> "SpatialIndex":
        self.cells = defaultdict(list)
        for station in stations:
            self.cells[self.cell_of(station.latitude, station.longitude)].append(station.id)
        return self

    def candidates(self, station: Station) -> List[str]:
        """Station ids in the 3x3 block of cells around `station` (includes the station itself)."""
        cx, cy = self.cell_of(station.latitude, station.longitude)
        found: List[str] = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                # .get so lookups do not create empty cells in the defaultdict
                found.extend(self.cells.get((cx + dx, cy + dy), ()))
        return found

    def __len__(self) -> int:
        return len(self.cells)
