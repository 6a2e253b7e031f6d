"""
Module: Distance Graph
Great-circle distances and the per-station neighbour lists (adjacency list)
of the monitoring network.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from aqsnet.network.spatial_index import SpatialIndex
from aqsnet.network.station import Station
from aqsnet.utils.logger import get_logger

logger = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0

Neighbor = Tuple[str, float]


def haversine_km(lat1, lon1, lat2, lon2):
    """Calculate distance in km using Haversine formula.

    Works on scalars or numpy arrays (broadcasting), e.g. one station
    against an array of candidate coordinates.
    """
    lat1_rad, lon1_rad = np.radians(lat1), np.radians(lon1)
    lat2_rad, lon2_rad = np.radians(lat2), np.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2.0) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class DistanceGraph:
    """Builds distance-sorted neighbour lists restricted to a cutoff radius."""

    def __init__(self, max_neighbor_distance_km: float = 300.0, cell_size_degrees: float = 1.0):
        if max_neighbor_distance_km < 0:
            raise ValueError(
                f"max_neighbor_distance_km must be non-negative, got {max_neighbor_distance_km}"
            )
        self.max_neighbor_distance_km = max_neighbor_distance_km
        self.cell_size_degrees = cell_size_degrees

    def neighbors_of(self, station: Station, stations: Mapping[str, Station],
                     index: SpatialIndex) -> List[Neighbor]:
        candidate_ids = [cid for cid in index.candidates(station) if cid != station.id]
        if not candidate_ids:
            return []

        lats = np.array([stations[cid].latitude for cid in candidate_ids], dtype=float)
        lons = np.array([stations[cid].longitude for cid in candidate_ids], dtype=float)
        distances = haversine_km(station.latitude, station.longitude, lats, lons)

        inside = distances <= self.max_neighbor_distance_km
        neighbors = [
            (cid, float(d))
            for cid, d, ok in zip(candidate_ids, distances, inside)
            if ok
        ]
        # ties on distance are broken by neighbour id so the output is reproducible
        neighbors.sort(key=lambda item: (item[1], item[0]))
        return neighbors

    def build(self, stations: Mapping[str, Station],
              index: Optional[SpatialIndex] = None) -> Dict[str, List[Neighbor]]:
        if index is None:
            index = SpatialIndex(self.cell_size_degrees).build(stations.values())
        logger.debug(f"Created spatial index with {len(index)} cells")

        adjacency: Dict[str, List[Neighbor]] = {}
        for station_id, station in stations.items():
            adjacency[station_id] = self.neighbors_of(station, stations, index)

        edges = sum(len(n) for n in adjacency.values())
        logger.debug(
            f"Built adjacency list for {len(adjacency)} stations with {edges} directed edges "
            f"(cutoff {self.max_neighbor_distance_km} km)"
        )
        return adjacency
