"""
Graph of air quality monitors: stations are nodes, edges are great-circle
distances to nearby stations.
"""
from __future__ import annotations

from typing import Dict, Iterable, List

from aqsnet.network.distance import DistanceGraph, Neighbor
from aqsnet.network.spatial_index import SpatialIndex
from aqsnet.network.station import Station
from aqsnet.utils.logger import get_logger

logger = get_logger(__name__)


class MonitoringNetwork:
    def __init__(self):
        self.stations: Dict[str, Station] = {}
        # station_id -> [(neighbor_id, distance_km), ...] sorted by distance
        self.adjacency: Dict[str, List[Neighbor]] = {}

    def add_station(self, station: Station) -> None:
        """Add (or replace, if the id already exists) a station.

        Drops the adjacency list and every isolation score computed from it.
        """
        if station.id in self.stations:
            logger.debug(f"Replacing duplicate station {station.id}")
        self.stations[station.id] = station
        self.adjacency = {}
        self.clear_isolation()

    def clear_isolation(self) -> None:
        for station in self.stations.values():
            station.isolation = None

    def add_stations(self, stations: Iterable[Station]) -> None:
        for station in stations:
            self.add_station(station)

    def build_adjacency(self, max_neighbor_distance_km: float = 300.0,
                        cell_size_degrees: float = 1.0) -> Dict[str, List[Neighbor]]:
        index = SpatialIndex(cell_size_degrees).build(self.stations.values())
        graph = DistanceGraph(max_neighbor_distance_km, cell_size_degrees)
        self.adjacency = graph.build(self.stations, index)
        # scores from a previous graph no longer describe this one
        self.clear_isolation()
        return self.adjacency

    def neighbors(self, station_id: str) -> List[Neighbor]:
        return self.adjacency.get(station_id, [])

    def isolation_values(self) -> List[float]:
        return [s.isolation for s in self.stations.values() if s.isolation is not None]

    def __len__(self) -> int:
        return len(self.stations)

    def __contains__(self, station_id: str) -> bool:
        return station_id in self.stations


def build_network(stations: Iterable[Station]) -> MonitoringNetwork:
    network = MonitoringNetwork()
    network.add_stations(stations)
    return network
