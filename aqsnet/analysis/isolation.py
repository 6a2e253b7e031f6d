"""
Isolation metric: average distance (km) from each station to its k nearest
neighbours within the cutoff radius of the adjacency list.
"""
from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Optional

from aqsnet.network.monitoring_network import MonitoringNetwork
from aqsnet.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class IsolationStatistics:
    minimum: float
    maximum: float
    median: float
    mean: float
    count: int


def compute_isolation(network: MonitoringNetwork, k: int) -> int:
    """
    Set `station.isolation` for every station with at least one neighbour.
    Stations without neighbours inside the cutoff get `isolation = None`.
    Returns the number of stations that received a value.
    """
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 1:
        raise ValueError(f"k must be a positive integer, got {k!r}")

    assigned = 0
    for station_id, station in network.stations.items():
        k_nearest = network.neighbors(station_id)[:k]
        if not k_nearest:
            station.isolation = None
            continue
        station.isolation = sum(d for _, d in k_nearest) / len(k_nearest)
        assigned += 1

    missing = len(network.stations) - assigned
    if missing:
        logger.debug(f"{missing} stations have no neighbour within the cutoff radius")
    return assigned


def isolation_statistics(network: MonitoringNetwork) -> Optional[IsolationStatistics]:
    """Min / max / median / mean of the isolation distribution, None if empty.

    The median is the upper-middle element of the sorted values (no averaging
    of the two central values for even counts).
    """
    values = sorted(network.isolation_values())
    if not values:
        return None
    n = len(values)
    return IsolationStatistics(
        minimum=values[0],
        maximum=values[-1],
        median=values[n // 2],
        mean=sum(values) / n,
        count=n,
    )
