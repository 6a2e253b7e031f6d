"""
Monitoring gap detection: stations that are both isolated and located in
high-pollution areas, using data-driven percentile thresholds.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional, Tuple

from aqsnet.network.monitoring_network import MonitoringNetwork
from aqsnet.network.station import Station

Gap = Tuple[Station, float]


def percentile_value(values: Iterable[float], fraction: float = 0.75) -> Optional[float]:
    """Value at rank floor(fraction * n) of the sorted values (no interpolation)."""
    ordered = sorted(values)
    if not ordered:
        return None
    index = min(math.floor(fraction * len(ordered)), len(ordered) - 1)
    return ordered[index]


def compute_thresholds(network: MonitoringNetwork, pollution: Mapping[str, float],
                       fraction: float = 0.75) -> Optional[Tuple[float, float]]:
    """
    (isolation_threshold, pollution_threshold) at the given percentile rank.

    The two distributions are taken independently: isolation over the stations
    that have a value, pollution over every value in the mapping (including
    sites that are not part of the network). Returns None when either
    distribution is empty.
    """
    isolation_threshold = percentile_value(network.isolation_values(), fraction)
    pollution_threshold = percentile_value(pollution.values(), fraction)
    if isolation_threshold is None or pollution_threshold is None:
        return None
    return isolation_threshold, pollution_threshold


def find_monitoring_gaps(network: MonitoringNetwork, pollution: Mapping[str, float],
                         isolation_threshold: float, pollution_threshold: float) -> List[Gap]:
    """Stations strictly above both thresholds, most isolated first (ties by id)."""
    gaps: List[Gap] = []
    for station_id, station in network.stations.items():
        if station.isolation is None:
            continue
        value = pollution.get(station_id)
        if value is None:
            continue
        if station.isolation > isolation_threshold and value > pollution_threshold:
            gaps.append((station, value))

    gaps.sort(key=lambda gap: (-gap[0].isolation, gap[0].id))
    return gaps
