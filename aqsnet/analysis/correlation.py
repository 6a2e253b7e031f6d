"""
Pearson correlation between station isolation and pollution level.
"""
from __future__ import annotations

import math
from typing import List, Mapping, Sequence, Tuple

from aqsnet.network.monitoring_network import MonitoringNetwork


def paired_samples(network: MonitoringNetwork,
                   pollution: Mapping[str, float]) -> List[Tuple[float, float]]:
    """(isolation, pollution) for stations where both values are known."""
    pairs = []
    for station_id, station in network.stations.items():
        if station.isolation is None:
            continue
        value = pollution.get(station_id)
        if value is None:
            continue
        pairs.append((station.isolation, value))
    return pairs


def pearson_correlation(pairs: Sequence[Tuple[float, float]]) -> float:
    """Pearson r over paired samples; 0.0 for no samples or zero variance."""
    if not pairs:
        return 0.0
    n = float(len(pairs))
    sum_x = sum(x for x, _ in pairs)
    sum_y = sum(y for _, y in pairs)
    sum_xy = sum(x * y for x, y in pairs)
    sum_xx = sum(x * x for x, _ in pairs)
    sum_yy = sum(y * y for _, y in pairs)

    numerator = n * sum_xy - sum_x * sum_y
    variance_term = (n * sum_xx - sum_x * sum_x) * (n * sum_yy - sum_y * sum_y)
    # rounding can push a zero variance slightly negative
    if variance_term <= 0.0:
        return 0.0
    r = numerator / math.sqrt(variance_term)
    return max(-1.0, min(1.0, r))


def analyze_correlation(network: MonitoringNetwork, pollution: Mapping[str, float]) -> float:
    return pearson_correlation(paired_samples(network, pollution))
