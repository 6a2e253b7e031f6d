"""
Text and tabular reports for the isolation / pollution analysis.
"""
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from aqsnet.analysis.gaps import Gap
from aqsnet.analysis.isolation import IsolationStatistics
from aqsnet.network.monitoring_network import MonitoringNetwork


def format_isolation_statistics(stats: Optional[IsolationStatistics], k: int) -> str:
    if stats is None:
        return "No isolation values calculated"
    lines = [
        f"Isolation statistics (km to {k} nearest neighbors, {stats.count} stations):",
        f"  Minimum: {stats.minimum:.2f} km",
        f"  Maximum: {stats.maximum:.2f} km",
        f"  Median: {stats.median:.2f} km",
        f"  Mean: {stats.mean:.2f} km",
    ]
    return "\n".join(lines)


def format_correlation(r: float) -> str:
    return f"Correlation between isolation and pollution: {r:.4f}"


def preview_gaps(gaps: Sequence[Gap], limit: int = 10) -> Tuple[List[Gap], int]:
    """First `limit` gaps and how many were left out."""
    preview = list(gaps[:limit])
    return preview, len(gaps) - len(preview)


def format_gap_report(gaps: Sequence[Gap], thresholds: Optional[Tuple[float, float]],
                      limit: int = 10) -> str:
    if thresholds is None:
        return "No isolation or pollution data available for gap detection"

    isolation_threshold, pollution_threshold = thresholds
    lines = [
        f"Using thresholds: pollution > {pollution_threshold:.2f}, "
        f"isolation > {isolation_threshold:.2f} km",
        f"Found {len(gaps)} stations in areas with monitoring gaps:",
    ]
    preview, omitted = preview_gaps(gaps, limit)
    for i, (station, pollution) in enumerate(preview, start=1):
        lines.append(
            f"  {i}. {station.site_name} ({station.city_name}, {station.state_name}): "
            f"Pollution: {pollution:.2f}, Isolation: {station.isolation:.2f} km"
        )
    if omitted > 0:
        lines.append(f"  ... and {omitted} more")
    return "\n".join(lines)


def gaps_to_frame(gaps: Sequence[Gap]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "rank": rank,
                "station_id": station.id,
                "site_name": station.site_name,
                "city_name": station.city_name,
                "state_name": station.state_name,
                "latitude": station.latitude,
                "longitude": station.longitude,
                "isolation_km": station.isolation,
                "pollution": pollution,
            }
            for rank, (station, pollution) in enumerate(gaps, start=1)
        ],
        columns=["rank", "station_id", "site_name", "city_name", "state_name",
                 "latitude", "longitude", "isolation_km", "pollution"],
    )


def isolation_to_frame(network: MonitoringNetwork) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "station_id": [s.id for s in network.stations.values()],
            "site_name": [s.site_name for s in network.stations.values()],
            "latitude": [s.latitude for s in network.stations.values()],
            "longitude": [s.longitude for s in network.stations.values()],
            "neighbors": [len(network.neighbors(sid)) for sid in network.stations],
            "isolation_km": [s.isolation for s in network.stations.values()],
        }
    )
    return df.sort_values("station_id").reset_index(drop=True)
