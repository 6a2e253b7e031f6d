"""
Main orchestration script for the monitoring network gap analysis:
load stations -> build distance graph -> isolation -> correlation -> gaps -> report.
"""
import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from aqsnet.analysis.correlation import analyze_correlation
from aqsnet.analysis.gaps import Gap, compute_thresholds, find_monitoring_gaps
from aqsnet.analysis.isolation import IsolationStatistics, compute_isolation, isolation_statistics
from aqsnet.config import CONFIG
from aqsnet.data_loading.loader import load_pollution, load_stations
from aqsnet.network.monitoring_network import MonitoringNetwork, build_network
from aqsnet.reporting.report import (
    format_correlation,
    format_gap_report,
    format_isolation_statistics,
    gaps_to_frame,
    isolation_to_frame,
)
from aqsnet.utils.logger import get_logger, set_debug

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    network: MonitoringNetwork
    pollution: Dict[str, float]
    statistics: Optional[IsolationStatistics]
    correlation: float
    thresholds: Optional[Tuple[float, float]]
    gaps: List[Gap] = field(default_factory=list)
    report: str = ""


def run_pipeline(config: dict = CONFIG) -> AnalysisResult:
    logger.info("Reading station data...")
    stations = load_stations(config["sites_path"])
    network = build_network(stations)
    logger.info(f"Monitoring network has {len(network)} unique stations.")

    logger.info("Building adjacency list (calculating distances between stations)...")
    network.build_adjacency(
        max_neighbor_distance_km=config["max_neighbor_distance_km"],
        cell_size_degrees=config["cell_size_degrees"],
    )

    k = config["k_neighbors"]
    logger.info(f"Calculating isolation metrics (distance to {k} nearest neighbors)...")
    assigned = compute_isolation(network, k)
    logger.info(f"Isolation computed for {assigned}/{len(network)} stations.")
    stats = isolation_statistics(network)

    if config.get("debug", False):
        most_isolated = sorted(
            (s for s in network.stations.values() if s.isolation is not None),
            key=lambda s: (-s.isolation, s.id),
        )[:5]
        for station in most_isolated:
            logger.debug(f"Isolated: {station.id} {station.site_name} {station.isolation:.2f} km")

    logger.info("Reading pollution data...")
    pollution = load_pollution(
        config["pollution_path"],
        parameter_code=config["parameter_code"],
        sample_duration=config["sample_duration"],
    )
    if not pollution:
        logger.warning("No pollution data available.")

    correlation = analyze_correlation(network, pollution)

    logger.info("Finding monitoring gaps (high pollution, high isolation)...")
    thresholds = compute_thresholds(network, pollution, config["threshold_percentile"])
    gaps: List[Gap] = []
    if thresholds is None:
        logger.warning("Cannot compute thresholds: no isolation values or no pollution data.")
    else:
        gaps = find_monitoring_gaps(network, pollution, *thresholds)

    report = "\n\n".join([
        format_isolation_statistics(stats, k),
        format_correlation(correlation),
        format_gap_report(gaps, thresholds, config["report_limit"]),
    ])
    logger.info(f"Analysis report:\n{report}")

    output_path = Path(config["output_path"])
    output_path.mkdir(parents=True, exist_ok=True)
    (output_path / "report.txt").write_text(report + "\n", encoding="utf-8")
    isolation_to_frame(network).to_csv(output_path / "isolation_scores.csv", index=False)
    gaps_to_frame(gaps).to_csv(output_path / "gap_candidates.csv", index=False)
    logger.info(f"Analysis completed! Report saved to {output_path}")

    return AnalysisResult(
        network=network,
        pollution=pollution,
        statistics=stats,
        correlation=correlation,
        thresholds=thresholds,
        gaps=gaps,
        report=report,
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Find monitoring gaps: isolated AQS stations in high-pollution areas"
    )
    parser.add_argument("--sites", type=Path, default=None,
                        help="Path to aqs_sites.csv")
    parser.add_argument("--pollution", type=Path, default=None,
                        help="Path to annual_conc_by_monitor_<year>.csv")
    parser.add_argument("-k", type=int, default=None,
                        help="Number of nearest neighbours averaged into the isolation metric")
    parser.add_argument("--max-distance-km", type=float, default=None,
                        help="Neighbour cutoff radius in km")
    parser.add_argument("--cell-size", type=float, default=None,
                        help="Spatial index cell size in degrees")
    parser.add_argument("--output", type=Path, default=None,
                        help="Output directory for report and CSV files")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logging")
    args = parser.parse_args(argv)

    if args.debug:
        set_debug(True)

    config = dict(CONFIG)
    overrides = {
        "sites_path": args.sites,
        "pollution_path": args.pollution,
        "k_neighbors": args.k,
        "max_neighbor_distance_km": args.max_distance_km,
        "cell_size_degrees": args.cell_size,
        "output_path": args.output,
    }
    config.update({key: value for key, value in overrides.items() if value is not None})

    try:
        run_pipeline(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Analysis failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
