"""
Central configuration file.
Use this to define input paths, network analysis constants and reporting defaults.
Every entry can be overridden from the environment (or a .env file).
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()
BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


###############################################################
# NOTE on the spatial index: candidate neighbours are looked up in
# the 3x3 block of grid cells around each station. With the default
# cell size of 1 degree (~111 km of latitude, less of longitude away
# from the equator) a cutoff of 300 km is NOT fully covered, so the
# neighbour lists are an approximation: stations between roughly one
# cell width and the cutoff may be missed. Raise `cell_size_degrees`
# until one cell spans the cutoff at the latitudes of interest if
# complete neighbourhoods are required.
# Cells also do not wrap at the +/-180 longitude line, so stations on
# opposite sides of it are never neighbours.
###############################################################
CONFIG = {
    "debug": _env_flag("AQSNET_DEBUG", False),
    "sites_path": Path(os.environ.get("AQSNET_SITES_PATH", BASE_DIR / "data" / "aqs_sites.csv")),
    "pollution_path": Path(os.environ.get("AQSNET_POLLUTION_PATH", BASE_DIR / "data" / "annual_conc_by_monitor_2023.csv")),
    "parameter_code": os.environ.get("AQSNET_PARAMETER_CODE", "88101"),  # PM2.5 FRM/FEM mass
    "sample_duration": os.environ.get("AQSNET_SAMPLE_DURATION", "24-HR BLK AVG"),
    "cell_size_degrees": float(os.environ.get("AQSNET_CELL_SIZE_DEGREES", 1.0)),
    "max_neighbor_distance_km": float(os.environ.get("AQSNET_MAX_NEIGHBOR_DISTANCE_KM", 300.0)),
    "k_neighbors": int(os.environ.get("AQSNET_K_NEIGHBORS", 10)),
    "threshold_percentile": 0.75,
    "report_limit": 10,
    "output_path": Path(os.environ.get("AQSNET_OUTPUT_PATH", BASE_DIR / "output")),
}
