"""
Module: Data Loader
Loads EPA AQS station metadata and annual concentration records from CSV.
- aqs_sites.csv: one row per monitoring site
- annual_conc_by_monitor_<year>.csv: one row per monitor / pollutant standard
"""
from pathlib import Path
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from aqsnet.config import CONFIG
from aqsnet.network.station import Station, make_station_id
from aqsnet.utils.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

# AQS column name -> Station field
SITE_COLUMNS = {
    "State Code": "state_code",
    "County Code": "county_code",
    "Site Number": "site_number",
    "Latitude": "latitude",
    "Longitude": "longitude",
    "Land Use": "land_use",
    "Location Setting": "location_setting",
    "Local Site Name": "site_name",
    "State Name": "state_name",
    "County Name": "county_name",
    "City Name": "city_name",
}

POLLUTION_COLUMNS = [
    "State Code",
    "County Code",
    "Site Num",
    "Parameter Code",
    "Sample Duration",
    "Pollutant Standard",
    "Arithmetic Mean",
]


def _read_csv(path: PathLike, columns) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, low_memory=False)
    df.columns = df.columns.str.strip()
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing required columns: {missing}")
    return df


def load_stations(path: PathLike) -> List[Station]:
    """
    Load monitoring sites. Rows without usable coordinates are skipped
    (and logged), everything else is carried through as text.
    """
    df = _read_csv(path, SITE_COLUMNS.keys())
    df = df[list(SITE_COLUMNS.keys())].rename(columns=SITE_COLUMNS)

    for col in ("state_code", "county_code", "site_number"):
        df[col] = df[col].str.strip()
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")

    valid = np.isfinite(df["latitude"]) & np.isfinite(df["longitude"])
    skipped = int((~valid).sum())
    if skipped:
        logger.warning(f"Skipped {skipped} station rows with missing or invalid coordinates")
    df = df[valid]

    stations = [Station(**record) for record in df.to_dict(orient="records")]
    logger.info(f"Loaded {len(stations)} stations with valid coordinates from {Path(path).name}")
    return stations


def load_pollution(path: PathLike,
                   parameter_code: str = CONFIG["parameter_code"],
                   sample_duration: str = CONFIG["sample_duration"]) -> Dict[str, float]:
    """
    One representative concentration per site for a single parameter and
    sample duration. A record whose pollutant standard mentions "Annual"
    always replaces the current value; any other standard is only used
    when the site has no value yet.
    """
    df = _read_csv(path, POLLUTION_COLUMNS)[POLLUTION_COLUMNS]
    df = df[
        (df["Parameter Code"].str.strip() == parameter_code)
        & (df["Sample Duration"].str.strip() == sample_duration)
    ].copy()
    df["Arithmetic Mean"] = pd.to_numeric(df["Arithmetic Mean"], errors="coerce")

    unusable = ~np.isfinite(df["Arithmetic Mean"])
    if unusable.any():
        logger.warning(f"Skipped {int(unusable.sum())} pollution rows without an arithmetic mean")
    df = df[~unusable]

    pollution: Dict[str, float] = {}
    for row in df.itertuples(index=False):
        state_code, county_code, site_num, _, _, standard, mean = row
        station_id = make_station_id(state_code.strip(), county_code.strip(), site_num.strip())
        if "Annual" in standard:
            pollution[station_id] = float(mean)
        elif station_id not in pollution:
            pollution[station_id] = float(mean)

    logger.info(
        f"Loaded pollution data for {len(pollution)} stations "
        f"(parameter {parameter_code}, {sample_duration})"
    )
    return pollution
