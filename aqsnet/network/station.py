"""
Air quality monitoring station: identity, location and isolation metric.
Stations are the nodes of the monitoring network graph.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


def make_station_id(state_code: str, county_code: str, site_number: str) -> str:
    """AQS site identifier, e.g. "06-037-1103"."""
    return f"{state_code}-{county_code}-{site_number}"


# identity and location are fixed once the station exists; only `isolation` changes
FIXED_FIELDS = frozenset({"state_code", "county_code", "site_number", "latitude", "longitude"})


@dataclass
class Station:
    state_code: str
    county_code: str
    site_number: str
    latitude: float
    longitude: float
    site_name: str = ""
    city_name: str = ""
    state_name: str = ""
    county_name: str = ""
    land_use: str = ""
    location_setting: str = ""
    # average distance (km) to the k nearest neighbours; set by compute_isolation
    isolation: Optional[float] = None

    def __post_init__(self):
        if not math.isfinite(self.latitude) or not math.isfinite(self.longitude):
            raise ValueError(
                f"Station {self.id} has non-finite coordinates "
                f"({self.latitude}, {self.longitude})"
            )

    def __setattr__(self, name, value):
        if name in FIXED_FIELDS and name in self.__dict__:
            raise AttributeError(f"Station.{name} cannot be changed after construction")
        super().__setattr__(name, value)

    @property
    def id(self) -> str:
        return make_station_id(self.state_code, self.county_code, self.site_number)
