"""
Stations domain module.

Provides the built-in station catalog and lookups by id, name and number.
"""

from .catalog import (
    STATIONS,
    find_station,
    get_all_stations,
    get_default_station,
    get_station_by_id,
    get_station_by_index,
    get_station_by_name,
)
from .models import Station

__all__ = [
    # Models
    "Station",
    # Catalog
    "STATIONS",
    "get_all_stations",
    "get_station_by_id",
    "get_station_by_name",
    "get_station_by_index",
    "get_default_station",
    "find_station",
]
