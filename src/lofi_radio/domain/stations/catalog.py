"""
Built-in station catalog and lookup helpers.
"""

from typing import Optional

from .models import Station

STATIONS: tuple[Station, ...] = (
    Station(
        id="rp-mellow",
        name="Radio Paradise - Mellow Mix",
        url="http://stream.radioparadise.com/mellow-320",
        genre="Eclectic/Chill",
        description="DJ-mixed blend of modern and classic rock, electronica, world music",
        quality="320kbps AAC",
    ),
    Station(
        id="soma-groove",
        name="SomaFM - Groove Salad",
        url="http://ice1.somafm.com/groovesalad-256-mp3",
        genre="Chill/Ambient",
        description="A nicely chilled plate of ambient/downtempo beats and grooves",
        quality="256kbps MP3",
    ),
    Station(
        id="soma-deep",
        name="SomaFM - Deep Space One",
        url="http://ice1.somafm.com/deepspaceone-128-mp3",
        genre="Deep Ambient",
        description="Deep ambient electronic, experimental and space music",
        quality="128kbps MP3",
    ),
    Station(
        id="soma-lush",
        name="SomaFM - Lush",
        url="http://ice1.somafm.com/lush-128-mp3",
        genre="Mellow/Vocal",
        description="Sensuous and mellow vocals with an electronic influence",
        quality="128kbps MP3",
    ),
)


def get_all_stations() -> tuple[Station, ...]:
    """Get every station in display order."""
    return STATIONS


def get_station_by_id(station_id: str) -> Optional[Station]:
    """Get a station by its exact id."""
    for station in STATIONS:
        if station.id == station_id:
            return station
    return None


def get_station_by_name(text: str) -> Optional[Station]:
    """Get the first station whose name contains text (case-insensitive)."""
    needle = text.lower()
    for station in STATIONS:
        if needle in station.name.lower():
            return station
    return None


def get_station_by_index(index: int) -> Optional[Station]:
    """Get a station by its 1-based display number."""
    if 1 <= index <= len(STATIONS):
        return STATIONS[index - 1]
    return None


def get_default_station() -> Station:
    """Get the station used when nothing else was chosen."""
    return STATIONS[0]


def find_station(query: str) -> Optional[Station]:
    """
    Resolve user input to a station.

    Tries, in order: exact id, name substring, 1-based display number.

    Args:
        query: Raw user input

    Returns:
        Matching Station or None
    """
    query = query.strip()
    if not query:
        return None

    station = get_station_by_id(query) or get_station_by_name(query)
    if station:
        return station

    try:
        return get_station_by_index(int(query))
    except ValueError:
        return None
