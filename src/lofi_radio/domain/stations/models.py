"""
Station domain models.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    """Represents an internet radio station.

    Stations are immutable and shared by reference between the catalog,
    the playback supervisor and the presentation layer.
    """

    id: str  # Unique short identifier, e.g. 'soma-groove'
    name: str
    url: str  # Stream URL handed to the external player
    genre: str
    description: str
    quality: str  # Display label, e.g. '256kbps MP3'
