"""
Playback state snapshots and helpers.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from lofi_radio.domain.stations.models import Station

from .exceptions import ConfigurationError


class PlaybackPhase(enum.Enum):
    """Where the supervisor is in its lifecycle."""

    IDLE = "idle"
    SPAWNING = "spawning"
    PLAYING = "playing"
    RECONNECTING = "reconnecting"
    STOPPED = "stopped"


@dataclass(frozen=True)
class PlaybackState:
    """Immutable snapshot of the supervisor state.

    is_playing implies current_station and process_id are set, and
    start_time is set exactly when is_playing is.
    """

    is_playing: bool = False
    current_station: Optional[Station] = None
    volume: int = 70
    start_time: Optional[datetime] = None
    process_id: Optional[int] = None
    phase: PlaybackPhase = PlaybackPhase.IDLE


def check_volume(volume: int) -> int:
    """Validate a volume level.

    Raises:
        ConfigurationError: If volume is not an integer in [0, 100]
    """
    if isinstance(volume, bool) or not isinstance(volume, int):
        raise ConfigurationError(f"Volume must be an integer, got {volume!r}")
    if not 0 <= volume <= 100:
        raise ConfigurationError("Volume must be between 0 and 100")
    return volume


def format_uptime(seconds: float) -> str:
    """Format elapsed seconds as '45s', '2m 5s' or '1h 0m 3s'."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
