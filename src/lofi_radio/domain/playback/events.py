"""
Playback lifecycle events.

The supervisor publishes exactly these event types; listeners dispatch on
the class. Events are advisory, `PlaybackSupervisor.get_state()` is the
authoritative view.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from lofi_radio.domain.stations.models import Station

from .exceptions import PlaybackError


@dataclass(frozen=True)
class PlayingEvent:
    """Playback of station was confirmed."""

    station: Station


@dataclass(frozen=True)
class StoppedEvent:
    """Playback stopped (deliberately, or because the stream ended cleanly)."""


@dataclass(frozen=True)
class ErrorEvent:
    """A failure was observed during an active session."""

    kind: str
    message: str
    station: Optional[Station] = None

    @classmethod
    def from_error(cls, error: PlaybackError) -> "ErrorEvent":
        return cls(kind=error.kind, message=str(error), station=error.station)


@dataclass(frozen=True)
class ReconnectingEvent:
    """An automatic reconnection attempt is scheduled."""

    attempt: int


@dataclass(frozen=True)
class ConnectionLostEvent:
    """Reconnection gave up; playback has been torn down."""

    error: PlaybackError


PlaybackEvent = Union[
    PlayingEvent, StoppedEvent, ErrorEvent, ReconnectingEvent, ConnectionLostEvent
]

PlaybackListener = Callable[[PlaybackEvent], None]
