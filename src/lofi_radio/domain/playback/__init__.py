"""Playback domain - external player supervision.

This domain handles:
- Spawning and stopping the ffplay process
- Confirming stream starts and detecting stream failures
- Automatic reconnection with a bounded number of attempts
- Lifecycle events for the presentation layer
"""

from .events import (
    ConnectionLostEvent,
    ErrorEvent,
    PlaybackEvent,
    PlaybackListener,
    PlayingEvent,
    ReconnectingEvent,
    StoppedEvent,
)
from .exceptions import (
    BinaryNotFoundError,
    ConfigurationError,
    PlaybackCancelledError,
    PlaybackError,
    ProcessError,
    ReconnectFailedError,
    StreamError,
    UnexpectedExitError,
)
from .process import (
    PlayerProcess,
    build_player_command,
    check_player_available,
    volume_to_gain,
)
from .state import PlaybackPhase, PlaybackState, check_volume, format_uptime
from .supervisor import PlaybackSupervisor

__all__ = [
    # Supervisor
    "PlaybackSupervisor",
    # State
    "PlaybackState",
    "PlaybackPhase",
    "check_volume",
    "format_uptime",
    # Process
    "PlayerProcess",
    "build_player_command",
    "check_player_available",
    "volume_to_gain",
    # Events
    "PlaybackEvent",
    "PlaybackListener",
    "PlayingEvent",
    "StoppedEvent",
    "ErrorEvent",
    "ReconnectingEvent",
    "ConnectionLostEvent",
    # Errors
    "PlaybackError",
    "ConfigurationError",
    "BinaryNotFoundError",
    "StreamError",
    "ProcessError",
    "UnexpectedExitError",
    "ReconnectFailedError",
    "PlaybackCancelledError",
]
