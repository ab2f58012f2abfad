"""Playback exceptions for error handling."""

from typing import Optional

from lofi_radio.domain.stations.models import Station


class PlaybackError(Exception):
    """Base exception for playback operations."""

    kind = "PLAYBACK_ERROR"

    def __init__(self, message: str, station: Optional[Station] = None):
        self.station = station
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(PlaybackError, ValueError):
    """Raised when a caller passes an invalid setting (e.g. volume out of range)."""

    kind = "CONFIGURATION_ERROR"


class BinaryNotFoundError(PlaybackError):
    """Raised when the external player executable cannot be found."""

    kind = "BINARY_NOT_FOUND"

    def __init__(self, binary: str, station: Optional[Station] = None):
        self.binary = binary
        super().__init__(
            f"{binary} not found. Please install ffmpeg: https://ffmpeg.org/download.html",
            station,
        )


class StreamError(PlaybackError):
    """Raised when the player reports a fatal stream problem on stderr."""

    kind = "STREAM_ERROR"


class ProcessError(PlaybackError):
    """Raised when the player process fails for a reason other than a missing binary."""

    kind = "PROCESS_ERROR"


class UnexpectedExitError(PlaybackError):
    """Raised when the player exits while it should still be playing."""

    kind = "UNEXPECTED_EXIT"

    def __init__(self, exit_code: Optional[int], station: Optional[Station] = None):
        self.exit_code = exit_code
        super().__init__(f"Process exited with code {exit_code}", station)


class ReconnectFailedError(PlaybackError):
    """Raised when an automatic reconnection attempt fails."""

    kind = "RECONNECT_FAILED"

    def __init__(
        self,
        attempt: int,
        cause: PlaybackError,
        station: Optional[Station] = None,
    ):
        self.attempt = attempt
        self.cause = cause
        super().__init__(f"Reconnection attempt {attempt} failed: {cause}", station)


class PlaybackCancelledError(PlaybackError):
    """Raised when a pending play is superseded by stop()."""

    kind = "CANCELLED"
