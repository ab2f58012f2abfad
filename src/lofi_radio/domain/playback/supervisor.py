"""
Stream playback supervisor.

Owns at most one external player process. Starting a stream is confirmed
after a grace period; failures observed afterwards drive a bounded
reconnect loop that runs on its own thread. All state changes happen under
one lock so get_state() never observes a half-applied transition.
"""

import threading
import time
from datetime import datetime
from functools import partial
from typing import Callable, List, Optional

from loguru import logger

from lofi_radio.core.config import PlayerConfig
from lofi_radio.domain.stations.models import Station

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
    PlaybackCancelledError,
    PlaybackError,
    ProcessError,
    ReconnectFailedError,
    StreamError,
    UnexpectedExitError,
)
from .process import PlayerProcess, build_player_command
from .state import PlaybackPhase, PlaybackState, check_volume, format_uptime

ProcessFactory = Callable[..., PlayerProcess]


class _PendingStart:
    """One spawn attempt waiting for its grace period.

    Settled exactly once, always under the supervisor lock: the first of
    confirmation, failure or cancellation wins and the others are dropped.
    """

    CONFIRMED = "confirmed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def __init__(self, station: Station):
        self.station = station
        self.outcome: Optional[str] = None
        self.error: Optional[PlaybackError] = None
        self._settled = threading.Event()

    def settle(self, outcome: str, error: Optional[PlaybackError] = None) -> bool:
        if self.outcome is not None:
            return False
        self.outcome = outcome
        self.error = error
        self._settled.set()
        return True

    def wait(self, timeout: float) -> bool:
        return self._settled.wait(timeout)


class PlaybackSupervisor:
    """Launches, monitors, restarts and stops the external player."""

    def __init__(
        self,
        config: Optional[PlayerConfig] = None,
        process_factory: Optional[ProcessFactory] = None,
        clock: Callable[[], float] = time.monotonic,
        volume: Optional[int] = None,
    ):
        self._config = config or PlayerConfig()
        self._process_factory = process_factory or PlayerProcess.spawn
        self._clock = clock

        self._lock = threading.RLock()
        self._start_lock = threading.Lock()  # Serializes play() callers
        self._listeners: List[PlaybackListener] = []

        self._phase = PlaybackPhase.IDLE
        self._is_playing = False
        self._current_station: Optional[Station] = None
        self._volume = check_volume(
            volume if volume is not None else self._config.default_volume
        )
        self._start_time: Optional[datetime] = None
        self._started_at: Optional[float] = None
        self._process: Optional[PlayerProcess] = None
        self._pending: Optional[_PendingStart] = None
        self._reconnect_cancel: Optional[threading.Event] = None
        self._reconnect_attempts = 0
        # Bumped by stop(), play() and set_volume(); a volume restart only
        # proceeds while its token is current
        self._restart_token = 0
        # Monitor callbacks carry the session they were created for; any
        # callback from an older session is ignored.
        self._session = 0

    # Events

    def subscribe(self, listener: PlaybackListener) -> Callable[[], None]:
        """Register a listener for every playback event. Returns an unsubscribe function.

        Listeners may call play() when handling PlayingEvent. A StoppedEvent
        caused by play() replacing a stream is delivered while that start is
        still in progress, so listeners must not call play() from it.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: PlaybackEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Playback listener failed on {type(event).__name__}")

    # Public operations

    def play(self, station: Station, volume: Optional[int] = None) -> None:
        """
        Play a station, replacing whatever is currently playing.

        Blocks until playback is confirmed (grace period elapsed without a
        failure) or fails.

        Args:
            station: Station to play
            volume: Volume 0-100, defaults to the last used volume

        Raises:
            ConfigurationError: If volume is out of range
            BinaryNotFoundError: If the player executable is missing
            PlaybackCancelledError: If stop() was called before confirmation
            PlaybackError: If the stream failed during the grace period
        """
        if volume is not None:
            check_volume(volume)

        with self._start_lock:
            self.stop()
            with self._lock:
                if volume is not None:
                    self._volume = volume
                volume = self._volume
            session = self._launch(station, volume)
        # Listeners run after the start lock is released so they may call play()
        self._announce(station, session)

    def stop(self) -> None:
        """
        Stop playback and wait until the player has exited.

        Also cancels a pending volume restart. No-op otherwise when nothing
        is active.
        """
        with self._lock:
            self._restart_token += 1
        self._halt()

    def _halt(self) -> None:
        with self._lock:
            process = self._process
            pending = self._pending
            cancel = self._reconnect_cancel
            if process is None and pending is None and cancel is None:
                return

            self._session += 1
            self._is_playing = False
            self._current_station = None
            self._start_time = None
            self._started_at = None
            self._process = None
            self._pending = None
            self._reconnect_cancel = None
            self._phase = PlaybackPhase.STOPPED

            if cancel is not None:
                cancel.set()
            if pending is not None:
                pending.settle(
                    _PendingStart.CANCELLED,
                    PlaybackCancelledError(
                        "Playback was stopped before it was confirmed", pending.station
                    ),
                )

        if process is not None:
            self._terminate(process)

        logger.info("Playback stopped")
        self._emit(StoppedEvent())

    def set_volume(self, volume: int) -> None:
        """
        Change the volume.

        The player cannot change gain while running, so an active stream is
        restarted on a background thread.

        Raises:
            ConfigurationError: If volume is out of range
        """
        check_volume(volume)

        with self._lock:
            self._volume = volume
            station = self._current_station if self._is_playing else None
            self._restart_token += 1
            token = self._restart_token

        logger.info(f"Volume set to {volume}")
        if station is None:
            return

        threading.Thread(
            target=self._restart_with_volume,
            args=(station, volume, token),
            daemon=True,
            name="PlaybackVolumeRestart",
        ).start()

    def get_state(self) -> PlaybackState:
        """Get an immutable snapshot of the playback state."""
        with self._lock:
            return PlaybackState(
                is_playing=self._is_playing,
                current_station=self._current_station,
                volume=self._volume,
                start_time=self._start_time,
                process_id=self._process.pid if self._process is not None else None,
                phase=self._phase,
            )

    def get_uptime(self) -> str:
        """Get how long the current stream has been playing, or 'Not playing'."""
        with self._lock:
            if not self._is_playing or self._started_at is None:
                return "Not playing"
            elapsed = self._clock() - self._started_at
        return format_uptime(elapsed)

    # Process lifecycle

    def _launch(
        self,
        station: Station,
        volume: int,
        cancel: Optional[threading.Event] = None,
        restart_token: Optional[int] = None,
    ) -> int:
        """Spawn the player and wait out the grace period.

        Returns the session of the confirmed start. The caller announces it.
        """
        command = build_player_command(self._config.binary, station.url, volume)

        with self._lock:
            if cancel is not None and cancel.is_set():
                raise PlaybackCancelledError("Reconnection was cancelled", station)
            if restart_token is not None and restart_token != self._restart_token:
                raise PlaybackCancelledError("Volume restart was superseded", station)

            self._session += 1
            session = self._session
            pending = _PendingStart(station)
            self._pending = pending
            self._current_station = station
            self._phase = PlaybackPhase.SPAWNING
            logger.info(f"Starting {station.name} at volume {volume} (session {session})")

            try:
                process = self._process_factory(
                    command,
                    on_stderr=partial(self._on_stderr, session, station),
                    on_exit=partial(self._on_exit, session, station),
                )
            except FileNotFoundError as e:
                self._abandon_start(cancel)
                logger.error(f"Player executable not found: {self._config.binary}")
                raise BinaryNotFoundError(self._config.binary, station) from e
            except OSError as e:
                self._abandon_start(cancel)
                logger.error(f"Failed to start player: {e}")
                raise ProcessError(
                    f"Failed to start {self._config.binary}: {e}", station
                ) from e
            self._process = process

        if not pending.wait(self._config.grace_period_ms / 1000):
            with self._lock:
                if pending.settle(_PendingStart.CONFIRMED):
                    self._pending = None
                    self._is_playing = True
                    self._phase = PlaybackPhase.PLAYING
                    self._start_time = datetime.now()
                    self._started_at = self._clock()
                    self._reconnect_attempts = 0

        if pending.outcome == _PendingStart.CONFIRMED:
            logger.info(f"Playing {station.name} (pid {process.pid})")
            return session

        if pending.outcome == _PendingStart.FAILED:
            self._retire(process)
            with self._lock:
                if self._process is None and self._pending is None:
                    self._abandon_start(cancel)

        raise pending.error

    def _abandon_start(self, cancel: Optional[threading.Event]) -> None:
        """Reset state after a start attempt failed. Caller holds the lock."""
        self._pending = None
        if cancel is None:
            self._current_station = None
            self._phase = PlaybackPhase.IDLE
        elif not cancel.is_set():
            self._phase = PlaybackPhase.RECONNECTING

    def _terminate(self, process: PlayerProcess) -> None:
        """Detach monitors, SIGTERM, escalate to SIGKILL, wait for exit."""
        process.detach()
        if process.wait(timeout=0):
            return

        process.request_graceful_stop()
        if not process.wait(timeout=self._config.stop_timeout_ms / 1000):
            logger.warning(
                f"Player pid {process.pid} ignored SIGTERM for "
                f"{self._config.stop_timeout_ms}ms, killing"
            )
            process.force_kill()
            process.wait()

    def _retire(self, process: PlayerProcess) -> None:
        """Terminate a failed process and drop it if it is still the current one."""
        self._terminate(process)
        with self._lock:
            if self._process is process:
                self._process = None

    def _restart_with_volume(self, station: Station, volume: int, token: int) -> None:
        with self._start_lock:
            with self._lock:
                if token != self._restart_token or not self._is_playing:
                    logger.debug("Volume restart superseded")
                    return
            try:
                self._halt()
                session = self._launch(station, volume, restart_token=token)
            except PlaybackCancelledError:
                logger.debug("Volume restart superseded by stop()")
                return
            except PlaybackError as e:
                logger.warning(f"Restart after volume change failed: {e}")
                error = e
            else:
                error = None

        if error is not None:
            self._emit(ErrorEvent.from_error(error))
        else:
            self._announce(station, session)

    def _announce(self, station: Station, session: int) -> None:
        """Emit PlayingEvent unless the confirmed session was already replaced."""
        with self._lock:
            current = session == self._session and self._is_playing
        if current:
            self._emit(PlayingEvent(station))

    # Monitors

    def _on_stderr(self, session: int, station: Station, line: str) -> None:
        # Substring heuristic over the player's diagnostics; locale and
        # version dependent
        if any(pattern in line for pattern in self._config.fatal_patterns):
            self._on_failure(session, StreamError(line, station))

    def _on_exit(self, session: int, station: Station, exit_code: Optional[int]) -> None:
        if exit_code == 0:
            with self._lock:
                if session != self._session or not self._is_playing:
                    ended = False
                else:
                    ended = True
                    self._session += 1
                    self._is_playing = False
                    self._current_station = None
                    self._start_time = None
                    self._started_at = None
                    self._process = None
                    self._phase = PlaybackPhase.STOPPED
            if ended:
                logger.info(f"Stream {station.name} ended")
                self._emit(StoppedEvent())
                return

        self._on_failure(session, UnexpectedExitError(exit_code, station))

    def _on_failure(self, session: int, error: PlaybackError) -> None:
        with self._lock:
            if session != self._session:
                return

            pending = self._pending
            if pending is not None:
                # Still inside the grace period: the waiting start reports it
                self._session += 1
                self._pending = None
                pending.settle(_PendingStart.FAILED, error)
                logger.warning(f"Start failed: {error}")
                return

            if not self._is_playing:
                return

            logger.warning(f"Playback failed ({error.kind}): {error}")
            self._session += 1
            self._is_playing = False
            self._start_time = None
            self._started_at = None
            self._phase = PlaybackPhase.RECONNECTING
            cancel = threading.Event()
            self._reconnect_cancel = cancel
            failed_process = self._process

        threading.Thread(
            target=self._reconnect_loop,
            args=(error.station, error, cancel, failed_process),
            daemon=True,
            name="PlaybackReconnect",
        ).start()

    def _reconnect_loop(
        self,
        station: Station,
        error: PlaybackError,
        cancel: threading.Event,
        failed_process: Optional[PlayerProcess],
    ) -> None:
        """Retry until a start is confirmed, attempts run out, or stop() cancels."""
        if failed_process is not None:
            self._retire(failed_process)

        delay = self._config.reconnect_delay_ms / 1000
        while True:
            if cancel.is_set():
                return
            self._emit(ErrorEvent.from_error(error))

            leftover = None
            with self._lock:
                if cancel.is_set():
                    return
                exhausted = isinstance(error, BinaryNotFoundError) or (
                    self._reconnect_attempts >= self._config.max_reconnect_attempts
                )
                if exhausted:
                    self._session += 1
                    self._reconnect_cancel = None
                    self._is_playing = False
                    self._current_station = None
                    self._phase = PlaybackPhase.STOPPED
                    leftover, self._process = self._process, None
                else:
                    self._reconnect_attempts += 1
                    attempt = self._reconnect_attempts

            if exhausted:
                if leftover is not None:
                    self._terminate(leftover)
                logger.error(f"Connection to {station.name} lost: {error}")
                self._emit(ConnectionLostEvent(error))
                return

            logger.info(
                f"Reconnecting to {station.name} "
                f"(attempt {attempt}/{self._config.max_reconnect_attempts})"
            )
            self._emit(ReconnectingEvent(attempt))
            if cancel.wait(delay):
                return

            with self._lock:
                volume = self._volume
            try:
                session = self._launch(station, volume, cancel=cancel)
            except PlaybackCancelledError:
                return
            except BinaryNotFoundError as e:
                error = e
            except PlaybackError as e:
                error = ReconnectFailedError(attempt, e, station)
            else:
                with self._lock:
                    if self._reconnect_cancel is cancel:
                        self._reconnect_cancel = None
                self._announce(station, session)
                return
