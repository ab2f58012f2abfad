"""Terminal rendering of playback events.

Events arrive on supervisor threads; output goes through core.output.log,
which serializes printing.
"""

from typing import Callable

from lofi_radio import ui
from lofi_radio.core.output import log
from lofi_radio.domain.playback import (
    ConnectionLostEvent,
    ErrorEvent,
    PlaybackEvent,
    PlaybackSupervisor,
    PlayingEvent,
    ReconnectingEvent,
    StoppedEvent,
)


def render_event(supervisor: PlaybackSupervisor, event: PlaybackEvent) -> None:
    """Print a user-facing notice for one playback event."""
    if isinstance(event, PlayingEvent):
        log(ui.format_success(f"Connected to {event.station.name}"))
        ui.print_now_playing(event.station, supervisor.get_state().volume)
    elif isinstance(event, StoppedEvent):
        log(ui.format_control("Playback stopped"))
    elif isinstance(event, ErrorEvent):
        log(ui.format_error(event.message), "warning")
    elif isinstance(event, ReconnectingEvent):
        log(ui.format_info(f"Reconnecting... (attempt {event.attempt})"))
    elif isinstance(event, ConnectionLostEvent):
        log(ui.format_error(f"Connection lost: {event.error}"), "error")


def attach_event_printer(supervisor: PlaybackSupervisor) -> Callable[[], None]:
    """Subscribe the terminal renderer. Returns the unsubscribe function."""
    return supervisor.subscribe(lambda event: render_event(supervisor, event))
