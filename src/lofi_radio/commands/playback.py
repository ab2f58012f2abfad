"""
Playback command handlers for Lofi Radio.

Handles: play, stop, stations, status, volume
"""

from typing import List, Optional, Tuple

from loguru import logger

from lofi_radio import ui
from lofi_radio.context import AppContext
from lofi_radio.core import preferences
from lofi_radio.core.output import log
from lofi_radio.domain import stations
from lofi_radio.domain.playback import PlaybackCancelledError, PlaybackError


def start_station(ctx: AppContext, station: stations.Station) -> bool:
    """Remember the station and start it, showing a spinner while connecting.

    Returns True once the stream is confirmed. Connection notices are printed
    by the event printer, failures here.
    """
    preferences.set_last_station_id(station.id)
    try:
        with ctx.console.status(f"Connecting to {station.name}..."):
            ctx.supervisor.play(station)
    except PlaybackCancelledError:
        logger.info(f"Start of {station.id} cancelled")
        return False
    except PlaybackError as e:
        log(ui.format_error(f"Failed to connect: {e.message}"), "error")
        return False
    return True


def handle_play_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle play command - resolve a station by number, id or name and start it."""
    if not args:
        ui.print_station_choices(stations.get_all_stations())
        ctx.console.print()
        log(ui.format_info("Usage: play <number|id|name>"))
        return ctx, True

    query = " ".join(args)
    station = stations.find_station(query)
    if station is None:
        log(ui.format_error(f"Station not found: {query}"), "warning")
        ctx.console.print("Use 'stations' to see available stations", style="dim")
        return ctx, True

    start_station(ctx, station)
    return ctx, True


def handle_stop_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    """Handle stop command."""
    state = ctx.supervisor.get_state()
    if not state.is_playing and state.current_station is None:
        log(ui.format_info("No station is currently playing"))
        return ctx, True

    ctx.supervisor.stop()
    return ctx, True


def handle_stations_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    ui.print_stations(stations.get_all_stations())
    return ctx, True


def handle_status_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    ui.print_status(ctx.supervisor.get_state(), ctx.supervisor.get_uptime())
    return ctx, True


def handle_volume_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle volume command - show the current level or set a new one.

    A new level is persisted and, when a station is playing, applied by
    restarting the stream.
    """
    if not args:
        log(ui.format_info(f"Current volume: {ctx.supervisor.get_state().volume}%"))
        return ctx, True

    volume: Optional[int] = ui.validate_volume(args[0])
    if volume is None:
        log(ui.format_error("Volume must be a number between 0 and 100"), "warning")
        return ctx, True

    try:
        ctx.supervisor.set_volume(volume)
    except PlaybackError as e:
        log(ui.format_error(e.message), "error")
        return ctx, True

    preferences.set_volume(volume)
    if ctx.supervisor.get_state().is_playing:
        log(ui.format_success(f"Volume set to {volume}% (restarting stream)"))
    else:
        log(ui.format_success(f"Volume set to {volume}%"))
    return ctx, True
