"""
Lofi Radio CLI - Entry point

Runs one-shot commands (play, stop, status, stations, volume) or, without
a subcommand, the interactive prompt.
"""

import argparse
import signal
import sys
import threading
from typing import List, Optional

from loguru import logger
from rich.prompt import IntPrompt

from lofi_radio import ui
from lofi_radio.commands.playback import start_station
from lofi_radio.context import AppContext
from lofi_radio.core import config, preferences
from lofi_radio.core.console import get_console
from lofi_radio.domain import stations
from lofi_radio.domain.playback import (
    ConnectionLostEvent,
    PlaybackEvent,
    StoppedEvent,
    check_player_available,
)
from lofi_radio.listeners import attach_event_printer


def choose_station(query: Optional[str]) -> Optional[stations.Station]:
    """Resolve the station for a one-shot play.

    An explicit query must match; otherwise the last station is reused, then
    the user is asked to pick one, falling back to the default station.
    """
    if query:
        return stations.find_station(query)

    last_id = preferences.get_last_station_id()
    if last_id:
        station = stations.get_station_by_id(last_id)
        if station is not None:
            return station

    if not sys.stdin.isatty():
        return stations.get_default_station()

    all_stations = stations.get_all_stations()
    ui.print_station_choices(all_stations)
    choice = IntPrompt.ask(
        "Select a station",
        choices=[str(i) for i in range(1, len(all_stations) + 1)],
        default=1,
        console=get_console(),
    )
    return stations.get_station_by_index(choice) or stations.get_default_station()


def run_play(cfg: config.Config, query: Optional[str], volume_text: Optional[str]) -> int:
    """Play a station in the foreground until it ends or is interrupted."""
    console = get_console()

    if volume_text is not None:
        volume = ui.validate_volume(volume_text)
        if volume is None:
            console.print(ui.format_error("Volume must be a number between 0 and 100"))
            return 1
        preferences.set_volume(volume)
    else:
        volume = preferences.get_volume(cfg.player.default_volume)

    station = choose_station(query)
    if station is None:
        console.print(ui.format_error(f"Station not found: {query}"))
        console.print("Use 'radio stations' to see available stations", style="dim")
        return 1

    ctx = AppContext.create(cfg, console, volume=volume)
    finished = threading.Event()
    lost = threading.Event()

    def on_event(event: PlaybackEvent) -> None:
        if isinstance(event, ConnectionLostEvent):
            lost.set()
            finished.set()
        elif isinstance(event, StoppedEvent):
            finished.set()

    unsubscribe_printer = attach_event_printer(ctx.supervisor)
    unsubscribe = ctx.supervisor.subscribe(on_event)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, stopping playback")
        finished.set()

    previous_int = signal.signal(signal.SIGINT, handle_signal)
    previous_term = signal.signal(signal.SIGTERM, handle_signal)
    try:
        if not start_station(ctx, station):
            return 1
        console.print("Press Ctrl+C to stop", style="dim")
        while not finished.wait(0.5):
            pass
    finally:
        signal.signal(signal.SIGINT, previous_int)
        signal.signal(signal.SIGTERM, previous_term)
        ctx.supervisor.stop()
        unsubscribe()
        unsubscribe_printer()

    return 1 if lost.is_set() else 0


def run_stop() -> int:
    # Each invocation is its own process, so there is never a player to stop
    get_console().print(ui.format_info("No station is currently playing"))
    return 0


def run_status(cfg: config.Config) -> int:
    console = get_console()
    console.print(ui.format_music("Status: Not playing"))
    last_id = preferences.get_last_station_id()
    last = stations.get_station_by_id(last_id) if last_id else None
    if last is not None:
        console.print(f"   Last station: {last.name}")
    console.print(f"   Volume: {preferences.get_volume(cfg.player.default_volume)}%")
    return 0


def run_stations() -> int:
    ui.print_stations(stations.get_all_stations())
    return 0


def run_volume(cfg: config.Config, level: Optional[str]) -> int:
    console = get_console()
    if level is None:
        volume = preferences.get_volume(cfg.player.default_volume)
        console.print(ui.format_info(f"Current volume: {volume}%"))
        return 0

    volume = ui.validate_volume(level)
    if volume is None:
        console.print(ui.format_error("Volume must be a number between 0 and 100"))
        return 1
    preferences.set_volume(volume)
    console.print(ui.format_success(f"Volume set to {volume}%"))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="radio",
        description="Lofi Radio - internet radio in your terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {ui.VERSION}")

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a radio station")
    play_parser.add_argument("station", nargs="?", help="Station id, name or number")
    play_parser.add_argument("-v", "--volume", help="Volume level (0-100)")

    subparsers.add_parser("stop", help="Stop playback")
    subparsers.add_parser("status", help="Show playback status")
    subparsers.add_parser("stations", help="List available stations")

    volume_parser = subparsers.add_parser("volume", help="Show or set the volume")
    volume_parser.add_argument("level", nargs="?", help="Volume level (0-100)")

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """Dispatch a command line. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.subcommand is None:
        from lofi_radio.main import interactive_mode

        interactive_mode()
        return 0

    from lofi_radio.main import bootstrap, print_missing_player

    cfg = bootstrap()

    if args.subcommand == "play":
        if not check_player_available(cfg.player.binary):
            print_missing_player(cfg.player.binary)
            return 1
        return run_play(cfg, args.station, args.volume)
    elif args.subcommand == "stop":
        return run_stop()
    elif args.subcommand == "status":
        return run_status(cfg)
    elif args.subcommand == "stations":
        return run_stations()
    elif args.subcommand == "volume":
        return run_volume(cfg, args.level)
    return 0


def main() -> None:
    """Main entry point for the radio command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
