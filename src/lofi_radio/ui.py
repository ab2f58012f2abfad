"""
Terminal output helpers for Lofi Radio
Rich markup formatting for stations, status and notifications
"""

import sys
from typing import Optional, Sequence

from rich.markup import escape

from lofi_radio.core.config import UIConfig
from lofi_radio.core.console import get_console
from lofi_radio.domain.playback import PlaybackState
from lofi_radio.domain.stations import Station

VERSION = "1.0.0"

# Config reference for UI settings
ui_config: Optional[UIConfig] = None


def supports_emoji() -> bool:
    """Check if terminal supports emoji."""
    if ui_config is not None:
        return ui_config.use_emoji
    return sys.platform != "win32"


def _build_icons() -> dict[str, str]:
    emoji = supports_emoji()
    return {
        "error": "❌" if emoji else "x",
        "success": "✅" if emoji else "+",
        "info": "ℹ️ " if emoji else "i",
        "music": "🎵" if emoji else "*",
        "control": "⏹️ " if emoji else "#",
        "radio": "📻" if emoji else "",
        "dot": "•" if emoji else "-",
    }


ICONS = _build_icons()


def set_ui_config(config: UIConfig) -> None:
    """Set the UI configuration."""
    global ui_config, ICONS
    ui_config = config
    ICONS = _build_icons()


def format_station(station: Station) -> str:
    """Format a station as a three-line block."""
    dot = ICONS["dot"]
    return (
        f"[bold white]{escape(station.name)}[/bold white] [dim]{dot}[/dim] "
        f"[cyan]{escape(station.genre)}[/cyan]\n"
        f"   [dim]{escape(station.description)}[/dim]\n"
        f"   [yellow]{escape(station.quality)}[/yellow] [dim]{dot}[/dim] "
        f"[green]{escape(station.url)}[/green]"
    )


def format_error(message: str) -> str:
    return f"[red]{ICONS['error']} {escape(message)}[/red]"


def format_success(message: str) -> str:
    return f"[green]{ICONS['success']} {escape(message)}[/green]"


def format_info(message: str) -> str:
    return f"[blue]{ICONS['info']} {escape(message)}[/blue]"


def format_music(message: str) -> str:
    return f"[magenta]{ICONS['music']}[/magenta] [bold white]{escape(message)}[/bold white]"


def format_control(message: str) -> str:
    return f"[yellow]{ICONS['control']} {escape(message)}[/yellow]"


def validate_volume(text: str) -> Optional[int]:
    """Parse a user-supplied volume, returning None unless it is an integer 0-100."""
    try:
        volume = int(text.strip())
    except (ValueError, AttributeError):
        return None
    if volume < 0 or volume > 100:
        return None
    return volume


def clear_console() -> None:
    get_console().clear()


def print_welcome() -> None:
    """Print the boxed banner shown when the REPL starts."""
    box_width = 56
    title = f"{ICONS['music']} LOFI RADIO TERMINAL {ICONS['music']}"
    subtitle = "Internet radio in your terminal"

    console = get_console()
    console.print()
    console.print("╔" + "═" * box_width + "╗", style="bold cyan")
    for line in (title, subtitle):
        console.print("║" + line.center(box_width) + "║", style="bold cyan")
    console.print("╚" + "═" * box_width + "╝", style="bold cyan")
    console.print()


def print_status_bar() -> None:
    console = get_console()
    console.print("─" * 58, style="dim")
    console.print(
        f"Version {VERSION} | Type 'help' for commands | 'exit' to quit", style="dim"
    )
    console.print("─" * 58, style="dim")
    console.print()


def print_now_playing(station: Station, volume: int) -> None:
    console = get_console()
    console.print(format_music(f"Now playing: {station.name}"))
    console.print(f"   {escape(station.description)}", style="dim")
    console.print(f"   Quality: {escape(station.quality)}", style="dim")
    console.print(f"   Volume: {volume}%", style="dim")
    console.print()


def print_stations(stations: Sequence[Station], numbered: bool = True) -> None:
    """Print the full station list with ids (and display numbers)."""
    console = get_console()
    console.print(format_music("Available Stations:"))
    console.print()
    for index, station in enumerate(stations, start=1):
        prefix = f"[yellow]\\[{index}][/yellow] " if numbered else ""
        console.print(f"{prefix}[cyan]\\[{escape(station.id)}][/cyan]")
        console.print(f"   {format_station(station)}")
        console.print()


def print_station_choices(stations: Sequence[Station]) -> None:
    """Print a compact numbered station list."""
    console = get_console()
    console.print(format_music("Available Stations:"))
    for index, station in enumerate(stations, start=1):
        console.print(
            f"  [yellow]\\[{index}][/yellow] {escape(station.name)} - "
            f"[dim]{escape(station.genre)}[/dim]"
        )


def print_status(state: PlaybackState, uptime: str) -> None:
    console = get_console()
    if not state.is_playing or state.current_station is None:
        if state.current_station is not None:
            console.print(format_music("Status: Reconnecting"))
            console.print(f"   Station: {escape(state.current_station.name)}")
        else:
            console.print(format_music("Status: Not playing"))
        console.print(f"   Volume: {state.volume}%")
        return

    console.print(format_music("Status: Playing"))
    console.print(f"   Station: {escape(state.current_station.name)}")
    console.print(f"   Genre: {escape(state.current_station.genre)}")
    console.print(f"   Uptime: {uptime}")
    console.print(f"   Volume: {state.volume}%")


def print_help() -> None:
    """Display help information for available commands."""
    console = get_console()
    console.print(f"\n[bold cyan]{ICONS['radio']} Radio Commands:[/bold cyan]\n")

    commands = [
        ("play [station]", "p", "Play a station (by number, ID, or name)"),
        ("stop", "s", "Stop current playback"),
        ("stations", "l", "List all available stations"),
        ("status", "n", "Show current playback status"),
        ("volume [0-100]", "v", "Set or show volume level"),
        ("clear", "cls", "Clear the screen"),
        ("help", "h, ?", "Show this help message"),
        ("exit", "q", "Exit the radio"),
    ]
    for cmd, alias, desc in commands:
        console.print(
            f"  [yellow]{escape(cmd.ljust(18))}[/yellow] "
            f"[dim]{escape(f'({alias})'.ljust(8))}[/dim] {desc}"
        )

    console.print("\nExamples:", style="dim")
    console.print("  play 1           - Play station #1", style="dim")
    console.print("  play rp-mellow   - Play by station ID", style="dim")
    console.print("  play paradise    - Play by partial name", style="dim")
    console.print("  volume 50        - Set volume to 50%", style="dim")
    console.print()
