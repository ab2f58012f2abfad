"""
Lofi Radio - interactive prompt
"""

import sys

from loguru import logger

from lofi_radio import router, ui
from lofi_radio.context import AppContext
from lofi_radio.core import config, preferences
from lofi_radio.core.console import get_console
from lofi_radio.core.output import setup_loguru
from lofi_radio.domain.playback import check_player_available
from lofi_radio.listeners import attach_event_printer
from lofi_radio.utils import parsers


def bootstrap() -> config.Config:
    """Load configuration and bring up logging, preferences and UI settings."""
    cfg = config.load_config()
    setup_loguru(
        config.get_log_file_path(cfg),
        level=cfg.logging.level,
        max_file_size_mb=cfg.logging.max_file_size_mb,
        backup_count=cfg.logging.backup_count,
    )
    preferences.init_database()
    ui.set_ui_config(cfg.ui)
    return cfg


def print_missing_player(binary: str) -> None:
    console = get_console()
    console.print(ui.format_error(f"{binary} is not installed or not in PATH"))
    console.print()
    console.print("Please install ffmpeg (which includes ffplay):")
    console.print("  macOS:   brew install ffmpeg", style="dim")
    console.print("  Ubuntu:  sudo apt install ffmpeg", style="dim")
    console.print("  Windows: https://ffmpeg.org/download.html", style="dim")


def interactive_mode() -> None:
    """Run the interactive command loop."""
    console = get_console()
    cfg = bootstrap()

    if not check_player_available(cfg.player.binary):
        print_missing_player(cfg.player.binary)
        sys.exit(1)

    volume = preferences.get_volume(cfg.player.default_volume)
    ctx = AppContext.create(cfg, console, volume=volume)
    unsubscribe = attach_event_printer(ctx.supervisor)

    if cfg.ui.clear_on_start:
        ui.clear_console()
    ui.print_welcome()
    ui.print_status_bar()
    logger.info(f"Interactive session started (volume={volume})")

    try:
        should_continue = True
        while should_continue:
            try:
                user_input = input("radio> ").strip()
                command, args = parsers.parse_command(user_input)
                ctx, should_continue = router.handle_command(ctx, command, args)
            except KeyboardInterrupt:
                console.print(
                    "\n[yellow]Use 'exit' or 'quit' to leave gracefully.[/yellow]"
                )
            except EOFError:
                console.print()
                break
    finally:
        ctx.supervisor.stop()
        unsubscribe()
        console.print("[green]Goodbye! Thanks for listening.[/green]")
        logger.info("Interactive session ended")
