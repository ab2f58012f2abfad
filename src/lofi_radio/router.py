"""
Command routing for Lofi Radio.

Routes prompt commands to handler functions.
"""

from typing import List, Tuple

from lofi_radio import ui
from lofi_radio.commands import playback
from lofi_radio.context import AppContext
from lofi_radio.core.output import log


def handle_command(
    ctx: AppContext, command: str, args: List[str]
) -> Tuple[AppContext, bool]:
    """
    Handle a single command with context.

    Args:
        ctx: Application context
        command: Command name (already lowercased)
        args: Command arguments

    Returns:
        (updated_context, should_continue)
    """
    if command in ("exit", "quit", "q"):
        return ctx, False

    elif command in ("help", "h", "?"):
        ui.print_help()
        return ctx, True

    elif command in ("play", "p"):
        return playback.handle_play_command(ctx, args)

    elif command in ("stop", "s"):
        return playback.handle_stop_command(ctx)

    elif command in ("stations", "list", "l"):
        return playback.handle_stations_command(ctx)

    elif command in ("status", "now", "n"):
        return playback.handle_status_command(ctx)

    elif command in ("volume", "vol", "v"):
        return playback.handle_volume_command(ctx, args)

    elif command in ("clear", "cls"):
        ui.clear_console()
        return ctx, True

    elif command == "":
        # Empty command, do nothing
        return ctx, True

    else:
        log(ui.format_error(f"Unknown command: {command}"), "warning")
        ctx.console.print("Type 'help' for available commands", style="dim")
        return ctx, True
