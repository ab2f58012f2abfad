"""Centralized Rich Console management.

Command handlers, event listeners and the REPL all print through the same
Console instance so that spinners and prompts do not interleave.
"""

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Get or create the global Rich Console instance.

    Returns:
        Console: The global Rich Console instance
    """
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console

