"""
Unified output system using Loguru.
User-facing messages go to the terminal, everything goes to the log file.
"""

import threading
from pathlib import Path

from loguru import logger
from rich.text import Text

from .console import get_console

_print_lock = threading.Lock()


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """
    Configure loguru for file-only logging (the terminal belongs to the REPL).

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Size at which the log file is rotated
        backup_count: Number of rotated files to keep
    """
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {thread.name} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to file AND prints to the terminal.

    Use this instead of print() for user-facing messages that should also be
    logged. Player events arrive on background threads, so printing is
    serialized.

    Args:
        message: User-facing message (Rich markup allowed)
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(Text.from_markup(message).plain)

    with _print_lock:
        get_console().print(message)
