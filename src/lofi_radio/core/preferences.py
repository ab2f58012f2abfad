"""
Persisted listener preferences (last station, volume) in SQLite.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from .config import get_data_dir

SCHEMA_VERSION = 1

DEFAULT_VOLUME = 70


def get_database_path() -> Path:
    """Get the path to the SQLite database file."""
    return get_data_dir() / "lofi_radio.db"


@contextmanager
def get_db_connection() -> Iterator[sqlite3.Connection]:
    """Get a database connection with proper cleanup and concurrency support."""
    db_path = get_database_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=30.0)
    conn.row_factory = sqlite3.Row

    # WAL lets the REPL read while a one-shot command writes
    conn.execute("PRAGMA journal_mode=WAL")

    try:
        yield conn
    finally:
        conn.close()


def init_database() -> None:
    """Initialize the database with required tables."""
    with get_db_connection() as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor = conn.execute("SELECT MAX(version) AS version FROM schema_version")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0
        if current_version < SCHEMA_VERSION:
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            logger.info(f"Preferences schema initialized at version {SCHEMA_VERSION}")
        conn.commit()


def _get_value(key: str) -> Optional[str]:
    with get_db_connection() as conn:
        cursor = conn.execute("SELECT value FROM preferences WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None


def _set_value(key: str, value: Optional[str]) -> None:
    with get_db_connection() as conn:
        conn.execute(
            """
            INSERT OR REPLACE INTO preferences (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            """,
            (key, value),
        )
        conn.commit()


def get_volume(default: int = DEFAULT_VOLUME) -> int:
    """
    Get the saved playback volume.

    Args:
        default: Volume to use when nothing valid has been saved

    Returns:
        Volume in [0, 100]
    """
    raw = _get_value("volume")
    if raw is None:
        return default
    try:
        volume = int(raw)
    except ValueError:
        logger.warning(f"Ignoring corrupt saved volume: {raw!r}")
        return default
    return volume if 0 <= volume <= 100 else default


def set_volume(volume: int) -> None:
    """
    Save the playback volume.

    Raises:
        ValueError: If volume is outside 0-100
    """
    if isinstance(volume, bool) or not isinstance(volume, int) or not 0 <= volume <= 100:
        raise ValueError("Volume must be between 0 and 100")
    _set_value("volume", str(volume))
    logger.debug(f"Saved volume {volume}")


def get_last_station_id() -> Optional[str]:
    """Get the id of the most recently played station, if any."""
    return _get_value("last_station")


def set_last_station_id(station_id: Optional[str]) -> None:
    """Remember the most recently played station (None clears it)."""
    _set_value("last_station", station_id)
    logger.debug(f"Saved last station {station_id!r}")
