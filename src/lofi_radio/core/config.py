"""
Configuration management for Lofi Radio
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class PlayerConfig:
    """Configuration for the external player process."""

    binary: str = "ffplay"
    default_volume: int = 70
    grace_period_ms: int = 1000  # Wait before a stream counts as playing
    stop_timeout_ms: int = 2000  # SIGTERM -> SIGKILL escalation
    reconnect_delay_ms: int = 3000
    max_reconnect_attempts: int = 5
    fatal_patterns: List[str] = field(
        default_factory=lambda: ["Invalid data", "Connection refused"]
    )

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        for name in (
            "default_volume",
            "grace_period_ms",
            "stop_timeout_ms",
            "reconnect_delay_ms",
            "max_reconnect_attempts",
        ):
            value = getattr(self, name)
            # bool is an int subclass; TOML true/false is not a number here
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if not 0 <= self.default_volume <= 100:
            raise ValueError(
                f"default_volume must be between 0 and 100, got {self.default_volume}"
            )
        for name in (
            "grace_period_ms",
            "stop_timeout_ms",
            "reconnect_delay_ms",
            "max_reconnect_attempts",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if not isinstance(self.binary, str) or not self.binary:
            raise ValueError("binary must be a non-empty string")
        if not isinstance(self.fatal_patterns, list) or not all(
            isinstance(pattern, str) and pattern for pattern in self.fatal_patterns
        ):
            raise ValueError(
                f"fatal_patterns must be a list of non-empty strings, "
                f"got {self.fatal_patterns!r}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/lofi-radio/lofi-radio.log
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class UIConfig:
    """Configuration for terminal output."""

    use_emoji: bool = True
    clear_on_start: bool = True


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "lofi-radio"
    return Path.home() / ".config" / "lofi-radio"


def _find_project_config() -> Optional[Path]:
    """Find config.toml next to pyproject.toml when running from a checkout."""
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            return config_path if config_path.exists() else None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/lofi-radio (or ~/.config/lofi-radio)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "lofi-radio"
    return Path.home() / ".local" / "share" / "lofi-radio"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Lofi Radio Configuration

[player]
# External player executable (must accept ffplay arguments)
binary = "ffplay"

# Volume used until one is saved (0-100)
default_volume = 70

# Milliseconds to wait after spawning before a stream counts as playing
grace_period_ms = 1000

# Milliseconds to wait for a graceful stop before killing the player
stop_timeout_ms = 2000

# Automatic reconnection after stream failures
reconnect_delay_ms = 3000
max_reconnect_attempts = 5

# Player stderr fragments that mark a stream as broken
fatal_patterns = ["Invalid data", "Connection refused"]

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/lofi-radio/lofi-radio.log)
# log_file = "/path/to/custom/lofi-radio.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of rotated log files to keep
backup_count = 5

[ui]
# Use emoji in terminal output (disable for ASCII-only)
use_emoji = true

# Clear the screen when the interactive mode starts
clear_on_start = true
""".strip()


def _parse_player(data: dict, defaults: PlayerConfig) -> PlayerConfig:
    player = PlayerConfig(
        binary=data.get("binary", defaults.binary),
        default_volume=data.get("default_volume", defaults.default_volume),
        grace_period_ms=data.get("grace_period_ms", defaults.grace_period_ms),
        stop_timeout_ms=data.get("stop_timeout_ms", defaults.stop_timeout_ms),
        reconnect_delay_ms=data.get("reconnect_delay_ms", defaults.reconnect_delay_ms),
        max_reconnect_attempts=data.get(
            "max_reconnect_attempts", defaults.max_reconnect_attempts
        ),
        fatal_patterns=data.get("fatal_patterns", list(defaults.fatal_patterns)),
    )
    try:
        player.validate()
    except ValueError as e:
        logger.warning(f"Invalid player configuration: {e}")
        print(f"Warning: Invalid player configuration: {e}")
        print("Using default player configuration.")
        return PlayerConfig()
    return player


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - LOFI_RADIO_PLAYER
    - LOFI_RADIO_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()
    config = Config()

    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config())
            print(f"Created default configuration at: {config_path}")
        except OSError as e:
            logger.warning(f"Could not write default config to {config_path}: {e}")
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)

            if "player" in toml_data:
                config.player = _parse_player(toml_data["player"], config.player)

            if "logging" in toml_data:
                logging_data = toml_data["logging"]
                log_file = logging_data.get("log_file")
                if log_file:
                    log_file = str(Path(log_file).expanduser())
                config.logging = LoggingConfig(
                    level=logging_data.get("level", config.logging.level).upper(),
                    log_file=log_file,
                    max_file_size_mb=logging_data.get(
                        "max_file_size_mb", config.logging.max_file_size_mb
                    ),
                    backup_count=logging_data.get(
                        "backup_count", config.logging.backup_count
                    ),
                )

            if "ui" in toml_data:
                ui_data = toml_data["ui"]
                config.ui = UIConfig(
                    use_emoji=ui_data.get("use_emoji", config.ui.use_emoji),
                    clear_on_start=ui_data.get(
                        "clear_on_start", config.ui.clear_on_start
                    ),
                )

        except (OSError, tomllib.TOMLDecodeError) as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            config = Config()

    player_override = os.environ.get("LOFI_RADIO_PLAYER")
    if player_override:
        config.player.binary = player_override

    level_override = os.environ.get("LOFI_RADIO_LOG_LEVEL")
    if level_override:
        config.logging.level = level_override.upper()

    return config


def get_log_file_path(config: Config) -> Path:
    """Get the log file path, honouring a custom logging.log_file."""
    if config.logging.log_file:
        return Path(config.logging.log_file)
    return get_data_dir() / "lofi-radio.log"

