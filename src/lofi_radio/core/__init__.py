"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Persisted preferences (SQLite)
- Console management (Rich)
- Logging (Loguru)
"""

from .config import (
    Config,
    LoggingConfig,
    PlayerConfig,
    UIConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_log_file_path,
    load_config,
)
from .console import get_console
from .output import log, setup_loguru

__all__ = [
    # Config
    "Config",
    "PlayerConfig",
    "LoggingConfig",
    "UIConfig",
    "load_config",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_log_file_path",
    # Console
    "get_console",
    # Output
    "log",
    "setup_loguru",
]
