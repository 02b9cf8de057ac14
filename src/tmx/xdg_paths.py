"""XDG-compliant path management for tmx."""

import os
from pathlib import Path

from xdg_base_dirs import xdg_cache_home, xdg_config_home

APP_NAME = "tmx"
CONFIG_PATH_ENV = "TMX_CONFIG_PATH"


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return xdg_config_home() / APP_NAME


def get_cache_dir() -> Path:
    """Get the cache directory path (holds the log file)."""
    return xdg_cache_home() / APP_NAME


def get_config_file_path(override: Path | str | None = None) -> Path:
    """Resolve the config file path.

    Precedence is an explicit override (``--config``), then the
    ``TMX_CONFIG_PATH`` environment variable, then ``tmx.yaml`` in the
    config directory. ``~`` is expanded in either override.

    Args:
        override: Optional path given on the command line.

    Returns:
        The config file path.
    """
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "tmx.yaml"


def get_log_file_path() -> Path:
    """Get the tmx.log file path."""
    return get_cache_dir() / "tmx.log"
