"""
Helper utilities for tx_launch.

Provides common functions used by the CLI and REPL:
- Settings loading
- Logging setup
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger


SETTINGS_ENV = "TX_LAUNCH_SETTINGS"


def default_settings() -> Dict[str, Any]:
    """Return a fresh copy of the built-in settings."""
    return {
        "catalog": {
            "path": "~/.local/share/pkgs.json",
            "poll_interval": 1.0,
        },
        "launch": {
            "am": "old",
            "warn": True,
        },
        "logging": {
            "level": "WARNING",
            "file": "",
        },
        "labels": {
            # ReVanced reports the same label as stock YouTube
            "app.revanced.android.youtube": "youtube_revanced",
        },
    }


def settings_path() -> Path:
    """
    Locate the settings file.

    Returns:
        $TX_LAUNCH_SETTINGS if set, otherwise ~/.config/tx_launch/settings.toml
    """
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tx_launch" / "settings.toml"


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load tx_launch settings from a TOML file.

    Args:
        path: Settings file; defaults to settings_path()

    Returns:
        Dictionary containing settings with defaults applied

    Example settings file:
        [catalog]
        path = "~/.local/share/pkgs.json"
        poll_interval = 2.0

        [launch]
        am = "new"

        [labels]
        "org.mozilla.firefox" = "ff"
    """
    defaults = default_settings()
    path = Path(path) if path is not None else settings_path()

    if not path.exists():
        logger.debug(f"Settings file not found at {path}, using defaults")
        return defaults

    try:
        loaded = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        logger.warning("Using default settings")
        return defaults

    return _deep_merge(defaults, loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def configure_logging(settings: Dict[str, Any], debug: bool = False) -> None:
    """
    Replace loguru's default sink with the configured ones.

    Args:
        settings: Loaded settings (uses the [logging] table)
        debug: Force DEBUG level on stderr
    """
    log_settings = settings.get("logging", {})
    level = "DEBUG" if debug else str(log_settings.get("level", "WARNING")).upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format="  <level>{level}</level>: {message}")

    log_file = log_settings.get("file")
    if log_file:
        logger.add(
            Path(log_file).expanduser(),
            level="DEBUG",
            rotation="1 MB",
            retention=3,
        )
