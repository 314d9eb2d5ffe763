# tx_launch Utilities Package
"""
Shared utility functions and helpers for tx_launch.
"""

from .helpers import configure_logging, load_settings, settings_path

__all__ = ["configure_logging", "load_settings", "settings_path"]
