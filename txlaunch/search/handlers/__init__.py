"""
REPL handlers - Pluggable input processors.

Each handler checks if it can handle a line of input and returns what the
prompt should do with it.
"""

from .app_launch import AppLaunchHandler
from .repl_commands import ReplCommandsHandler

__all__ = [
    "AppLaunchHandler",
    "ReplCommandsHandler",
]
