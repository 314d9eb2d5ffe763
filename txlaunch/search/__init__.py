"""
Search package - Label resolution, launching and REPL command routing.
"""

from .dispatcher import CommandDispatcher, DispatchResult
from .resolver import Found, NotFound, Resolution, Suggestions, resolve
from .router import CommandHandler, CommandResult, CommandRouter

__all__ = [
    "CommandDispatcher",
    "CommandHandler",
    "CommandResult",
    "CommandRouter",
    "DispatchResult",
    "Found",
    "NotFound",
    "Resolution",
    "Suggestions",
    "resolve",
]
