"""
Command Router - Dispatches REPL input to priority-ordered handlers.

Each handler declares a priority (lower = higher priority) and a matches()
method. The router finds the first matching handler and returns its result.
App launching is always the fallback (highest priority number).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from txlaunch.search.dispatcher import DispatchResult
from txlaunch.services.catalog import Catalog


@dataclass
class CommandResult:
    """What the REPL should do in response to one line of input."""
    action: str  # quit, list, help, clear, launch
    dispatch: Optional[DispatchResult] = None


class CommandHandler(ABC):
    """Base class for all REPL command handlers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Handler identifier."""
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lower number = checked first. App launch should be ~1000."""
        ...

    @abstractmethod
    def matches(self, text: str) -> bool:
        """Return True if this handler should process the input."""
        ...

    @abstractmethod
    def handle(self, text: str, catalog: Catalog) -> CommandResult:
        """Act on the input."""
        ...


class CommandRouter:
    """Routes input to the appropriate handler based on priority."""

    def __init__(self):
        self._handlers: list[CommandHandler] = []

    def register(self, handler: CommandHandler) -> None:
        """Register a handler and re-sort by priority."""
        self._handlers.append(handler)
        self._handlers.sort(key=lambda h: h.priority)

    def route(self, text: str, catalog: Catalog) -> tuple[str, Optional[CommandResult]]:
        """
        Find the first matching handler and return its result.

        Args:
            text: One line of user input
            catalog: Current catalog snapshot

        Returns:
            Tuple of (handler_name, result).
            Returns ("none", None) for blank input or if no handler matches.
        """
        text = text.strip().lower()
        if not text:
            return "none", None

        for handler in self._handlers:
            if handler.matches(text):
                return handler.name, handler.handle(text, catalog)

        return "none", None
