"""
App Launch Handler - Fallback that treats any input as an app label.
"""

from txlaunch.search.dispatcher import CommandDispatcher
from txlaunch.search.router import CommandResult


class AppLaunchHandler:
    """Resolve the input as a label and launch it."""

    name = "app_launch"
    priority = 1000

    def __init__(self, dispatcher: CommandDispatcher):
        self.dispatcher = dispatcher

    def matches(self, text: str) -> bool:
        return bool(text.strip())

    def handle(self, text, catalog) -> CommandResult:
        return CommandResult(action="launch", dispatch=self.dispatcher.dispatch(text, catalog))
