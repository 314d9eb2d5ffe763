"""
REPL Commands Handler - Built-in prompt commands.

    ls, list     list all apps
    cl, clear    clear the screen
    q, quit      exit the prompt
    h, help      print help
"""

from txlaunch.search.router import CommandResult


ALIASES = {
    "q": "quit",
    "quit": "quit",
    "ls": "list",
    "list": "list",
    "h": "help",
    "help": "help",
    "cl": "clear",
    "clear": "clear",
}


class ReplCommandsHandler:
    """Recognize the fixed set of REPL commands."""

    name = "repl_commands"
    priority = 300

    def matches(self, text: str) -> bool:
        return text.strip().lower() in ALIASES

    def handle(self, text, catalog) -> CommandResult:
        return CommandResult(action=ALIASES[text.strip().lower()])
