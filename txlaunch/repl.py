"""
Interactive prompt.

Each iteration first takes any catalog the change detector published,
then reads a line, takes again (the detector may have published while the
user was typing) and only then routes the line. A catalog swap is a single
reference assignment; the foreground never sees a half-patched catalog.
"""

from typing import Callable, Optional

from loguru import logger
from rich.console import Console

from txlaunch import messages
from txlaunch.search.router import CommandRouter
from txlaunch.services.catalog import Catalog
from txlaunch.services.detector import ChangeDetector
from txlaunch.services.handoff import CatalogSlot


class Repl:
    """Read app names from the user and launch them until 'quit'."""

    def __init__(
        self,
        catalog: Catalog,
        router: CommandRouter,
        slot: CatalogSlot,
        console: Console,
        detector: Optional[ChangeDetector] = None,
        read_line: Optional[Callable[[], str]] = None,
    ):
        self.catalog = catalog
        self.router = router
        self.slot = slot
        self.console = console
        self.detector = detector
        self.read_line = read_line or (lambda: console.input(messages.PROMPT))

    def refresh(self) -> bool:
        """
        Swap in the newest published catalog, if any.

        Raises:
            Whatever stopped the change detector
        """
        if self.detector is not None:
            self.detector.raise_if_failed()

        catalog = self.slot.take()
        if catalog is None:
            return False

        self.catalog = catalog
        logger.debug(f"Catalog replaced ({len(catalog)} entries)")
        return True

    def run(self) -> int:
        """
        Run the prompt loop.

        Returns:
            Exit status (0 on quit or end of input)
        """
        messages.repl_banner(self.console)

        while True:
            self.refresh()
            try:
                line = self.read_line()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break

            self.refresh()
            _, result = self.router.route(line, self.catalog)
            if result is None:
                continue

            if result.action == "quit":
                break
            elif result.action == "list":
                messages.print_apps(self.console, self.catalog)
            elif result.action == "help":
                messages.repl_help(self.console)
            elif result.action == "clear":
                self.console.clear()
            elif result.action == "launch":
                messages.report_dispatch(self.console, result.dispatch, interactive=True)

        return 0
