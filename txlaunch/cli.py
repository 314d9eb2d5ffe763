"""
tx_launch command line entry point.

Usage:
  tx_launch                      interactive prompt
  tx_launch --run youtube        launch one app and exit
  tx_launch --am new --list      list known labels

Exit status is 0 on success and 1 on bad flags, an unknown app in
one-shot mode, or a fatal catalog/package-manager error.
"""

import argparse
import math
import sys
import time
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from txlaunch import messages
from txlaunch.errors import CatalogIOError, TxLaunchError
from txlaunch.repl import Repl
from txlaunch.search.dispatcher import CommandDispatcher
from txlaunch.search.handlers import AppLaunchHandler, ReplCommandsHandler
from txlaunch.search.router import CommandRouter
from txlaunch.services.builder import CatalogBuilder
from txlaunch.services.catalog import Catalog
from txlaunch.services.catalog_store import CatalogStore
from txlaunch.services.detector import ChangeDetector
from txlaunch.services.handoff import CatalogSlot
from txlaunch.services.package_manager import AmVariant, PackageManager, get_package_manager
from txlaunch.utils.helpers import configure_logging, load_settings


# Newest SDK level on which /system/bin/am still works from Termux
SYSTEM_AM_MAX_SDK = 29


class UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser(program: str) -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=program, add_help=False, allow_abbrev=False)
    parser.add_argument("-a", "--am", choices=[v.value for v in AmVariant])
    parser.add_argument("-r", "--run", metavar="APP_NAME")
    parser.add_argument("-ls", "--list", action="store_true")
    parser.add_argument("-nw", "--no-warn", dest="warn", action="store_false", default=None)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-v", "--version", action="store_true")
    parser.add_argument("--debug", action="store_true")
    return parser


def load_or_build_catalog(
    store: CatalogStore,
    builder: CatalogBuilder,
    package_manager: PackageManager,
    console: Console,
) -> Catalog:
    """
    Load the cached catalog, building it first if there is no cache yet.

    Raises:
        CatalogStoreError: The cache exists but is unreadable, or the new
            catalog could not be written
        ExternalQueryError: Building failed to list packages
    """
    if store.exists():
        return store.load()

    try:
        store.path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CatalogIOError(store.path, str(e)) from e

    started = time.monotonic()
    package_manager.ensure_aapt()
    messages.first_setup(console)

    with Progress(
        TextColumn("  {task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Listing packages", total=None)

        def on_progress(done, total, package_id):
            progress.update(task, total=total, completed=done, description=f"Adding `{package_id}`")

        catalog = builder.build(on_progress)

    messages.setup_done(console, time.monotonic() - started)
    return catalog


def print_warnings(console: Console, variant: AmVariant, package_manager: PackageManager) -> None:
    if variant is AmVariant.OLD:
        messages.legacy_warning(console)
    elif variant is AmVariant.SYSTEM:
        sdk = package_manager.sdk_version()
        if sdk is not None and sdk > SYSTEM_AM_MAX_SDK:
            messages.incompatible_warning(console, sdk)


def main(argv: Optional[List[str]] = None, package_manager: Optional[PackageManager] = None) -> int:
    """
    Run tx_launch.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]
        package_manager: Package manager to use; defaults to the shared one

    Returns:
        Process exit status
    """
    program = Path(sys.argv[0]).name or "tx_launch"
    argv = sys.argv[1:] if argv is None else argv

    console = Console(highlight=False)
    err_console = Console(stderr=True, highlight=False)

    try:
        opts = build_parser(program).parse_args(argv)
    except UsageError as e:
        messages.usage_error(err_console, str(e))
        return 1

    if opts.help:
        messages.print_help(console, program)
        return 0
    if opts.version:
        messages.print_version(console)
        return 0

    configure_logging({}, debug=opts.debug)
    settings = load_settings()
    configure_logging(settings, debug=opts.debug)

    try:
        variant = AmVariant(opts.am or settings["launch"]["am"])
    except ValueError:
        messages.usage_error(err_console, f"Unknown value '{settings['launch']['am']}'")
        return 1
    warn = settings["launch"]["warn"] if opts.warn is None else opts.warn
    labels = settings.get("labels", {})

    poll_interval = settings["catalog"]["poll_interval"]
    try:
        interval = float(poll_interval)
    except (TypeError, ValueError):
        interval = math.nan
    if not (math.isfinite(interval) and interval > 0):
        messages.usage_error(err_console, f"Invalid poll_interval '{poll_interval}'")
        return 1

    package_manager = package_manager or get_package_manager()
    store = CatalogStore(settings["catalog"]["path"])
    builder = CatalogBuilder(package_manager, store, label_overrides=labels)

    try:
        catalog = load_or_build_catalog(store, builder, package_manager, console)

        if opts.list:
            messages.print_apps(console, catalog)
            return 0

        if warn:
            print_warnings(err_console, variant, package_manager)

        dispatcher = CommandDispatcher(
            package_manager,
            variant,
            on_launch=lambda entry: messages.launching(err_console, entry),
        )

        if opts.run is not None:
            result = dispatcher.dispatch(opts.run, catalog)
            messages.report_dispatch(console, result, interactive=False)
            return 0 if result.ok else 1

        slot = CatalogSlot()
        detector = ChangeDetector(
            store,
            package_manager,
            slot,
            interval=interval,
            on_added=lambda label, pkg: messages.package_added(err_console, label, pkg),
            on_removed=lambda label, pkg: messages.package_removed(err_console, label, pkg),
            label_overrides=labels,
        )
        detector.start()

        router = CommandRouter()
        router.register(ReplCommandsHandler())
        router.register(AppLaunchHandler(dispatcher))

        return Repl(catalog, router, slot, console, detector=detector).run()
    except TxLaunchError as e:
        logger.debug(f"Fatal error: {e!r}")
        messages.fatal(err_console, e)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
