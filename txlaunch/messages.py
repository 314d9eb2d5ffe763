"""
User-facing text for the CLI and REPL, rendered with rich.

Everything a user reads goes through here so the wording stays in one
place. Diagnostic output goes through loguru instead.
"""

from rich.console import Console
from rich.markup import escape

from txlaunch import __version__
from txlaunch.search.dispatcher import DispatchResult
from txlaunch.search.resolver import Found, Suggestions
from txlaunch.services.catalog import Catalog, Entry


PROJECT_URL = "https://github.com/BayonetArch/tx_launch"
PROMPT = "  [bold green]>[/] "
RULE = "—" * 20


def legacy_warning(console: Console) -> None:
    console.print("  [bold yellow]Warning[/]: Using the legacy am.")
    console.print("  launching apps will be slow")
    console.print()


def incompatible_warning(console: Console, sdk: int) -> None:
    console.print("  [bold yellow]Warning[/]: SDK VERSION is higher than expected for system am")
    console.print("  Expected: 29 or lower")
    console.print(f"  Found: {sdk}")
    console.print("  Note: apps may not run on this version.")
    console.print()


def repl_banner(console: Console) -> None:
    console.print("  Enter app name to launch it")
    console.print("  Type 'help' for more information")
    console.print("  Exit by typing 'q'")
    console.print()


def repl_help(console: Console) -> None:
    console.print("  Launch apps by typing out their labels.")
    console.print()
    console.print("  Commands:")
    console.print("    ls,list     list all apps")
    console.print("    cl,clear    clear the repl")
    console.print("    q,quit      exit the repl")
    console.print("    h,help      print this help message")
    console.print()
    console.print("  [bold blue]NOTE[/]: Launching apps will be slow if you are using default am.")
    console.print("  consider changing the am")
    console.print(f"  more information can be found here:\n  [green]{PROJECT_URL}[/]")
    console.print()


def help_text(program: str) -> str:
    """Full --help text."""
    return "\n".join([
        f"tx_launch v{__version__}",
        "a cli tool to launch android apps",
        "",
        "usage",
        f"  {program} [flags] ...",
        "",
        "options",
        "  -a, --am  <value>            specify which am to use (default old)",
        "  -r, --run <app_name>         run an app directly",
        "  -ls, --list                  list available apps",
        "  -nw, --no-warn               suppress all the warning messages",
        "  --debug                      print debug logs",
        "  -h, --help                   print this help message",
        "  -v, --version                print the binary version",
        "",
        "available am values",
        "  old    use the legacy termux am slow but included in stable termux releases",
        "  system use the system am (/system/bin/am) fastest but incompatible with android 11+",
        "  new    use the new termux am (github action builds only) which is faster than old termux",
        "",
        "example",
        f"  '{program} --am new --run tiktok'",
        "the above example uses new am and runs tiktok",
    ])


def print_help(console: Console, program: str) -> None:
    console.print(escape(help_text(program)), highlight=False)


def print_version(console: Console) -> None:
    console.print(f"v{__version__}", highlight=False)


def usage_error(console: Console, message: str) -> None:
    console.print(f"  {escape(message)}  try '--help' for more information")


def print_apps(console: Console, catalog: Catalog) -> None:
    console.print()
    console.print(f"  {RULE}")
    for label in sorted(catalog):
        console.print(f"  {escape(label)}", highlight=False)
    console.print(f"  {RULE}")
    console.print()


def first_setup(console: Console) -> None:
    console.print("  Setting up packages for the first time...")
    console.print()


def setup_done(console: Console, seconds: float) -> None:
    console.print(f"  Took {seconds:.0f}s")
    console.print()


def launching(console: Console, entry: Entry) -> None:
    console.print(f"  Launching `{escape(entry.package_id)}`", highlight=False)


def package_added(console: Console, label: str, package_id: str) -> None:
    console.print(f"\n  added [green]{escape(package_id)}[/] as '{escape(label)}'")
    console.print(PROMPT, end="")


def package_removed(console: Console, label: str, package_id: str) -> None:
    console.print(f"\n  removed [green]{escape(package_id)}[/] ('{escape(label)}')")
    console.print(PROMPT, end="")


def fatal(console: Console, error: Exception) -> None:
    console.print(f"  [bold red]Error[/]: {escape(str(error))}")


def report_dispatch(console: Console, result: DispatchResult, interactive: bool) -> None:
    """
    Describe the outcome of a launch request.

    Args:
        console: Where to print
        result: Result from CommandDispatcher.dispatch()
        interactive: REPL wording (hints) instead of one-shot wording
    """
    resolution = result.resolution

    if isinstance(resolution, Found):
        if result.error is not None:
            console.print(f"  [bold red]Failed[/] to launch `{escape(resolution.entry.package_id)}`")
            console.print(f"  {escape(str(result.error))}")
        else:
            console.print(f"  Took {result.elapsed_ms}ms")
        return

    if isinstance(resolution, Suggestions):
        names = ", ".join(f"'{escape(label)}'" for label in resolution.labels)
        console.print(f"  Did you mean {names}?")
        return

    query = escape(resolution.query)
    if interactive:
        console.print(f"  No app or command named '{query}' found")
        console.print("  Type 'ls' for listing all the apps")
        console.print("  Type 'help' for more information")
    else:
        console.print(f"  No app '{query}' found, use '-ls' option for listing apps")
