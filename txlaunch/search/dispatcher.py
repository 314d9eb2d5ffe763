"""
Command Dispatcher - Resolve a label and launch the matching app.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from txlaunch.errors import LaunchError
from txlaunch.search.resolver import Found, Resolution, resolve
from txlaunch.services.catalog import Catalog, Entry
from txlaunch.services.package_manager import AmVariant, PackageManager


@dataclass
class DispatchResult:
    """Outcome of handling one app name."""
    resolution: Resolution
    launched: bool = False
    elapsed_ms: Optional[int] = None
    error: Optional[LaunchError] = None

    @property
    def ok(self) -> bool:
        return self.launched


class CommandDispatcher:
    """Launch apps by label with a fixed activity-manager variant."""

    def __init__(
        self,
        package_manager: PackageManager,
        variant: AmVariant,
        on_launch: Optional[Callable[[Entry], None]] = None,
    ):
        self.package_manager = package_manager
        self.variant = variant
        self.on_launch = on_launch

    def dispatch(self, text: str, catalog: Catalog) -> DispatchResult:
        """
        Resolve text and, on an exact match, launch the app.

        Launching blocks until the activity manager returns. A refused
        launch is reported through DispatchResult.error, not raised.

        Args:
            text: App label as typed
            catalog: Current catalog snapshot

        Returns:
            DispatchResult describing what happened
        """
        resolution = resolve(text, catalog)
        if not isinstance(resolution, Found):
            return DispatchResult(resolution)

        if self.on_launch is not None:
            self.on_launch(resolution.entry)

        try:
            elapsed = self.package_manager.launch(resolution.entry, self.variant)
        except LaunchError as e:
            logger.debug(f"Failed to launch {resolution.entry.package_id}: {e}")
            return DispatchResult(resolution, error=e)

        logger.debug(f"Launched {resolution.entry.package_id} in {elapsed}ms")
        return DispatchResult(resolution, launched=True, elapsed_ms=elapsed)
