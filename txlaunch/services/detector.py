"""
Change Detector - Keep the cached catalog in sync with installed packages.

Runs on a background thread:

  wait(interval) -> reload cache -> list live packages -> diff
      no change: nothing is written or published
      change:    patch catalog -> save -> publish to the foreground slot

The cache file, not the snapshot the process started with, is reloaded on
every pass so rebuilds made by another invocation are picked up.

Any store or package-listing failure stops the loop. The failure is kept
on the detector and re-raised in the foreground by raise_if_failed(), since
a dead detector would otherwise leave the catalog stale without a trace.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

from loguru import logger

from txlaunch.services.builder import query_entry
from txlaunch.services.catalog import (
    Catalog,
    assign_label,
    find_label,
    real_package_ids,
    with_builtins,
)
from txlaunch.services.catalog_store import CatalogStore
from txlaunch.services.handoff import CatalogSlot
from txlaunch.services.package_manager import PackageManager


Notify = Callable[[str, str], None]


@dataclass(frozen=True)
class ChangeSet:
    """Package ids that appeared or disappeared since the last snapshot."""
    added: frozenset = field(default_factory=frozenset)
    removed: frozenset = field(default_factory=frozenset)

    def __bool__(self) -> bool:
        return bool(self.added or self.removed)


def compute_changes(catalog: Catalog, live: Iterable[str]) -> ChangeSet:
    """
    Diff the catalog's real packages against the live package list.

    Built-in rows are excluded from the comparison.

    Args:
        catalog: Cached catalog
        live: Package ids currently installed

    Returns:
        ChangeSet with added = live - cached and removed = cached - live
    """
    cached = real_package_ids(catalog)
    live = set(live)
    return ChangeSet(
        added=frozenset(live - cached),
        removed=frozenset(cached - live),
    )


def apply_changes(
    catalog: Catalog,
    changes: ChangeSet,
    package_manager: PackageManager,
    label_overrides: Optional[Dict[str, str]] = None,
    on_added: Optional[Notify] = None,
    on_removed: Optional[Notify] = None,
) -> Catalog:
    """
    Return a patched copy of the catalog.

    Args:
        catalog: Catalog to patch (left untouched)
        changes: Result of compute_changes()
        package_manager: Used to describe added packages
        label_overrides: Fixed labels for specific package ids
        on_added: Called as (label, package_id) for each inserted row
        on_removed: Called as (label, package_id) for each deleted row

    Returns:
        New catalog with built-ins guaranteed present
    """
    patched = dict(catalog)

    # Removals first: freed labels become available to additions
    for package_id in sorted(changes.removed):
        label = find_label(patched, package_id)
        if label is None:
            logger.debug(f"Removed package {package_id} had no catalog row")
            continue
        del patched[label]
        logger.info(f"Removed {package_id} ('{label}')")
        if on_removed is not None:
            on_removed(label, package_id)

    for package_id in sorted(changes.added):
        label, entry = query_entry(package_manager, package_id, label_overrides)
        label = assign_label(patched, label)
        patched[label] = entry
        logger.info(f"Added {package_id} as '{label}'")
        if on_added is not None:
            on_added(label, package_id)

    return with_builtins(patched)


class ChangeDetector:
    """
    Background poller that patches the catalog cache as apps come and go.

    Usage:
        detector = ChangeDetector(store, package_manager, slot)
        detector.start()
        ...
        detector.raise_if_failed()   # in the foreground loop
        detector.stop()              # optional; the thread is a daemon
    """

    def __init__(
        self,
        store: CatalogStore,
        package_manager: PackageManager,
        slot: CatalogSlot,
        interval: float = 1.0,
        on_added: Optional[Notify] = None,
        on_removed: Optional[Notify] = None,
        label_overrides: Optional[Dict[str, str]] = None,
    ):
        self.store = store
        self.package_manager = package_manager
        self.slot = slot
        self.interval = interval
        self.on_added = on_added
        self.on_removed = on_removed
        self.label_overrides = label_overrides or {}

        self.failure: Optional[BaseException] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Optional[Catalog]:
        """
        Run a single detection pass.

        Returns:
            The patched catalog if anything changed, otherwise None

        Raises:
            CatalogStoreError: The cache could not be read or written
            ExternalQueryError: The live package list could not be read
        """
        catalog = self.store.load()
        live = self.package_manager.list_installed_packages()

        changes = compute_changes(catalog, live)
        if not changes:
            return None

        logger.debug(
            f"Detected {len(changes.added)} added and "
            f"{len(changes.removed)} removed packages"
        )
        patched = apply_changes(
            catalog,
            changes,
            self.package_manager,
            label_overrides=self.label_overrides,
            on_added=self.on_added,
            on_removed=self.on_removed,
        )
        self.store.save(patched)
        self.slot.publish(patched)
        return patched

    def start(self) -> None:
        """Spawn the polling thread. Calling start() twice is an error."""
        if self._thread is not None:
            raise RuntimeError("ChangeDetector already started")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="catalog-change-detector",
            daemon=True,
        )
        self._thread.start()
        logger.debug(f"Change detector started (interval {self.interval}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the polling thread to exit.

        Args:
            timeout: If given, wait up to this many seconds for it to finish
        """
        self._stop_event.set()
        if self._thread is not None and timeout is not None:
            self._thread.join(timeout)

    def raise_if_failed(self) -> None:
        """Re-raise the error that killed the polling thread, if any."""
        if self.failure is not None:
            raise self.failure

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.poll_once()
            except Exception as e:
                logger.exception("Change detector stopped")
                self.failure = e
                return
        logger.debug("Change detector cancelled")
