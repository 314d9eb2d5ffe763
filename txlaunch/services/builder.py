"""
Catalog Builder - Build the catalog from scratch.

Queries the package manager for every installed package, which costs one
aapt run per package. Callers are expected to show progress through the
on_progress callback.
"""

from typing import Callable, Dict, Optional

from loguru import logger

from txlaunch.errors import ExternalQueryError
from txlaunch.services.catalog import (
    NO_LABEL,
    Catalog,
    Entry,
    assign_label,
    normalize_label,
    with_builtins,
)
from txlaunch.services.catalog_store import CatalogStore
from txlaunch.services.package_manager import PackageManager


ProgressCallback = Callable[[int, int, str], None]


def query_entry(
    package_manager: PackageManager,
    package_id: str,
    label_overrides: Optional[Dict[str, str]] = None,
) -> tuple[str, Entry]:
    """
    Look up the label and launch intent of one package.

    A failing label query falls back to "No Label" and a failing intent
    query to the package default, so one broken package never aborts a
    build or a detector pass.

    Args:
        package_manager: Source of package metadata
        package_id: Package to describe
        label_overrides: Fixed labels for specific package ids

    Returns:
        Tuple of (normalized label, Entry)
    """
    try:
        label = package_manager.extract_label(package_id)
    except ExternalQueryError as e:
        logger.warning(f"Could not read label of {package_id}: {e}")
        label = NO_LABEL

    try:
        intent = package_manager.resolve_default_intent(package_id)
    except ExternalQueryError as e:
        logger.warning(f"Could not resolve launch intent of {package_id}: {e}")
        intent = None

    if label_overrides and package_id in label_overrides:
        label = label_overrides[package_id]

    return normalize_label(label), Entry(package_id, intent)


class CatalogBuilder:
    """Create and persist a complete catalog."""

    def __init__(
        self,
        package_manager: PackageManager,
        store: CatalogStore,
        label_overrides: Optional[Dict[str, str]] = None,
    ):
        self.package_manager = package_manager
        self.store = store
        self.label_overrides = label_overrides or {}

    def build(self, on_progress: Optional[ProgressCallback] = None) -> Catalog:
        """
        Build the catalog from the live package list and save it.

        Args:
            on_progress: Called as (done, total, package_id) after each package

        Returns:
            The new catalog, built-ins included

        Raises:
            ExternalQueryError: The package list itself could not be read
            CatalogIOError: The result could not be persisted
        """
        package_ids = self.package_manager.list_installed_packages()
        total = len(package_ids)
        logger.debug(f"Building catalog for {total} packages")

        catalog: Catalog = {}
        for done, package_id in enumerate(package_ids, start=1):
            label, entry = query_entry(self.package_manager, package_id, self.label_overrides)

            key = assign_label(catalog, label)
            if key != label:
                logger.info(f"Label '{label}' already taken, using '{key}' for {package_id}")
            catalog[key] = entry

            if on_progress is not None:
                on_progress(done, total, package_id)

        catalog = with_builtins(catalog)
        self.store.save(catalog)
        return catalog
