# tx_launch Services Package
"""
Backend services for tx_launch.

Services handle catalog persistence, construction, synchronization and
the calls out to Android's package and activity managers.
"""

from .builder import CatalogBuilder
from .catalog import BUILTIN_ENTRIES, Catalog, Entry
from .catalog_store import CatalogStore
from .detector import ChangeDetector, ChangeSet, apply_changes, compute_changes
from .handoff import CatalogSlot
from .package_manager import AmVariant, PackageManager, get_package_manager

__all__ = [
    "AmVariant",
    "BUILTIN_ENTRIES",
    "Catalog",
    "CatalogBuilder",
    "CatalogSlot",
    "CatalogStore",
    "ChangeDetector",
    "ChangeSet",
    "Entry",
    "PackageManager",
    "apply_changes",
    "compute_changes",
    "get_package_manager",
]
