"""
Catalog model - Label to package mapping shared by every service.

A catalog is a plain dict of lower-cased label -> Entry. It is never
mutated once handed to another component; updates produce a new dict.

Built-in pseudo-entries are offered even though they are not part of the
third-party package listing (system settings, the Play Store and stock
YouTube).
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set


NO_LABEL = "No Label"


@dataclass(frozen=True)
class Entry:
    """A launchable package and the activity to start within it."""
    package_id: str
    intent: Optional[str] = None

    def __post_init__(self):
        if not self.package_id:
            raise ValueError("Entry.package_id must be non-empty")


Catalog = Dict[str, Entry]


BUILTIN_ENTRIES: Dict[str, Entry] = {
    "playstore": Entry(
        "com.android.vending",
        "com.android.vending.AssetBrowserActivity",
    ),
    "settings": Entry(
        "com.android.settings",
        "com.android.settings.Settings",
    ),
    "youtube": Entry(
        "com.google.android.youtube",
        "com.google.android.youtube.app.honeycomb.Shell$HomeActivity",
    ),
}


def is_builtin(label: str, entry: Entry) -> bool:
    """True if this row is one of the built-in pseudo-entries."""
    return BUILTIN_ENTRIES.get(label) == entry


def with_builtins(catalog: Catalog) -> Catalog:
    """Return a copy of the catalog with every built-in row present."""
    result = dict(catalog)
    result.update(BUILTIN_ENTRIES)
    return result


def real_package_ids(catalog: Catalog) -> Set[str]:
    """Package ids of all rows that are not built-ins."""
    return {
        entry.package_id
        for label, entry in catalog.items()
        if not is_builtin(label, entry)
    }


def find_label(catalog: Catalog, package_id: str) -> Optional[str]:
    """
    Find the first non-built-in label pointing at a package.

    Args:
        catalog: Catalog to search
        package_id: Android package name

    Returns:
        The label, or None if no real row references the package
    """
    for label, entry in catalog.items():
        if entry.package_id == package_id and not is_builtin(label, entry):
            return label
    return None


def assign_label(catalog: Catalog, label: str, reserved: Iterable[str] = ()) -> str:
    """
    Pick a free key for a new real row.

    The first package to claim a label keeps it. Later claimants get a
    numeric suffix: "notes (2)", "notes (3)", ... Built-in labels are always
    treated as taken so a real app never shadows or replaces one.

    Args:
        catalog: Catalog the row will be inserted into
        label: Lower-cased label reported for the package
        reserved: Extra labels to treat as taken

    Returns:
        A label not present in the catalog, the built-ins or reserved
    """
    taken = set(catalog) | set(BUILTIN_ENTRIES) | set(reserved)
    if label not in taken:
        return label

    n = 2
    while f"{label} ({n})" in taken:
        n += 1
    return f"{label} ({n})"


def normalize_label(raw: str) -> str:
    """Lower-case and trim a label for use as a catalog key."""
    return raw.strip().lower()
