"""
Catalog Store - JSON persistence of the label -> package catalog.

The cache file is a pretty-printed JSON object keyed by label:

    {
      "settings": {
        "pack_name": "com.android.settings",
        "intent": "com.android.settings.Settings"
      }
    }

Every save is a full snapshot written to a sibling temporary file and
moved into place, so a concurrent load never observes a partial catalog.
Unknown fields are ignored on load.
"""

import json
import os
import stat
import tempfile
from pathlib import Path

from loguru import logger

from txlaunch.errors import CatalogCorruptError, CatalogIOError, CatalogNotFoundError
from txlaunch.services.catalog import Catalog, Entry


# Mode of a freshly created cache
DEFAULT_MODE = 0o644


class CatalogStore:
    """Load and overwrite the on-disk catalog cache."""

    def __init__(self, path):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> Catalog:
        """
        Read the whole catalog from disk.

        Returns:
            Catalog keyed by lower-cased label

        Raises:
            CatalogNotFoundError: The cache file does not exist
            CatalogCorruptError: The contents are not a valid catalog
            CatalogIOError: The file exists but could not be read
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CatalogNotFoundError(self._path) from None
        except UnicodeDecodeError as e:
            raise CatalogCorruptError(self._path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise CatalogIOError(self._path, str(e)) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogCorruptError(self._path, f"invalid JSON: {e}") from e

        catalog = _decode(data, self._path)
        logger.debug(f"Loaded {len(catalog)} catalog entries from {self._path}")
        return catalog

    def save(self, catalog: Catalog) -> None:
        """
        Overwrite the cache with a full snapshot of the catalog.

        Args:
            catalog: Catalog to persist

        Raises:
            CatalogIOError: The file could not be written (e.g. missing
                parent directory)
        """
        payload = json.dumps(_encode(catalog), indent=2, ensure_ascii=False)

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CatalogIOError(self._path, str(e)) from e

        logger.debug(f"Saved {len(catalog)} catalog entries to {self._path}")

    def _file_mode(self) -> int:
        # mkstemp creates 0600; keep the mode the cache already had
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_MODE


def _encode(catalog: Catalog) -> dict:
    return {
        label: {"pack_name": entry.package_id, "intent": entry.intent}
        for label, entry in catalog.items()
    }


def _decode(data, path) -> Catalog:
    if not isinstance(data, dict):
        raise CatalogCorruptError(path, "top level is not an object")

    catalog: Catalog = {}
    for label, record in data.items():
        if not isinstance(record, dict):
            raise CatalogCorruptError(path, f"entry '{label}' is not an object")

        package_id = record.get("pack_name")
        intent = record.get("intent")
        if not isinstance(package_id, str) or not package_id:
            raise CatalogCorruptError(path, f"entry '{label}' has no pack_name")
        if intent is not None and not isinstance(intent, str):
            raise CatalogCorruptError(path, f"entry '{label}' has a non-string intent")

        catalog[label.lower()] = Entry(package_id, intent)

    return catalog
