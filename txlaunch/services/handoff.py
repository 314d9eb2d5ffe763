"""
Catalog handoff between the change detector and the foreground loop.
"""

import threading
from typing import Optional

from txlaunch.services.catalog import Catalog


class CatalogSlot:
    """
    Single-slot mailbox holding the most recently published catalog.

    publish() never blocks and replaces any value the consumer has not
    taken yet; take() never blocks and returns None when nothing new is
    pending. A consumer therefore only ever sees the newest snapshot.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._value: Optional[Catalog] = None

    def publish(self, catalog: Catalog) -> None:
        with self._lock:
            self._value = catalog

    def take(self) -> Optional[Catalog]:
        with self._lock:
            value, self._value = self._value, None
        return value

    def pending(self) -> bool:
        with self._lock:
            return self._value is not None
