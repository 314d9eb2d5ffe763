"""
Exception types raised by tx_launch services.

Fatal errors propagate up to the CLI, which reports them and exits with
status 1. Recoverable failures (a single package's label or intent) are
handled where they occur.
"""


class TxLaunchError(Exception):
    """Base class for all tx_launch errors."""


class ExternalQueryError(TxLaunchError):
    """An Android shell tool failed or returned unusable output."""


class LaunchError(ExternalQueryError):
    """The activity manager refused to start an app."""


class CatalogStoreError(TxLaunchError):
    """Base class for catalog cache failures."""

    def __init__(self, path, message):
        self.path = path
        super().__init__(f"{message}: {path}")


class CatalogNotFoundError(CatalogStoreError):
    def __init__(self, path):
        super().__init__(path, "Catalog cache not found")


class CatalogCorruptError(CatalogStoreError):
    def __init__(self, path, reason: str):
        self.reason = reason
        super().__init__(path, f"Catalog cache is corrupt ({reason})")


class CatalogIOError(CatalogStoreError):
    def __init__(self, path, reason: str):
        self.reason = reason
        super().__init__(path, f"Catalog cache I/O failed ({reason})")
