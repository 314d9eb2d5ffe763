"""
Shared test fixtures for the tx_launch test suite.

Catalog caches and settings files use real file I/O in tmp_path. The
Android tools are replaced by FakePackageManager, which answers from
in-memory tables instead of running pm/aapt/am.
"""

import json

import pytest
import toml

from txlaunch.errors import ExternalQueryError, LaunchError
from txlaunch.services.catalog import BUILTIN_ENTRIES, Entry
from txlaunch.services.catalog_store import CatalogStore
from txlaunch.services.handoff import CatalogSlot


class FakePackageManager:
    """In-memory stand-in for PackageManager."""

    def __init__(self, packages=None, failing_labels=(), failing_intents=()):
        # package_id -> (label, intent)
        self.packages = dict(packages or {})
        self.failing_labels = set(failing_labels)
        self.failing_intents = set(failing_intents)
        self.list_error = None
        self.launch_error = None
        self.launched = []
        self.label_queries = []
        self.aapt_checked = False
        self.sdk = 29

    def list_installed_packages(self):
        if self.list_error is not None:
            raise self.list_error
        return list(self.packages)

    def extract_label(self, package_id):
        self.label_queries.append(package_id)
        if package_id in self.failing_labels:
            raise ExternalQueryError(f"aapt failed for {package_id}")
        return self.packages[package_id][0]

    def resolve_default_intent(self, package_id):
        if package_id in self.failing_intents:
            raise ExternalQueryError(f"pm failed for {package_id}")
        return self.packages[package_id][1]

    def launch(self, entry, variant):
        if self.launch_error is not None:
            raise LaunchError(self.launch_error)
        self.launched.append((entry, variant))
        return 42

    def ensure_aapt(self):
        self.aapt_checked = True

    def sdk_version(self):
        return self.sdk


@pytest.fixture
def fake_pm():
    """Package manager with two installed apps."""
    return FakePackageManager({
        "org.mozilla.firefox": ("Firefox", "org.mozilla.fenix.HomeActivity"),
        "com.termux": ("Termux", "com.termux.app.TermuxActivity"),
    })


@pytest.fixture
def store(tmp_path):
    """CatalogStore backed by a file that does not exist yet."""
    return CatalogStore(tmp_path / "pkgs.json")


@pytest.fixture
def slot():
    return CatalogSlot()


@pytest.fixture
def seeded_store(store):
    """Store holding firefox, termux and the built-ins."""
    catalog = dict(BUILTIN_ENTRIES)
    catalog["firefox"] = Entry("org.mozilla.firefox", "org.mozilla.fenix.HomeActivity")
    catalog["termux"] = Entry("com.termux", "com.termux.app.TermuxActivity")
    store.save(catalog)
    return store


@pytest.fixture
def tmp_cache_json(tmp_path):
    """A cache file in the on-disk format, written by hand."""
    path = tmp_path / "pkgs.json"
    data = {
        "settings": {
            "pack_name": "com.android.settings",
            "intent": "com.android.settings.Settings",
        },
        "termux": {
            "pack_name": "com.termux",
            "intent": None,
        },
    }
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "catalog": {"path": str(tmp_path / "cache" / "pkgs.json"), "poll_interval": 5.0},
        "launch": {"am": "new", "warn": False},
        "logging": {"level": "INFO"},
        "labels": {"org.mozilla.firefox": "ff"},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
