"""
Tests for the command line entry point.

Runs main() end to end with a real cache file in tmp_path and
FakePackageManager in place of the Android tools.
"""

import io
import json
import sys

import pytest
import toml
from loguru import logger

from conftest import FakePackageManager
from txlaunch import __version__
from txlaunch.cli import main
from txlaunch.services.package_manager import AmVariant


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "cache" / "pkgs.json"


@pytest.fixture
def settings_env(tmp_path, cache_path, monkeypatch):
    """Point TX_LAUNCH_SETTINGS at a settings file using cache_path."""
    path = tmp_path / "settings.toml"
    path.write_text(toml.dumps({
        "catalog": {"path": str(cache_path), "poll_interval": 3600.0},
        "launch": {"am": "new", "warn": False},
    }))
    monkeypatch.setenv("TX_LAUNCH_SETTINGS", str(path))
    return path


@pytest.fixture
def pm():
    return FakePackageManager({
        "org.mozilla.firefox": ("Firefox", "org.mozilla.fenix.HomeActivity"),
        "com.termux": ("Termux", "com.termux.app.TermuxActivity"),
    })


class TestFlags:
    """Test informational flags and usage errors."""

    def test_help_exits_zero(self, capsys):
        assert main(["--help"]) == 0
        assert "usage" in capsys.readouterr().out

    def test_version_exits_zero(self, capsys):
        assert main(["-v"]) == 0
        assert f"v{__version__}" in capsys.readouterr().out

    def test_unknown_flag_exits_one(self, capsys):
        assert main(["--bogus"]) == 1
        assert "--help" in capsys.readouterr().err

    def test_missing_run_value_exits_one(self):
        assert main(["--run"]) == 1

    def test_unknown_am_value_exits_one(self):
        assert main(["--am", "fastest"]) == 1

    def test_unknown_am_in_settings_exits_one(self, settings_env, pm):
        settings_env.write_text(toml.dumps({"launch": {"am": "fastest"}}))
        assert main(["--run", "termux"], package_manager=pm) == 1

    @pytest.mark.parametrize("interval", ["soon", 0, -1.5])
    def test_bad_poll_interval_exits_one(self, settings_env, cache_path, pm, capsys, interval):
        settings_env.write_text(toml.dumps({
            "catalog": {"path": str(cache_path), "poll_interval": interval},
        }))

        assert main([], package_manager=pm) == 1
        assert "poll_interval" in capsys.readouterr().err
        assert not cache_path.exists()


class TestFirstRun:
    """Test building the catalog when no cache exists."""

    def test_list_builds_and_prints_catalog(self, settings_env, cache_path, pm, capsys):
        assert main(["-ls"], package_manager=pm) == 0

        out = capsys.readouterr().out
        assert "firefox" in out
        assert "settings" in out
        assert pm.aapt_checked
        assert set(json.loads(cache_path.read_text())) >= {"firefox", "termux", "playstore"}

    def test_existing_cache_is_not_rebuilt(self, settings_env, cache_path, pm):
        main(["-ls"], package_manager=pm)
        pm.label_queries.clear()

        assert main(["-ls"], package_manager=pm) == 0
        assert pm.label_queries == []

    def test_unwritable_cache_location_is_fatal(self, settings_env, tmp_path, pm, capsys):
        blocker = tmp_path / "file"
        blocker.write_text("")
        settings_env.write_text(toml.dumps({"catalog": {"path": str(blocker / "pkgs.json")}}))

        assert main(["-ls"], package_manager=pm) == 1
        assert "Error" in capsys.readouterr().err


class TestOneShot:
    """Test --run."""

    def test_found_app_launches(self, settings_env, pm):
        assert main(["--run", "Firefox"], package_manager=pm) == 0
        entry, variant = pm.launched[0]
        assert entry.package_id == "org.mozilla.firefox"
        assert variant is AmVariant.NEW

    def test_am_flag_overrides_settings(self, settings_env, pm):
        main(["--am", "system", "-r", "termux"], package_manager=pm)
        assert pm.launched[0][1] is AmVariant.SYSTEM

    def test_suggestion_exits_one(self, settings_env, pm, capsys):
        assert main(["--run", "fire"], package_manager=pm) == 1
        assert "Did you mean" in capsys.readouterr().out
        assert pm.launched == []

    def test_unknown_app_exits_one(self, settings_env, pm, capsys):
        assert main(["--run", "spotify"], package_manager=pm) == 1
        assert "No app 'spotify' found" in capsys.readouterr().out

    def test_failed_launch_exits_one(self, settings_env, pm):
        pm.launch_error = "Error type 3"
        assert main(["--run", "termux"], package_manager=pm) == 1

    def test_corrupt_cache_is_fatal(self, settings_env, cache_path, pm, capsys):
        cache_path.parent.mkdir(parents=True)
        cache_path.write_text("{oops")
        assert main(["--run", "termux"], package_manager=pm) == 1
        assert "corrupt" in capsys.readouterr().err


class TestWarnings:
    def test_legacy_am_warning(self, settings_env, pm, capsys):
        main(["--am", "old", "--run", "termux"], package_manager=pm)
        assert "legacy am" in capsys.readouterr().err

    def test_no_warn_suppresses(self, settings_env, pm, capsys):
        settings_env.write_text(toml.dumps({
            "catalog": {"path": str(settings_env.parent / "pkgs.json")},
            "launch": {"warn": True},
        }))
        main(["-nw", "--am", "old", "--run", "termux"], package_manager=pm)
        assert "legacy am" not in capsys.readouterr().err

    def test_system_am_on_new_sdk_warns(self, settings_env, pm, capsys):
        settings_env.write_text(toml.dumps({
            "catalog": {"path": str(settings_env.parent / "pkgs.json")},
            "launch": {"warn": True},
        }))
        pm.sdk = 33
        main(["--am", "system", "--run", "termux"], package_manager=pm)
        assert "SDK VERSION" in capsys.readouterr().err


class TestInteractive:
    def test_prompt_session(self, settings_env, pm, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("termux\nq\n"))
        assert main([], package_manager=pm) == 0
        assert pm.launched[0][0].package_id == "com.termux"
        assert "Took 42ms" in capsys.readouterr().out
