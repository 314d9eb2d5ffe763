"""
Tests for settings loading and deep merge logic.

Uses real TOML files on disk (no mocking).
"""

import pytest

from txlaunch.utils.helpers import _deep_merge, load_settings, settings_path


class TestDeepMerge:
    """Test the _deep_merge function directly."""

    def test_override_replaces_flat_key(self):
        assert _deep_merge({"a": 1, "b": 2}, {"b": 99}) == {"a": 1, "b": 99}

    def test_override_adds_new_key(self):
        assert _deep_merge({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}

    def test_nested_dicts_are_merged(self):
        base = {"section": {"a": 1, "b": 2}}
        override = {"section": {"b": 99, "c": 3}}
        assert _deep_merge(base, override) == {"section": {"a": 1, "b": 99, "c": 3}}

    def test_base_is_not_mutated(self):
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"x": 2}})
        assert base["a"]["x"] == 1


class TestLoadSettings:
    """Test load_settings with real TOML files."""

    def test_returns_defaults_when_file_missing(self, tmp_path):
        settings = load_settings(tmp_path / "nonexistent.toml")
        assert settings["launch"]["am"] == "old"
        assert settings["catalog"]["poll_interval"] == 1.0
        assert settings["labels"]["app.revanced.android.youtube"] == "youtube_revanced"

    def test_loaded_values_override_defaults(self, tmp_settings):
        settings = load_settings(tmp_settings)
        assert settings["launch"]["am"] == "new"
        assert settings["launch"]["warn"] is False
        assert settings["catalog"]["poll_interval"] == 5.0
        assert settings["logging"]["file"] == ""

    def test_label_tables_are_merged(self, tmp_settings):
        labels = load_settings(tmp_settings)["labels"]
        assert labels["org.mozilla.firefox"] == "ff"
        assert labels["app.revanced.android.youtube"] == "youtube_revanced"

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("[launch\nam = ")
        assert load_settings(path)["launch"]["am"] == "old"


class TestSettingsPath:
    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TX_LAUNCH_SETTINGS", str(tmp_path / "s.toml"))
        assert settings_path() == tmp_path / "s.toml"

    def test_default_location(self, monkeypatch):
        monkeypatch.delenv("TX_LAUNCH_SETTINGS", raising=False)
        assert settings_path().parts[-3:] == (".config", "tx_launch", "settings.toml")
