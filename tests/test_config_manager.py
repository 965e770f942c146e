"""
Tests for the JSON settings layer.
"""

import json
from pathlib import Path

import pytest

from Modules import config_manager


PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_manager, "config_json", path)
    return path


class TestLoad:

    def test_single_value(self, config_file):
        config_file.write_text(json.dumps({"angle_mode": "degrees"}), encoding="utf-8")
        assert config_manager.load_setting_value("angle_mode") == "degrees"
        assert config_manager.load_setting_value("missing") == 0

    def test_defaults_fill_missing_keys(self, config_file):
        config_file.write_text(json.dumps({"darkmode": True}), encoding="utf-8")
        settings = config_manager.load_settings()
        assert settings["darkmode"] is True
        assert settings["max_nesting_depth"] == 64
        assert settings["angle_mode"] == "radians"

    def test_missing_file(self, config_file):
        assert config_manager.load_setting_value("all") == {}
        assert config_manager.load_settings() == config_manager.DEFAULT_SETTINGS

    def test_broken_file(self, config_file):
        config_file.write_text("{not json", encoding="utf-8")
        assert config_manager.load_setting_value("all") == {}


class TestSave:

    def test_round_trip(self, config_file):
        settings = dict(config_manager.DEFAULT_SETTINGS, graphing=False)
        assert config_manager.save_setting(settings) == settings
        assert config_manager.load_settings()["graphing"] is False

    def test_unserializable_value(self, config_file):
        assert config_manager.save_setting({"angle_mode": object()}) == {}


class TestShippedFiles:

    def test_every_setting_has_a_description(self):
        settings = json.loads((PROJECT_ROOT / "config.json").read_text(encoding="utf-8"))
        descriptions = json.loads((PROJECT_ROOT / "ui_strings.json").read_text(encoding="utf-8"))
        assert set(settings) == set(descriptions)
        assert set(settings) == set(config_manager.DEFAULT_SETTINGS)


class TestFailedSave:

    def test_existing_file_is_left_intact(self, config_file):
        config_file.write_text(json.dumps({"darkmode": True}), encoding="utf-8")
        assert config_manager.save_setting({"darkmode": object()}) == {}
        assert json.loads(config_file.read_text(encoding="utf-8")) == {"darkmode": True}
