import json

import pytest

from graphroom.config import DEFAULTS, Settings, get_settings, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in DEFAULTS:
        monkeypatch.delenv(f"GRAPHROOM_{key.upper()}", raising=False)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


def test_defaults_without_file(config_path):
    assert load_config(config_path) == {}
    assert get_settings(config_path) == Settings()


def test_file_values_are_used(config_path):
    config_path.write_text(json.dumps({"title": "Lab", "port": 9001, "canvas_width": "800"}), encoding="utf-8")
    settings = get_settings(config_path)

    assert settings.title == "Lab"
    assert settings.port == 9001
    assert settings.canvas_width == 800
    assert settings.canvas_height == DEFAULTS["canvas_height"]


def test_environment_wins_over_file(config_path, monkeypatch):
    config_path.write_text(json.dumps({"port": 9001, "log_level": "warning"}), encoding="utf-8")
    monkeypatch.setenv("GRAPHROOM_PORT", "9100")

    settings = get_settings(config_path)
    assert settings.port == 9100
    assert settings.log_level == "WARNING"


def test_corrupt_file_is_ignored(config_path, caplog):
    config_path.write_text("{not json", encoding="utf-8")
    assert load_config(config_path) == {}
    assert "Ignoring unreadable config file" in caplog.text


def test_non_object_file_is_ignored(config_path):
    config_path.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert load_config(config_path) == {}


@pytest.mark.parametrize("key, value", [("port", "eighty"), ("log_level", "LOUD")])
def test_invalid_values_fall_back_to_defaults(config_path, monkeypatch, key, value):
    monkeypatch.setenv(f"GRAPHROOM_{key.upper()}", value)
    settings = get_settings(config_path)
    assert getattr(settings, key) == DEFAULTS[key]
