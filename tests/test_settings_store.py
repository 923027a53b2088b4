"""Tests for reading and writing the settings file."""

import json

from kanafall.models import Settings
from kanafall.settings_store import load_settings, save_settings, settings_from_dict


def test_defaults_when_file_missing(tmp_path):
    assert load_settings(tmp_path / "settings.json") == Settings()


def test_save_then_load(tmp_path):
    path = tmp_path / "cfg" / "settings.json"
    settings = Settings(selected_stages=(3, 5), speed=4, is_random_mode=True, num_stages=7)
    save_settings(settings, path)
    assert load_settings(path) == settings


def test_save_keeps_other_sections(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"audio": {"muted": True}}))
    save_settings(Settings(speed=3), path)
    data = json.loads(path.read_text())
    assert data["audio"] == {"muted": True}
    assert data["game"]["speed"] == 3


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert load_settings(path) == Settings()


def test_loose_values_are_cleaned():
    settings = settings_from_dict({
        "selected_stages": ["4", 4, "x", 99],
        "speed": 12,
        "window_scale": 0.1,
        "colour": "blue",
    })
    assert settings.selected_stages == (4,)
    assert settings.speed == 5
    assert settings.window_scale == 0.5


def test_save_over_non_object_file(tmp_path):
    path = tmp_path / "settings.json"
    for content in ("[]", "3", '"x"'):
        path.write_text(content)
        save_settings(Settings(speed=4), path)
        assert load_settings(path).speed == 4


def test_load_non_object_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]")
    assert load_settings(path) == Settings()
