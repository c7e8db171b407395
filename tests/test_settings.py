import json
import logging

import pytest

from settings import THEMES, Settings, log_level


def test_defaults_when_file_missing(settings):
    assert settings.theme == "dark"
    assert settings.anim_speed == 800
    assert settings.get("BG") == THEMES["dark"]["BG"]


def test_save_and_reload(tmp_path):
    path = str(tmp_path / "s.json")
    s = Settings(path=path)
    s.theme = "light"
    s.anim_speed = 300
    s.custom_colors = {"BG": "#000000"}
    s.save()

    again = Settings(path=path)
    assert again.theme == "light"
    assert again.anim_speed == 300
    assert again.get("BG") == "#000000"
    assert again.get("FG") == THEMES["light"]["FG"]


def test_corrupt_file_keeps_defaults(tmp_path, caplog):
    path = tmp_path / "s.json"
    path.write_text("{not json")
    s = Settings(path=str(path))
    assert s.theme == "dark"
    assert "could not read settings" in caplog.text


@pytest.mark.parametrize("payload", [
    {"anim_speed": "fast"},
    {"anim_speed": None},
    {"custom_colors": ["x"]},
    {"theme": ["dark"]},
    [],
    "dark",
])
def test_wrong_shape_keeps_defaults(tmp_path, caplog, payload):
    path = tmp_path / "s.json"
    path.write_text(json.dumps(payload))
    s = Settings(path=str(path))
    assert (s.theme, s.anim_speed, s.custom_colors) == ("dark", 800, {})
    if not isinstance(payload, dict) or "theme" not in payload:
        assert "could not read settings" in caplog.text


def test_unknown_theme_falls_back(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(json.dumps({"theme": "neon"}))
    assert Settings(path=str(path)).theme == "dark"


def test_unknown_key_is_white(settings):
    assert settings.get("NOPE") == "#ffffff"


def test_toggle_theme(settings):
    assert settings.toggle_theme() == "light"
    assert settings.toggle_theme() == "dark"


def test_marker_color_priority(settings):
    assert settings.marker_color([]) is None
    assert settings.marker_color(["child"]) == settings.get("MARK_CHILD")
    assert settings.marker_color(["new_root", "pivot"]) == settings.get("MARK_PIVOT")
    assert settings.marker_color(["successor", "deleting"]) == settings.get("MARK_DELETING")


def test_every_marker_has_a_colour_in_every_theme():
    from settings import MARKER_PRIORITY
    for theme in THEMES.values():
        for m in MARKER_PRIORITY:
            assert "MARK_" + m.upper() in theme


@pytest.mark.parametrize("name, expected", [
    ("debug", logging.DEBUG),
    ("WARNING", logging.WARNING),
    ("verbose", logging.INFO),
    ("", logging.INFO),
])
def test_log_level(name, expected):
    assert log_level(name) == expected
