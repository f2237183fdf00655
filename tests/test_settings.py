"""Tests for settings validation and JSON persistence."""

from __future__ import annotations

import json
import logging
import math

import pytest

from pomodesk.settings import (
    DEFAULT_TIMER_SETTINGS,
    SETTINGS_KEYS,
    SettingsError,
    TimerSettings,
    load_settings,
    save_settings,
    validate_settings_patch,
)


# ═══════════════════════════════════════════════════════════════════════
#  VALIDATION
# ═══════════════════════════════════════════════════════════════════════


class TestValidateSettingsPatch:
    def test_full_valid_patch(self):
        patch = {
            "focus_minutes": 50,
            "short_break_minutes": 10,
            "long_break_minutes": 30,
            "long_break_every": 3,
            "auto_start_next": True,
        }
        assert validate_settings_patch(patch) == patch

    def test_empty_patch(self):
        assert validate_settings_patch({}) == {}

    def test_fractional_minutes_allowed(self):
        assert validate_settings_patch({"focus_minutes": 0.5}) == {"focus_minutes": 0.5}

    @pytest.mark.parametrize("payload", [None, [], "focus_minutes", 25])
    def test_non_dict_rejected(self, payload):
        with pytest.raises(SettingsError, match="expected object"):
            validate_settings_patch(payload)

    def test_unknown_key_rejected(self):
        with pytest.raises(SettingsError, match="Unknown settings key: volume"):
            validate_settings_patch({"focus_minutes": 25, "volume": 3})

    @pytest.mark.parametrize("key", [
        "focus_minutes", "short_break_minutes", "long_break_minutes",
    ])
    @pytest.mark.parametrize("bad", [0, -1, math.nan, math.inf, "25", True, None])
    def test_bad_minutes_rejected(self, key, bad):
        with pytest.raises(SettingsError, match=key):
            validate_settings_patch({key: bad})

    @pytest.mark.parametrize("bad", [0, -2, 2.5, True, "4", None])
    def test_bad_long_break_every_rejected(self, bad):
        with pytest.raises(SettingsError, match="long_break_every"):
            validate_settings_patch({"long_break_every": bad})

    @pytest.mark.parametrize("bad", [1, 0, "true", None])
    def test_bad_auto_start_rejected(self, bad):
        with pytest.raises(SettingsError, match="auto_start_next"):
            validate_settings_patch({"auto_start_next": bad})

    def test_settings_error_is_value_error(self):
        assert issubclass(SettingsError, ValueError)

    def test_keys_match_dataclass(self):
        assert set(SETTINGS_KEYS) == set(TimerSettings.__dataclass_fields__)


# ═══════════════════════════════════════════════════════════════════════
#  PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════


class TestPersistence:
    def test_defaults(self):
        s = TimerSettings()
        assert s.focus_minutes == 25
        assert s.short_break_minutes == 5
        assert s.long_break_minutes == 15
        assert s.long_break_every == 4
        assert s.auto_start_next is False

    def test_missing_file_writes_defaults(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        loaded = load_settings(path)
        assert loaded == DEFAULT_TIMER_SETTINGS
        assert path.exists()
        assert json.loads(path.read_text())["long_break_every"] == 4

    def test_round_trip(self, tmp_path):
        path = tmp_path / "settings.json"
        original = TimerSettings(
            focus_minutes=45, short_break_minutes=7.5,
            long_break_minutes=20, long_break_every=2,
            auto_start_next=True,
        )
        save_settings(original, path)
        assert load_settings(path) == original

    def test_partial_file_overlays_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"focus_minutes": 40}))
        loaded = load_settings(path)
        assert loaded.focus_minutes == 40
        assert loaded.long_break_every == 4

    def test_corrupt_json_falls_back(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="pomodesk.settings"):
            loaded = load_settings(path)
        assert loaded == DEFAULT_TIMER_SETTINGS
        assert "Discarding unreadable settings" in caplog.text
        # rewritten with defaults
        assert json.loads(path.read_text())["focus_minutes"] == 25

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"focus_minutes": -5}))
        assert load_settings(path) == DEFAULT_TIMER_SETTINGS

    def test_unknown_keys_fall_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"theme": "dark"}))
        assert load_settings(path) == DEFAULT_TIMER_SETTINGS

    def test_save_format(self, tmp_path):
        path = tmp_path / "settings.json"
        save_settings(DEFAULT_TIMER_SETTINGS, path)
        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert set(json.loads(text)) == set(SETTINGS_KEYS)

    def test_save_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "settings.json"
        save_settings(DEFAULT_TIMER_SETTINGS, path)
        save_settings(TimerSettings(focus_minutes=30), path)
        assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]

    def test_default_path_used(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        monkeypatch.setattr("pomodesk.settings.SETTINGS_PATH", path)
        save_settings(TimerSettings(long_break_every=6))
        assert load_settings().long_break_every == 6

    def test_corrupt_file_in_unwritable_dir_returns_defaults(
        self, tmp_path, monkeypatch, caplog,
    ):
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        def read_only(*args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr("pomodesk.settings.tempfile.mkstemp", read_only)
        with caplog.at_level(logging.WARNING, logger="pomodesk.settings"):
            loaded = load_settings(path)
        assert loaded == DEFAULT_TIMER_SETTINGS
        assert "Could not write default settings" in caplog.text
        assert path.read_text() == "{not json"

    def test_missing_file_in_unwritable_dir_returns_defaults(
        self, tmp_path, monkeypatch, caplog,
    ):
        path = tmp_path / "settings.json"

        def read_only(*args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr("pomodesk.settings.tempfile.mkstemp", read_only)
        with caplog.at_level(logging.ERROR, logger="pomodesk.settings"):
            assert load_settings(path) == DEFAULT_TIMER_SETTINGS
        assert "Could not write default settings" in caplog.text
        assert not path.exists()
