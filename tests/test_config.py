"""Tests for environment parsing helpers in config.py."""

import config


class TestParseHelpers:
    """Tests for the _parse_* helpers."""

    def test_parse_int(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "12")
        assert config._parse_int("TEST_INT", 3) == 12

    def test_parse_int_invalid_falls_back(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "twelve")
        assert config._parse_int("TEST_INT", 3) == 3

    def test_parse_int_missing(self, monkeypatch):
        monkeypatch.delenv("TEST_INT", raising=False)
        assert config._parse_int("TEST_INT", 3) == 3

    def test_parse_float(self, monkeypatch):
        monkeypatch.setenv("TEST_FLOAT", "2.5")
        assert config._parse_float("TEST_FLOAT", 1.0) == 2.5
        monkeypatch.setenv("TEST_FLOAT", "nan-ish")
        assert config._parse_float("TEST_FLOAT", 1.0) == 1.0

    def test_parse_optional_float_disabled(self, monkeypatch):
        for raw in ("", "none", "OFF"):
            monkeypatch.setenv("TEST_LIMIT", raw)
            assert config._parse_optional_float("TEST_LIMIT", 10.0) is None

    def test_parse_optional_float_value(self, monkeypatch):
        monkeypatch.setenv("TEST_LIMIT", "0.5")
        assert config._parse_optional_float("TEST_LIMIT", 10.0) == 0.5

    def test_parse_bool(self, monkeypatch):
        for raw in ("1", "true", "Yes", "ON"):
            monkeypatch.setenv("TEST_BOOL", raw)
            assert config._parse_bool("TEST_BOOL", False) is True
        monkeypatch.setenv("TEST_BOOL", "no")
        assert config._parse_bool("TEST_BOOL", True) is False

    def test_parse_str_list(self, monkeypatch):
        monkeypatch.setenv("TEST_LIST", " Soup, Roast ,,Pie ")
        assert config._parse_str_list("TEST_LIST", ["x"]) == ["Soup", "Roast", "Pie"]
        monkeypatch.setenv("TEST_LIST", " , ")
        assert config._parse_str_list("TEST_LIST", ["x"]) == ["x"]


class TestDefaults:
    """Module-level settings are usable as loaded."""

    def test_scheduler_settings_are_sane(self):
        assert config.SCHEDULER_MAX_ATTEMPTS >= 1
        assert config.SCHEDULER_MAX_WORKERS >= 1
        assert config.SCHEDULER_IMPROVEMENT_PASSES >= 0
        assert config.DEFAULT_COURSE_NAMES
