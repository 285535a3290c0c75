"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from calcdeck.config import DEFAULT_REFERENCE_CASES, Settings, get_settings


class TestSettings:
    """Tests for Settings and get_settings."""

    def test_defaults(self, settings) -> None:
        assert settings.precision == 4
        assert settings.log_level == "INFO"
        assert settings.require_calc_info is True
        assert settings.reference_cases == DEFAULT_REFERENCE_CASES

    def test_from_mapping(self) -> None:
        s = Settings.from_env({
            "CALCDECK_PRECISION": "2",
            "CALCDECK_LOG_LEVEL": "debug",
            "CALCDECK_REQUIRE_CALC_INFO": "no",
            "CALCDECK_REFERENCE_CASES": "/tmp/cases.csv",
            "OTHER_PRECISION": "9",
        })
        assert s.precision == 2
        assert s.log_level == "DEBUG"
        assert s.require_calc_info is False
        assert s.reference_cases == Path("/tmp/cases.csv")

    def test_empty_values_keep_defaults(self) -> None:
        assert Settings.from_env({"CALCDECK_PRECISION": ""}).precision == 4

    def test_base_url_trailing_slash(self) -> None:
        assert Settings(base_url="https://calc.test///").base_url == "https://calc.test"

    def test_bad_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings.from_env({"CALCDECK_LOG_LEVEL": "LOUD"})

    def test_precision_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Settings(precision=13)

    def test_get_settings_reads_environment_once(self, monkeypatch) -> None:
        monkeypatch.setenv("CALCDECK_PRECISION", "6")
        first = get_settings()
        assert first.precision == 6
        monkeypatch.setenv("CALCDECK_PRECISION", "1")
        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().precision == 1
