"""Shared fixtures for the calcdeck test suite."""

import os
from typing import Any, Callable

import pytest

from calcdeck import executor
from calcdeck.config import Settings, get_settings
from calcdeck.models import ExecuteCalcResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Run every test with default settings, whatever the shell exports."""
    for key in list(os.environ):
        if key.startswith("CALCDECK_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def calc(settings: Settings) -> Callable[..., ExecuteCalcResult]:
    """calc("bmi", weight=70, height=175) -> ExecuteCalcResult through the executor."""

    def _run(calc_id: str, **variables: Any) -> ExecuteCalcResult:
        return executor.run(calc_id, variables, settings=settings)

    return _run


@pytest.fixture
def ok(calc: Callable[..., ExecuteCalcResult]) -> Callable[..., dict]:
    """Like calc, but asserts success and returns the outputs dict."""

    def _run(calc_id: str, **variables: Any) -> dict:
        result = calc(calc_id, **variables)
        assert result.success, result.error_messages()
        return result.outputs

    return _run
