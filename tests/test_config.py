"""Tests for environment-driven settings."""

import pytest

from station_pipeline.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_RADIO_BROWSER_URL,
    DEFAULT_TIMEOUT_MS,
    Settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("STREAM_TIMEOUT_MS", "STREAM_VALIDATION_CONCURRENCY", "RADIO_BROWSER_URL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings == Settings(DEFAULT_TIMEOUT_MS, DEFAULT_CONCURRENCY, DEFAULT_RADIO_BROWSER_URL)
    assert settings.timeout == 5.0


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("STREAM_TIMEOUT_MS", "1500")
    monkeypatch.setenv("STREAM_VALIDATION_CONCURRENCY", "20")
    monkeypatch.setenv("RADIO_BROWSER_URL", "https://nl1.api.radio-browser.info/")
    settings = load_settings()
    assert settings.timeout_ms == 1500
    assert settings.timeout == 1.5
    assert settings.concurrency == 20
    assert settings.radio_browser_url == "https://nl1.api.radio-browser.info"


@pytest.mark.parametrize("value", ["", "abc", "0", "-3", "2.5"])
def test_invalid_numbers_fall_back(monkeypatch, value):
    monkeypatch.setenv("STREAM_TIMEOUT_MS", value)
    monkeypatch.setenv("STREAM_VALIDATION_CONCURRENCY", value)
    settings = load_settings()
    assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
    assert settings.concurrency == DEFAULT_CONCURRENCY


def test_with_overrides_ignores_missing_and_non_positive():
    base = Settings(timeout_ms=2000, concurrency=4)
    assert base.with_overrides() == base
    assert base.with_overrides(timeout_ms=0, concurrency=-1) == base
    assert base.with_overrides(timeout_ms=100, concurrency=8) == Settings(100, 8)
