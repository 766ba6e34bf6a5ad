"""Pytest configuration and fixtures for the station pipeline tests."""

from typing import Callable

import pytest

from station_pipeline.types import Station


@pytest.fixture
def make_station() -> Callable[..., Station]:
    """Factory for stations with sensible defaults; override any field by keyword."""

    def _make(name: str = "Station", stream_url: str = "http://radio.example/stream", **fields) -> Station:
        return Station(name=name, stream_url=stream_url, **fields)

    return _make
