"""Tests for station curation and station JSON files."""

import json

import pytest

from station_pipeline.errors import StationDataError
from station_pipeline.stations import (
    curate_station,
    load_manual_stations,
    load_raw_stations,
    save_stations,
    split_tags,
    station_from_dict,
    station_to_dict,
)
from station_pipeline.types import Station


RAW_RECORD = {
    "stationuuid": "96202f73-0601-11e8-ae97-52543be04c81",
    "name": "  Jazz FM  ",
    "url": "http://jazz.example/stream.m3u",
    "url_resolved": "https://jazz.example/live",
    "homepage": "https://jazz.example/",
    "favicon": "",
    "tags": "Jazz, smooth jazz,,jazz ,Blues",
    "codec": "MP3",
    "countrycode": "gr",
}


def test_split_tags():
    assert split_tags("Jazz, smooth jazz,,jazz ,Blues") == ["jazz", "smooth jazz", "blues"]
    assert split_tags("") == []
    assert split_tags(None) == []
    assert split_tags(["Rock", " rock", "Pop"]) == ["rock", "pop"]


def test_curate_station_maps_radio_browser_fields():
    station = curate_station(RAW_RECORD)
    assert station == Station(
        name="Jazz FM",
        stream_url="https://jazz.example/live",
        homepage="https://jazz.example/",
        favicon=None,
        tags=("jazz", "smooth jazz", "blues"),
        codec="MP3",
        is_custom=False,
        country_code="GR",
        station_uuid="96202f73-0601-11e8-ae97-52543be04c81",
    )


def test_curate_station_falls_back_to_url():
    station = curate_station({"name": "X", "url": "http://x.example/live", "url_resolved": " "})
    assert station.stream_url == "http://x.example/live"


def test_curate_station_without_any_url_keeps_empty_stream():
    assert curate_station({"name": "Nothing"}).stream_url == ""


def test_curate_station_rejects_non_mapping():
    with pytest.raises(StationDataError):
        curate_station(["not", "a", "record"])


def test_station_dict_round_trip_uses_camel_case():
    station = Station(name="A", stream_url="http://a.example/live", tags=("news",), is_custom=True)
    data = station_to_dict(station)
    assert data["streamUrl"] == "http://a.example/live"
    assert data["isCustom"] is True
    assert data["tags"] == ["news"]
    assert station_from_dict(data) == station


def test_station_from_dict_requires_stream_url():
    with pytest.raises(StationDataError, match="no streamUrl"):
        station_from_dict({"name": "A", "streamUrl": "  "})


def test_load_manual_stations_marks_custom(tmp_path):
    path = tmp_path / "manual.json"
    path.write_text(json.dumps([
        {"name": "Seed", "streamUrl": "http://seed.example/live", "isCustom": False, "tags": ["local"]},
    ]), encoding="utf-8")

    stations = load_manual_stations(str(path))

    assert len(stations) == 1
    assert stations[0].is_custom is True
    assert stations[0].tags == ("local",)


@pytest.mark.parametrize("content, message", [
    ("{not json", "Invalid JSON"),
    ('{"name": "x"}', "must contain a JSON list"),
])
def test_load_raw_stations_rejects_bad_files(tmp_path, content, message):
    path = tmp_path / "raw.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StationDataError, match=message):
        load_raw_stations(str(path))


def test_load_raw_stations_missing_file(tmp_path):
    with pytest.raises(StationDataError, match="Failed to read"):
        load_raw_stations(str(tmp_path / "missing.json"))


def test_save_stations_creates_directories(tmp_path):
    path = tmp_path / "output" / "stations.json"
    save_stations(str(path), [Station(name="Ελληνικό", stream_url="http://gr.example/live")])

    text = path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert "Ελληνικό" in text
    assert json.loads(text)[0]["streamUrl"] == "http://gr.example/live"
