from __future__ import annotations

import json
import os
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from station_pipeline.errors import StationDataError
from station_pipeline.logging_utils import get_logger
from station_pipeline.types import RadioBrowserStation, Station, StationDict

log = get_logger(__name__)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def split_tags(raw_tags: Any) -> List[str]:
    """Split a Radio Browser comma string (or a list) into unique lower-case tags."""
    if not raw_tags:
        return []
    parts = raw_tags.split(",") if isinstance(raw_tags, str) else list(raw_tags)
    tags: List[str] = []
    seen = set()
    for part in parts:
        tag = str(part).strip().lower()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
    return tags


def curate_station(raw: Mapping[str, Any]) -> Station:
    """Turn a raw Radio Browser record into a Station."""
    if not isinstance(raw, Mapping):
        raise StationDataError(f"Station record must be an object, got {type(raw).__name__}")
    stream_url = _clean(raw.get("url_resolved")) or _clean(raw.get("url")) or ""
    country = _clean(raw.get("countrycode"))
    return Station(
        name=_clean(raw.get("name")) or "",
        stream_url=stream_url,
        homepage=_clean(raw.get("homepage")),
        favicon=_clean(raw.get("favicon")),
        tags=tuple(split_tags(raw.get("tags"))),
        codec=_clean(raw.get("codec")),
        is_custom=False,
        country_code=country.upper() if country else None,
        station_uuid=_clean(raw.get("stationuuid")),
    )


def station_from_dict(data: Mapping[str, Any], is_custom: Optional[bool] = None) -> Station:
    """Build a Station from its camelCase JSON form.

    ``is_custom`` overrides the record's own ``isCustom`` flag when given.
    """
    if not isinstance(data, Mapping):
        raise StationDataError(f"Station entry must be an object, got {type(data).__name__}")
    stream_url = _clean(data.get("streamUrl"))
    if not stream_url:
        raise StationDataError(f"Station {data.get('name')!r} has no streamUrl")
    tags = data.get("tags") or []
    if isinstance(tags, str):
        tags = [tags]
    return Station(
        name=_clean(data.get("name")) or "",
        stream_url=stream_url,
        homepage=_clean(data.get("homepage")),
        favicon=_clean(data.get("favicon")),
        tags=tuple(str(t) for t in tags),
        codec=_clean(data.get("codec")),
        is_custom=bool(data.get("isCustom")) if is_custom is None else is_custom,
        country_code=_clean(data.get("countryCode")),
        station_uuid=_clean(data.get("stationUuid")),
    )


def station_to_dict(station: Station) -> StationDict:
    return {
        "name": station.name,
        "streamUrl": station.stream_url,
        "homepage": station.homepage,
        "favicon": station.favicon,
        "tags": list(station.tags),
        "codec": station.codec,
        "isCustom": station.is_custom,
        "countryCode": station.country_code,
        "stationUuid": station.station_uuid,
    }


def _read_json_list(path: str) -> List[Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise StationDataError(f"Failed to read {path}: {e}")
    except json.JSONDecodeError as e:
        raise StationDataError(f"Invalid JSON in {path}: {e}")
    if not isinstance(data, list):
        raise StationDataError(f"{path} must contain a JSON list, got {type(data).__name__}")
    return data


def load_raw_stations(path: str) -> List[RadioBrowserStation]:
    """Load a saved Radio Browser dump (raw.json)."""
    records = _read_json_list(path)
    log.info("raw stations loaded", extra={"path": path, "count": len(records)})
    return records


def load_manual_stations(path: str) -> List[Station]:
    """Load hand-curated seed stations; every entry is marked custom."""
    stations = [station_from_dict(item, is_custom=True) for item in _read_json_list(path)]
    log.info("manual stations loaded", extra={"path": path, "count": len(stations)})
    return stations


def save_raw_stations(path: str, records: Sequence[Mapping[str, Any]]) -> None:
    _write_json(path, records)
    log.info("raw stations saved", extra={"path": path, "count": len(records)})


def save_stations(path: str, stations: Sequence[Station]) -> None:
    _write_json(path, [station_to_dict(s) for s in stations])
    log.info("stations saved", extra={"path": path, "count": len(stations)})


def _write_json(path: str, payload: Iterable[Any]) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(list(payload), f, ensure_ascii=False, indent=2)
        f.write("\n")
