from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, TypedDict


class RadioBrowserStation(TypedDict, total=False):
    """Subset of a Radio Browser ``/json/stations`` record that curation reads."""

    stationuuid: str
    name: str
    url: str
    url_resolved: str
    homepage: str
    favicon: str
    tags: str
    codec: str
    countrycode: str


class StationDict(TypedDict, total=False):
    """JSON form of a curated station, as stored in seed and output files."""

    name: str
    streamUrl: str
    homepage: Optional[str]
    favicon: Optional[str]
    tags: List[str]
    codec: Optional[str]
    isCustom: bool
    countryCode: Optional[str]
    stationUuid: Optional[str]


@dataclass(frozen=True)
class Station:
    name: str
    stream_url: str
    homepage: Optional[str] = None
    favicon: Optional[str] = None
    tags: Tuple[str, ...] = ()
    codec: Optional[str] = None
    is_custom: bool = False
    country_code: Optional[str] = None
    station_uuid: Optional[str] = None
