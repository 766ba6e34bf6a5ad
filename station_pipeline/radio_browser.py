from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from station_pipeline.errors import RadioBrowserError
from station_pipeline.logging_utils import get_logger
from station_pipeline.types import RadioBrowserStation

log = get_logger(__name__)

USER_AGENT = "StationPipeline/1.0 (radio station curation)"


def build_stations_url(base_url: str, country_code: Optional[str] = None) -> str:
    base = base_url.rstrip("/")
    if country_code:
        return f"{base}/json/stations/bycountrycodeexact/{country_code.strip().upper()}"
    return f"{base}/json/stations"


def fetch_raw_stations(base_url: str, country_code: Optional[str] = None, limit: Optional[int] = None,
                       timeout: float = 30.0, session: Optional[Any] = None) -> List[RadioBrowserStation]:
    """Fetch station records from a Radio Browser mirror or raise RadioBrowserError.

    Broken stations (as flagged by the directory) are hidden and the list is
    ordered by click count, most popular first.
    """
    url = build_stations_url(base_url, country_code)
    params: Dict[str, Any] = {"hidebroken": "true", "order": "clickcount", "reverse": "true"}
    if limit:
        params["limit"] = limit
    http = session if session is not None else requests
    try:
        log.info("radio_browser GET", extra={"url": url, "params": params})
        resp = http.get(url, params=params, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.exceptions.RequestException as e:
        log.error("radio_browser fetch failed", extra={"url": url, "error": str(e)})
        raise RadioBrowserError(f"Radio Browser request failed ({url}): {e}")
    except ValueError as e:
        raise RadioBrowserError(f"Radio Browser returned invalid JSON ({url}): {e}")

    if not isinstance(data, list):
        raise RadioBrowserError(f"Radio Browser returned {type(data).__name__}, expected a list ({url})")
    log.info("radio_browser fetched", extra={"count": len(data)})
    return data
