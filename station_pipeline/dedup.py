from __future__ import annotations

from typing import Dict, List, Sequence
from urllib.parse import urlsplit, urlunsplit

from station_pipeline.logging_utils import get_logger
from station_pipeline.types import Station

log = get_logger(__name__)

_NULL_PLACEHOLDERS = ("null", "none", "undefined")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


def normalize_stream_url(url: str) -> str:
    """Identity key for a stream URL.

    Drops the query string (session tokens, tracking parameters), lower-cases
    and strips one trailing slash. An explicit default port (:80 for http,
    :443 for https) is dropped. Anything that is not an absolute URL is
    lower-cased and trimmed the same way as a raw string.
    """
    if not url:
        return ""
    try:
        parts = urlsplit(url.strip())
        parts.port  # raises ValueError on a malformed port
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"not an absolute URL: {url!r}")
    except ValueError:
        return _strip_trailing_slash(url.lower())
    netloc = parts.netloc
    if parts.port is not None and parts.port == _DEFAULT_PORTS.get(parts.scheme):
        netloc = netloc.rsplit(":", 1)[0]
    path = parts.path or "/"
    key = urlunsplit((parts.scheme, netloc, path, "", parts.fragment))
    return _strip_trailing_slash(key.lower())


def _present(value) -> bool:
    return bool(value and value.strip())


def score_station(station: Station) -> int:
    """Data-completeness score; the highest score wins among duplicates."""
    score = 0
    if _present(station.homepage) and station.homepage != station.stream_url:
        score += 10
    if _present(station.favicon) and station.favicon.strip().lower() not in _NULL_PLACEHOLDERS:
        score += 5
    score += sum(1 for tag in station.tags if _present(tag))
    if station.is_custom:
        score += 20
    if station.stream_url.lower().startswith("https://"):
        score += 3
    if _present(station.codec):
        score += 2
    return score


def deduplicate_stations(stations: Sequence[Station]) -> List[Station]:
    """Keep the best-scoring station for each normalized stream URL.

    Groups come out in the order their key was first seen. Among equal scores
    the earliest station of the group wins (sorted() is stable).
    """
    if not stations:
        return []

    by_url: Dict[str, List[Station]] = {}
    for station in stations:
        by_url.setdefault(normalize_stream_url(station.stream_url), []).append(station)

    deduplicated: List[Station] = []
    duplicate_count = 0

    for group in by_url.values():
        if len(group) == 1:
            deduplicated.append(group[0])
            continue

        ranked = sorted(group, key=lambda s: -score_station(s))
        kept, removed = ranked[0], ranked[1:]
        duplicate_count += len(removed)
        log.info("duplicates removed", extra={
            "kept": kept.name, "kept_url": kept.stream_url,
            "removed": [s.name for s in removed],
        })
        deduplicated.append(kept)

    if duplicate_count:
        log.info("deduplication complete", extra={
            "duplicates": duplicate_count, "unique": len(deduplicated), "total": len(stations)
        })
    return deduplicated
