from __future__ import annotations

import threading
from typing import Callable, List, Optional, Sequence

from station_pipeline.config import load_settings
from station_pipeline.logging_utils import get_logger
from station_pipeline.stream_client import probe_stream
from station_pipeline.types import Station

log = get_logger(__name__)

Probe = Callable[[str, float], bool]


class _IndexClaimer:
    """Hands out 0..total-1 exactly once across threads."""

    def __init__(self, total: int) -> None:
        self._total = total
        self._next = 0
        self._lock = threading.Lock()

    def claim(self) -> Optional[int]:
        with self._lock:
            if self._next >= self._total:
                return None
            index = self._next
            self._next += 1
            return index


def filter_stations_with_working_streams(
    stations: Sequence[Station],
    timeout: Optional[float] = None,
    concurrency: Optional[int] = None,
    probe: Probe = probe_stream,
) -> List[Station]:
    """Return the stations whose stream answered, keeping input order.

    A fixed pool of ``min(concurrency, len(stations))`` threads claims station
    indices from a shared counter, probes each stream once, and records the
    outcome in that station's slot of a pre-sized result list. The call
    returns only after every worker has finished.

    Args:
        stations: Stations to check. Never mutated.
        timeout: Per-probe timeout in seconds. Defaults to STREAM_TIMEOUT_MS.
        concurrency: Worker count, clamped to at least 1. Defaults to
                     STREAM_VALIDATION_CONCURRENCY.
        probe: ``probe(url, timeout) -> bool``; must not raise.
    """
    if not stations:
        return []

    if timeout is None or concurrency is None:
        settings = load_settings()
        timeout = settings.timeout if timeout is None else timeout
        concurrency = settings.concurrency if concurrency is None else concurrency
    concurrency = max(1, concurrency)

    total = len(stations)
    statuses: List[bool] = [False] * total
    claimer = _IndexClaimer(total)

    def worker() -> None:
        while True:
            index = claimer.claim()
            if index is None:
                return
            station = stations[index]
            try:
                ok = probe(station.stream_url, timeout)
            except Exception:
                log.exception("stream check crashed", extra={
                    "station": station.name, "url": station.stream_url
                })
                ok = False
            statuses[index] = ok
            if not ok:
                log.warning("station skipped, stream unreachable", extra={
                    "station": station.name, "url": station.stream_url
                })

    worker_count = min(concurrency, total)
    log.info("stream validation start", extra={
        "stations": total, "workers": worker_count, "timeout": timeout
    })
    threads = [
        threading.Thread(target=worker, name=f"stream-probe-{i}", daemon=True)
        for i in range(worker_count)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    filtered = [station for station, ok in zip(stations, statuses) if ok]
    log.info("stream validation complete", extra={"kept": len(filtered), "total": total})
    return filtered
