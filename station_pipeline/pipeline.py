from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from station_pipeline.config import Settings, load_settings
from station_pipeline.dedup import deduplicate_stations
from station_pipeline.logging_utils import get_logger
from station_pipeline.stations import curate_station
from station_pipeline.stream_client import probe_stream
from station_pipeline.types import Station
from station_pipeline.validation import Probe, filter_stations_with_working_streams

log = get_logger(__name__)


def build_final_list(
    raw_records: Sequence[Mapping[str, Any]],
    manual_stations: Sequence[Station] = (),
    settings: Optional[Settings] = None,
    probe: Probe = probe_stream,
    validate: bool = True,
) -> List[Station]:
    """Curate, validate and deduplicate stations.

    Manual stations go first so that, all else equal, they are encountered
    before directory entries for the same stream. Validation runs before
    deduplication so a dead entry never wins over a live duplicate.
    """
    settings = settings or load_settings()

    curated = [curate_station(raw) for raw in raw_records]
    combined: List[Station] = [*manual_stations, *curated]
    log.info("stations combined", extra={
        "manual": len(manual_stations), "curated": len(curated), "total": len(combined)
    })

    if validate:
        working = filter_stations_with_working_streams(
            combined, timeout=settings.timeout, concurrency=settings.concurrency, probe=probe,
        )
    else:
        log.info("stream validation skipped")
        working = combined

    final = deduplicate_stations(working)
    log.info("final list built", extra={"count": len(final)})
    return final
