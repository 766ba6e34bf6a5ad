from __future__ import annotations

import argparse
from typing import List, Optional

from station_pipeline.config import load_settings
from station_pipeline.errors import PipelineError
from station_pipeline.logging_utils import setup_logging, get_logger
from station_pipeline.pipeline import build_final_list
from station_pipeline.radio_browser import fetch_raw_stations
from station_pipeline.stations import load_manual_stations, load_raw_stations, save_raw_stations, save_stations

log = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for building the curated station list."""
    parser = argparse.ArgumentParser(
        description="Build a curated radio station list: validate streams and drop duplicates."
    )
    parser.add_argument("--raw", type=str, default="output/raw.json",
                        help="Radio Browser dump to read (default: output/raw.json)")
    parser.add_argument("--manual", type=str, default=None,
                        help="JSON list of hand-curated stations, added as custom entries")
    parser.add_argument("--output", type=str, default="output/stations.json",
                        help="Output JSON path (default: output/stations.json)")
    parser.add_argument("--fetch", action='store_true',
                        help="Fetch stations from Radio Browser into --raw before building")
    parser.add_argument("--country", type=str, default=None, help="Country code for --fetch, e.g. GR")
    parser.add_argument("--limit", type=int, default=None, help="Max stations for --fetch")
    parser.add_argument("--timeout_ms", type=int, default=None,
                        help="Per-stream probe timeout in ms (default: STREAM_TIMEOUT_MS or 5000)")
    parser.add_argument("--concurrency", type=int, default=None,
                        help="Parallel probes (default: STREAM_VALIDATION_CONCURRENCY or 5)")
    parser.add_argument("--skip_validation", action='store_true', help="Do not probe streams")
    parser.add_argument("--log_level", type=str, default=None, help="Log level (e.g., INFO, DEBUG)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Examples:
      python3 build_station_list.py --fetch --country GR
      python3 build_station_list.py --raw output/raw.json --manual data/manual.json --concurrency 20
    """
    args = parse_args(argv)
    setup_logging(args.log_level)
    settings = load_settings().with_overrides(timeout_ms=args.timeout_ms, concurrency=args.concurrency)
    log.info("station curation start", extra={
        "raw": args.raw, "manual": args.manual, "output": args.output,
        "timeout_ms": settings.timeout_ms, "concurrency": settings.concurrency,
    })

    try:
        if args.fetch:
            records = fetch_raw_stations(settings.radio_browser_url, country_code=args.country, limit=args.limit)
            save_raw_stations(args.raw, records)
        else:
            records = load_raw_stations(args.raw)
        manual = load_manual_stations(args.manual) if args.manual else []

        final = build_final_list(records, manual, settings=settings, validate=not args.skip_validation)
        save_stations(args.output, final)
    except PipelineError as e:
        log.error("station curation failed", extra={"error": str(e)})
        return 1

    log.info("station curation done", extra={"count": len(final), "output": args.output})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
