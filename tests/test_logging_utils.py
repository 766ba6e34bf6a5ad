"""Tests for the shared log formatting."""

import logging
import sys

from station_pipeline.logging_utils import LOG_FORMAT, ExtraFieldsFormatter


def _record(msg, extra=None, exc_info=None):
    logger = logging.getLogger("station_pipeline.validation")
    return logger.makeRecord(logger.name, logging.WARNING, __file__, 1, msg, (), exc_info, extra=extra)


def test_extra_fields_are_appended():
    formatter = ExtraFieldsFormatter(LOG_FORMAT)
    record = _record("station skipped, stream unreachable",
                     extra={"station": "Jazz FM", "url": "http://jazz.example/live"})
    line = formatter.format(record)
    assert line.endswith("station skipped, stream unreachable station='Jazz FM' url='http://jazz.example/live'")
    assert "[station_pipeline.validation]" in line


def test_plain_message_is_unchanged():
    formatter = ExtraFieldsFormatter(LOG_FORMAT)
    assert formatter.format(_record("stream validation start")).endswith("stream validation start")


def test_fields_stay_on_first_line_of_a_traceback():
    formatter = ExtraFieldsFormatter(LOG_FORMAT)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("stream check crashed", extra={"url": "http://x.example"}, exc_info=sys.exc_info())
    first, rest = formatter.format(record).split("\n", 1)
    assert first.endswith("stream check crashed url='http://x.example'")
    assert "RuntimeError: boom" in rest
