from __future__ import annotations

class PipelineError(Exception):
    """Base error for the station curation pipeline."""


class StationDataError(PipelineError):
    """Raised when a station record or station data file cannot be interpreted."""


class RadioBrowserError(PipelineError):
    """Raised when a Radio Browser API call fails."""
