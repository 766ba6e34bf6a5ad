from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_CONCURRENCY = 5
DEFAULT_RADIO_BROWSER_URL = "https://de1.api.radio-browser.info"


def _positive_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    """Runtime knobs for stream validation and directory fetching."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    concurrency: int = DEFAULT_CONCURRENCY
    radio_browser_url: str = DEFAULT_RADIO_BROWSER_URL

    @property
    def timeout(self) -> float:
        """Probe timeout in seconds, the unit requests expects."""
        return self.timeout_ms / 1000.0

    def with_overrides(self, timeout_ms: Optional[int] = None,
                       concurrency: Optional[int] = None) -> "Settings":
        return Settings(
            timeout_ms=timeout_ms if timeout_ms and timeout_ms > 0 else self.timeout_ms,
            concurrency=concurrency if concurrency and concurrency > 0 else self.concurrency,
            radio_browser_url=self.radio_browser_url,
        )


def load_settings() -> Settings:
    """Read settings from the environment.

    STREAM_TIMEOUT_MS and STREAM_VALIDATION_CONCURRENCY must be positive
    integers; anything else falls back to the default.
    """
    base_url = (os.getenv("RADIO_BROWSER_URL") or DEFAULT_RADIO_BROWSER_URL).strip().rstrip("/")
    return Settings(
        timeout_ms=_positive_int_env("STREAM_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        concurrency=_positive_int_env("STREAM_VALIDATION_CONCURRENCY", DEFAULT_CONCURRENCY),
        radio_browser_url=base_url or DEFAULT_RADIO_BROWSER_URL,
    )
