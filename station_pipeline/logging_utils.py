from __future__ import annotations

import logging
import os
from typing import Optional


_CONFIGURED = False

# Probing hundreds of streams makes urllib3 very talkative below WARNING.
_CHATTY_LOGGERS = ("urllib3",)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Attributes every LogRecord has; anything else came in through extra={...}.
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """Append the fields passed via ``extra`` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if not fields:
            return line
        pairs = " ".join(f"{k}={v!r}" for k, v in fields.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _apply_level(log_level: int) -> None:
    logging.getLogger().setLevel(log_level)
    chatty_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once with a consistent, readable format.

    Modules call this implicitly through get_logger() at import time, so an
    explicit level passed later (e.g. from a --log_level flag) still takes
    effect on the already configured root logger.

    Args:
        level: Optional log level name (e.g., "INFO", "DEBUG"). If omitted,
               reads LOG_LEVEL env or defaults to INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        if level:
            _apply_level(_resolve_level(level))
        return

    log_level = _resolve_level(level)
    root = logging.getLogger()
    existing = list(root.handlers)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    for handler in root.handlers:
        if handler not in existing:
            handler.setFormatter(ExtraFieldsFormatter(LOG_FORMAT))
    _apply_level(log_level)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with global config ensured."""
    setup_logging()
    return logging.getLogger(name)
