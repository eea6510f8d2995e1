"""Process-wide logging setup with a level taken from configuration."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import TextIO

TRACE = 5
PANIC = 60
DISABLED = 100

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PANIC, "PANIC")

_HANDLER_NAME = "changie"

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": PANIC,
    "disabled": DISABLED,
    "": DISABLED,
}

log = logging.getLogger(__name__)


class _Formatter(logging.Formatter):
    """Formats records as ``<RFC 3339 time> <LEVEL> <message>``."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone()
        return stamp.isoformat(timespec="seconds")


def parse_level(name: str) -> int:
    """Return the logging level for a name such as ``debug`` or ``warn``."""
    try:
        return _LEVELS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown Level String: '{name}', defaulting to NoLevel") from None


def init_logger(level: str, out: TextIO | None = None) -> int:
    """Configure the root logger to write to ``out`` (stderr by default).

    An unknown level falls back to info with a warning. Returns the level used.
    """
    stream = sys.stderr if out is None else out

    error: ValueError | None = None
    try:
        resolved = parse_level(level)
    except ValueError as exc:
        resolved = logging.INFO
        error = exc

    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_Formatter())
    root.addHandler(handler)
    root.setLevel(resolved)

    if error is not None:
        log.warning(
            "Invalid log level provided, defaulting to 'info' provided_level=%s error=%s",
            level,
            error,
        )
    return resolved