"""Logging setup and the in-memory log buffer for Parcel conversions.

The materializer only ever emits through stdlib ``logging``. Callers that
want to replay diagnostics (a UI log pane, a ``--json`` report) create a
:class:`LogBuffer` and attach it with :func:`attach_buffer`; nothing in the
core holds a reference to it.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from threading import Lock
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


class Verbosity(IntEnum):
    """Verbosity levels for console output."""

    DEFAULT = 0   # Summary table and warnings only
    VERBOSE = 1   # + per-instruction debug logging


def setup_logging(verbosity: Verbosity | int = Verbosity.DEFAULT) -> None:
    """Configure root logging based on verbosity."""
    level = logging.DEBUG if verbosity >= Verbosity.VERBOSE else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)


@dataclass
class LogEntry:
    """A single buffered log record."""

    timestamp: int  # seconds since the epoch
    level: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
        }


class LogBuffer:
    """Thread-safe buffer of log entries, optionally bounded.

    When ``max_entries`` is set the oldest entries are dropped first.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._lock = Lock()
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    def add(self, level: str, message: str) -> None:
        entry = LogEntry(timestamp=int(time.time()), level=level, message=message)
        with self._lock:
            self._entries.append(entry)

    def entries(self) -> list[LogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class BufferHandler(logging.Handler):
    """Logging handler that mirrors records into a LogBuffer."""

    def __init__(self, buffer: LogBuffer, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.buffer = buffer
        self.previous_level: int | None = None  # set by attach_buffer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.buffer.add(record.levelname, record.getMessage())
        except Exception:
            self.handleError(record)


def attach_buffer(
    buffer: LogBuffer,
    logger_name: str = "parcel",
    level: int = logging.INFO,
) -> BufferHandler:
    """Attach ``buffer`` to a logger and return the handler (for later removal).

    The logger's level is lowered to ``level`` if needed; :func:`detach_buffer`
    puts the original level back.
    """
    handler = BufferHandler(buffer, level)
    logger = logging.getLogger(logger_name)
    handler.previous_level = logger.level
    logger.addHandler(handler)
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    return handler


def detach_buffer(handler: BufferHandler, logger_name: str = "parcel") -> None:
    logger = logging.getLogger(logger_name)
    logger.removeHandler(handler)
    if handler.previous_level is not None:
        logger.setLevel(handler.previous_level)
