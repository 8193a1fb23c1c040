"""Bounded, newest-first event log shown on the dashboard."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from upatelemetry import _constants as const
from upatelemetry.ingestion.normalize import utc_clock
from upatelemetry.models.telemetry import LogEntry, LogSeverity

_logger = logging.getLogger(__name__)

_LEVELS: dict[LogSeverity, int] = {
    LogSeverity.INFO: logging.INFO,
    LogSeverity.WARNING: logging.WARNING,
    LogSeverity.ALERT: logging.ERROR,
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EventLog:
    """Capped sequence of :class:`LogEntry`, newest first.

    Entries are only ever prepended; once ``capacity`` is exceeded the
    oldest entries fall off the tail.
    """

    def __init__(
        self,
        *,
        capacity: int = const.LOG_CAPACITY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._capacity = capacity
        self._clock = clock
        self._entries: tuple[LogEntry, ...] = ()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, message: str, severity: LogSeverity = LogSeverity.INFO) -> LogEntry:
        entry = LogEntry(timestamp=utc_clock(self._clock()), severity=severity, message=message)
        self._entries = (entry, *self._entries)[: self._capacity]
        _logger.log(_LEVELS[severity], "%s", message)
        return entry

    def snapshot(self) -> tuple[LogEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)
