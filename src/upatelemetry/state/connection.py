"""Push feed link status and signal lock."""

from __future__ import annotations

import logging

from upatelemetry import _constants as const
from upatelemetry.models.telemetry import ConnectionState, LogSeverity
from upatelemetry.state.log import EventLog

_logger = logging.getLogger(__name__)


def classify_feed_status(raw_status: str) -> ConnectionState | None:
    """Map a raw feed client status string onto :class:`ConnectionState`.

    Returns ``None`` for statuses that should leave the state untouched.
    """
    if raw_status.startswith("CONNECTED"):
        return ConnectionState.OK
    if raw_status.startswith("STALLED") or raw_status.startswith("DISCONNECTED:WILL-RETRY"):
        return ConnectionState.WARN
    if raw_status.startswith("DISCONNECTED"):
        return ConnectionState.DANGER
    return None


class ConnectionStatus:
    """Link state (pessimistic until the first status arrives) and signal lock."""

    def __init__(self, log: EventLog) -> None:
        self._log = log
        self.state = ConnectionState.DANGER
        self.signal_locked = False
        self.last_status: str | None = None

    def on_status_change(self, raw_status: str) -> ConnectionState:
        self._log.append(f"Feed status → {raw_status}", LogSeverity.INFO)
        self.last_status = raw_status
        mapped = classify_feed_status(raw_status)
        if mapped is None:
            _logger.debug("Unrecognized feed status %r; keeping %s", raw_status, self.state)
            return self.state
        self.state = mapped
        return self.state

    def on_signal_update(self, status_class: str | None) -> bool:
        self.signal_locked = status_class == const.SIGNAL_LOCKED_CLASS
        return self.signal_locked
