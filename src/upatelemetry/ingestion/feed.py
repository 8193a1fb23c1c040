"""Push feed subscription lifecycle.

The manager opens the telemetry and signal subscriptions on a
:class:`PushFeedClient`, routes every event into :class:`DashboardState`
and tears everything down on :meth:`FeedSubscriptionManager.stop`.
Reconnection is the client's business; the manager only reports what the
client says.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from upatelemetry import _constants as const
from upatelemetry.exceptions import UpaFeedError
from upatelemetry.models.telemetry import ConnectionState, LogSeverity
from upatelemetry.state.connection import classify_feed_status
from upatelemetry.state.store import DashboardState

_logger = logging.getLogger(__name__)

MERGE = "MERGE"


@dataclass(frozen=True)
class SubscriptionSpec:
    """What to subscribe to: mode, item names, ordered field names, snapshot flag."""

    mode: str
    items: tuple[str, ...]
    fields: tuple[str, ...]
    snapshot: bool = True


@dataclass(frozen=True)
class FeedItemUpdate:
    """One item update: item name plus the current string value of each field."""

    item_name: str
    values: Mapping[str, str | None] = field(default_factory=dict)

    def get(self, field_name: str) -> str | None:
        return self.values.get(field_name)


class PushFeedClient(Protocol):
    """Push-streaming client capability (reconnection handled internally)."""

    def set_status_handler(self, handler: Callable[[str], None] | None) -> None: ...

    def connect(self) -> None: ...

    def disconnect(self) -> None: ...

    def subscribe(self, spec: SubscriptionSpec, on_item_update: Callable[[FeedItemUpdate], None]) -> Any: ...

    def unsubscribe(self, handle: Any) -> None: ...


class FeedLifecycle(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DEGRADED = "degraded"
    DISCONNECTED = "disconnected"


_LIFECYCLE_BY_CONNECTION: dict[ConnectionState, FeedLifecycle] = {
    ConnectionState.OK: FeedLifecycle.CONNECTED,
    ConnectionState.WARN: FeedLifecycle.DEGRADED,
    ConnectionState.DANGER: FeedLifecycle.DISCONNECTED,
}


class FeedSubscriptionManager:
    def __init__(self, *, client: PushFeedClient, state: DashboardState) -> None:
        self._client = client
        self._state = state
        self._handles: list[Any] = []
        self._running = False
        self._status_seen = False
        # Bumped on every start/stop; callbacks carry the value they were
        # registered with and are dropped once it goes stale.
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def lifecycle(self) -> FeedLifecycle:
        """Idle/connecting are local; everything after the first status is the link state."""
        if not self._running:
            return FeedLifecycle.IDLE
        if not self._status_seen:
            return FeedLifecycle.CONNECTING
        return _LIFECYCLE_BY_CONNECTION[self._state.connection.state]

    def start(
        self,
        item_ids: Sequence[str],
        data_fields: Sequence[str],
        control_item_id: str | None = None,
        control_fields: Sequence[str] = (),
    ) -> None:
        if self._running:
            raise UpaFeedError("feed manager already started")

        self._generation += 1
        generation = self._generation
        self._running = True
        self._status_seen = False
        log = self._state.log

        self._client.set_status_handler(lambda status: self._on_status(generation, status))

        items = tuple(item_ids)
        if items:
            data_spec = SubscriptionSpec(mode=MERGE, items=items, fields=tuple(data_fields), snapshot=True)
            self._handles.append(
                self._client.subscribe(data_spec, lambda update: self._on_data_update(generation, update))
            )
            log.append(f"Subscribed to {len(items)} telemetry item(s): {', '.join(items)}", LogSeverity.INFO)

        if control_item_id:
            control_spec = SubscriptionSpec(
                mode=MERGE,
                items=(control_item_id,),
                fields=tuple(control_fields),
                snapshot=True,
            )
            self._handles.append(
                self._client.subscribe(control_spec, lambda update: self._on_control_update(generation, update))
            )

        self._client.connect()
        log.append("Push feed connecting…", LogSeverity.INFO)
        log.append("Dashboard initialised — live telemetry stream active", LogSeverity.INFO)

    def stop(self) -> None:
        """Tear down subscriptions and the connection; safe to call repeatedly."""
        if not self._running:
            return
        self._running = False
        self._generation += 1
        handles, self._handles = self._handles, []

        for handle in handles:
            try:
                self._client.unsubscribe(handle)
            except Exception:
                _logger.debug("Feed unsubscribe failed", exc_info=True)
        try:
            self._client.disconnect()
        finally:
            self._client.set_status_handler(None)
        _logger.debug("Feed manager stopped")

    # ------------------------------------------------------------------
    # Event routing
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _on_status(self, generation: int, raw_status: str) -> None:
        if not self._is_current(generation):
            _logger.debug("Dropping late feed status %r", raw_status)
            return
        self._state.connection.on_status_change(raw_status)
        if classify_feed_status(raw_status) is not None:
            self._status_seen = True

    def _on_data_update(self, generation: int, update: FeedItemUpdate) -> None:
        if not self._is_current(generation):
            return
        self._state.apply_tank_update(
            update.item_name,
            update.get(const.VALUE_FIELD),
            update.get(const.TIMESTAMP_FIELD),
        )

    def _on_control_update(self, generation: int, update: FeedItemUpdate) -> None:
        if not self._is_current(generation):
            return
        self._state.connection.on_signal_update(update.get(const.STATUS_CLASS_FIELD))
