"""Tank item registry and per-tank state reducer."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator

from upatelemetry.config import TankItem
from upatelemetry.ingestion.normalize import format_feed_timestamp, safe_float
from upatelemetry.models.telemetry import Classification, LogSeverity, TankState
from upatelemetry.state.log import EventLog

_logger = logging.getLogger(__name__)


class ItemRegistry:
    """Static map from feed item name to the tank it feeds."""

    def __init__(self, items: Iterable[TankItem]) -> None:
        self._items: dict[str, TankItem] = {item.external_id: item for item in items}

    def resolve(self, external_id: str) -> TankItem | None:
        return self._items.get(external_id)

    @property
    def external_ids(self) -> tuple[str, ...]:
        return tuple(self._items)

    def __iter__(self) -> Iterator[TankItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)


def _standby_state(item: TankItem) -> TankState:
    return TankState(
        display_id=item.display_id,
        external_id=item.external_id,
        label=item.label,
        full_name=item.full_name,
    )


def parse_percent(raw_value: str | None) -> float:
    """Feed ``Value`` as a percentage; anything unparseable or non-finite is 0.0.

    Parsing is strict: ``"12abc"`` is 0.0 rather than a prefix parse to 12.0,
    and ``"inf"`` is 0.0 (nominal) rather than an infinite, critical reading.
    """
    value = safe_float(raw_value)
    if value is None or math.isinf(value):
        return 0.0
    return value


class TankStateReducer:
    """Owns the tank table and applies feed updates to it.

    Each update swaps in a new frozen :class:`TankState`, so observers never
    see a half-applied reading.
    """

    def __init__(self, registry: ItemRegistry, log: EventLog) -> None:
        self._registry = registry
        self._log = log
        self._states: dict[str, TankState] = {item.display_id: _standby_state(item) for item in registry}

    @property
    def states(self) -> dict[str, TankState]:
        """Current tank states keyed by display id (a copy)."""
        return dict(self._states)

    def get(self, display_id: str) -> TankState | None:
        return self._states.get(display_id)

    def apply_update(
        self,
        external_id: str,
        raw_value: str | None,
        raw_timestamp: str | None = None,
    ) -> TankState | None:
        """Apply one feed update; returns the new state or ``None`` for untracked items."""
        item = self._registry.resolve(external_id)
        if item is None:
            return None

        percent = parse_percent(raw_value)
        new_state = TankState(
            display_id=item.display_id,
            external_id=item.external_id,
            label=item.label,
            full_name=item.full_name,
            percent=percent,
            timestamp=format_feed_timestamp(raw_timestamp),
            standby=False,
        )
        self._states[item.display_id] = new_state
        _logger.debug("Tank %s <- %r (%.1f%%, %s)", item.display_id, raw_value, percent, new_state.classification)

        if new_state.classification == Classification.CRITICAL:
            self._log.append(f"{item.label} at {percent:.1f}% — CRITICAL", LogSeverity.ALERT)
        elif new_state.classification == Classification.CAUTION:
            self._log.append(f"{item.label} at {percent:.1f}% — CAUTION", LogSeverity.WARNING)
        return new_state
