from __future__ import annotations

import pytest
from pydantic import ValidationError

from upatelemetry.config import TankItem
from upatelemetry.models.telemetry import (
    BADGE_ALERT,
    BADGE_CAUTION,
    BADGE_NOMINAL,
    BADGE_STANDBY,
    Classification,
    LogSeverity,
    TankState,
    classify,
)
from upatelemetry.state.badge import compute_badge
from upatelemetry.state.log import EventLog
from upatelemetry.state.tanks import ItemRegistry, TankStateReducer, parse_percent

WSTA = TankItem(external_id="NODE3000005", display_id="wsta", label="WSTA", full_name="Waste Storage Tank Assembly")
EDV = TankItem(external_id="NODE3000002", display_id="edv", label="EDV-U", full_name="External Distillation Void")


def _reducer(*items: TankItem) -> tuple[TankStateReducer, EventLog]:
    log = EventLog()
    return TankStateReducer(ItemRegistry(items or (WSTA,)), log), log


# ------------------------------------------------------------------
# Classification
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("percent", "expected"),
    [
        (-5.0, Classification.NOMINAL),
        (0.0, Classification.NOMINAL),
        (74.99, Classification.NOMINAL),
        (75.0, Classification.CAUTION),
        (89.99, Classification.CAUTION),
        (90.0, Classification.CRITICAL),
        (120.0, Classification.CRITICAL),
    ],
)
def test_classification_boundaries(percent: float, expected: Classification) -> None:
    assert classify(percent) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("42.5", 42.5), (" 7 ", 7.0), ("abc", 0.0), ("", 0.0), (None, 0.0), ("nan", 0.0), ("inf", 0.0), ("12abc", 0.0)],
)
def test_parse_percent(raw: str | None, expected: float) -> None:
    assert parse_percent(raw) == expected


# ------------------------------------------------------------------
# Reducer
# ------------------------------------------------------------------


def test_initial_state_is_standby() -> None:
    reducer, _ = _reducer()
    state = reducer.get("wsta")

    assert state is not None
    assert state.standby is True
    assert state.status_text == "STANDBY"
    assert state.display_value == "——"


def test_update_produces_display_state() -> None:
    reducer, log = _reducer()

    state = reducer.apply_update("NODE3000005", "42.5", "1770128709")

    assert state is not None
    assert state.percent == 42.5
    assert state.display_value == "42.5"
    assert state.classification == Classification.NOMINAL
    assert state.status_text == "NOMINAL"
    assert state.timestamp.startswith("Last update: ")
    assert state.timestamp.endswith(" UTC")
    assert len(log) == 0


def test_non_numeric_timestamp_passes_through() -> None:
    reducer, _ = _reducer()
    state = reducer.apply_update("NODE3000005", "10", "2026-02-03 14:05")
    assert state is not None
    assert state.timestamp == "2026-02-03 14:05"


def test_missing_timestamp_is_blank() -> None:
    reducer, _ = _reducer()
    state = reducer.apply_update("NODE3000005", "10")
    assert state is not None
    assert state.timestamp == ""


def test_garbage_value_reads_as_zero_without_raising() -> None:
    reducer, _ = _reducer()
    state = reducer.apply_update("NODE3000005", "n/a")
    assert state is not None
    assert state.percent == 0.0
    assert state.status_text == "NOMINAL"


def test_gauge_is_clamped_but_percent_is_not() -> None:
    reducer, _ = _reducer()
    over = reducer.apply_update("NODE3000005", "104.2")
    assert over is not None
    assert over.percent == 104.2
    assert over.gauge_percent == 100.0

    under = reducer.apply_update("NODE3000005", "-3")
    assert under is not None
    assert under.gauge_percent == 0.0


def test_unknown_item_is_ignored() -> None:
    reducer, log = _reducer()
    before = reducer.states

    assert reducer.apply_update("NODE9999999", "95") is None
    assert reducer.states == before
    assert len(log) == 0


def test_caution_and_critical_are_logged() -> None:
    reducer, log = _reducer()

    reducer.apply_update("NODE3000005", "80")
    reducer.apply_update("NODE3000005", "95")

    critical, caution = log.snapshot()
    assert caution.message == "WSTA at 80.0% — CAUTION"
    assert caution.severity == LogSeverity.WARNING
    assert critical.message == "WSTA at 95.0% — CRITICAL"
    assert critical.severity == LogSeverity.ALERT


def test_repeated_critical_updates_log_every_time() -> None:
    reducer, log = _reducer()
    reducer.apply_update("NODE3000005", "95")
    reducer.apply_update("NODE3000005", "96")
    assert len(log) == 2


def test_states_are_replaced_not_mutated() -> None:
    reducer, _ = _reducer()
    first = reducer.apply_update("NODE3000005", "10")
    second = reducer.apply_update("NODE3000005", "20")

    assert first is not None and second is not None
    assert first.percent == 10.0
    assert reducer.get("wsta") is second


def test_tank_state_rejects_assignment_and_unknown_fields() -> None:
    state = TankState(display_id="wsta", external_id="X", label="WSTA", full_name="")
    with pytest.raises(ValidationError):
        state.percent = 50.0  # type: ignore[misc]
    with pytest.raises(ValidationError):
        TankState(display_id="wsta", external_id="X", label="WSTA", full_name="", classification="critical")


def test_registry_resolves_by_external_id() -> None:
    registry = ItemRegistry((WSTA, EDV))
    assert registry.resolve("NODE3000002") is EDV
    assert registry.resolve("nope") is None
    assert registry.external_ids == ("NODE3000005", "NODE3000002")
    assert len(registry) == 2


# ------------------------------------------------------------------
# Badge
# ------------------------------------------------------------------


def test_badge_without_classifications_is_standby() -> None:
    assert compute_badge([]) == BADGE_STANDBY


@pytest.mark.parametrize(
    ("classifications", "badge"),
    [
        ([Classification.NOMINAL], BADGE_NOMINAL),
        ([Classification.NOMINAL, Classification.CAUTION], BADGE_CAUTION),
        ([Classification.CAUTION, Classification.CRITICAL, Classification.NOMINAL], BADGE_ALERT),
    ],
)
def test_badge_is_worst_of(classifications: list[Classification], badge: object) -> None:
    assert compute_badge(classifications) == badge


def test_badge_classes() -> None:
    assert BADGE_ALERT.text == "ALERT"
    assert BADGE_ALERT.classification == "danger"
    assert BADGE_CAUTION.classification == "warn"
    assert BADGE_NOMINAL.classification == "none"
