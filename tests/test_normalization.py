from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from upatelemetry.ingestion.normalize import (
    clean_excerpt,
    format_feed_timestamp,
    format_news_date,
    ground_elapsed_time,
    safe_float,
    safe_int,
    utc_clock,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1.5", 1.5), (" 2 ", 2.0), (3, 3.0), ("", None), ("  ", None), (None, None), ("x", None), ("nan", None)],
)
def test_safe_float(raw: object, expected: float | None) -> None:
    assert safe_float(raw) == expected


def test_safe_float_keeps_infinity() -> None:
    value = safe_float("inf")
    assert value is not None and math.isinf(value)


def test_safe_int_truncates_and_rejects_infinity() -> None:
    assert safe_int("1770128709.9") == 1770128709
    assert safe_int("inf") is None
    assert safe_int(None) is None


def test_utc_clock_converts_to_utc() -> None:
    moment = datetime(2026, 2, 3, 15, 5, 9, tzinfo=timezone(timedelta(hours=1)))
    assert utc_clock(moment) == "14:05:09"


def test_feed_timestamp_epoch_seconds() -> None:
    assert format_feed_timestamp("1770127509") == "Last update: 14:05:09 UTC"
    assert format_feed_timestamp("1770127509.75") == "Last update: 14:05:09 UTC"


@pytest.mark.parametrize("raw", ["2026-02-03 14:05", "GMT 034/14:05:09", "1e400", "-1e20"])
def test_feed_timestamp_non_epoch_passes_through(raw: str) -> None:
    assert format_feed_timestamp(raw) == raw


@pytest.mark.parametrize("raw", [None, ""])
def test_feed_timestamp_missing_is_blank(raw: str | None) -> None:
    assert format_feed_timestamp(raw) == ""


def test_clean_excerpt() -> None:
    assert clean_excerpt("<p>A &amp; B</p>\n\n  <i>c</i>", 180) == "A & B c"
    assert clean_excerpt("abcdef", 3) == "abc…"
    assert clean_excerpt("abc", 3) == "abc"
    assert clean_excerpt(None, 10) == ""


def test_format_news_date() -> None:
    assert format_news_date(datetime(2026, 2, 3, 14, 5, tzinfo=UTC)) == "Feb 3, 2026 · 14:05 UTC"


def test_ground_elapsed_time_counts_days_from_mission_epoch() -> None:
    assert ground_elapsed_time(datetime(2000, 11, 3, 1, 2, 3, tzinfo=UTC)) == "1/01:02:03"
