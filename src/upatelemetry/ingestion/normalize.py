"""Normalization helpers.

Centralizes defensive parsing of upstream strings.  Nothing in here raises
for malformed input; callers get ``None`` or a documented fallback.
"""

from __future__ import annotations

import html
import math
import re
from datetime import UTC, datetime
from typing import Any

from upatelemetry import _constants as const

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_MISSION_EPOCH = datetime.fromisoformat(const.MISSION_EPOCH_ISO)


def safe_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return int(parsed)


def utc_clock(now: datetime | None = None) -> str:
    """``HH:MM:SS`` in UTC."""
    moment = now or datetime.now(UTC)
    return moment.astimezone(UTC).strftime("%H:%M:%S")


def format_feed_timestamp(raw: str | None) -> str:
    """Render a feed ``TimeStamp`` field for display.

    - missing/empty -> ``""``
    - epoch seconds (fractional allowed) -> ``"Last update: HH:MM:SS UTC"``
    - anything else -> the raw string unchanged
    """
    if raw is None or raw == "":
        return ""
    seconds = safe_float(raw)
    if seconds is None or math.isinf(seconds):
        return raw
    try:
        moment = datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return raw
    return f"Last update: {utc_clock(moment)} UTC"


def clean_excerpt(text: str | None, limit: int) -> str:
    """Strip markup, collapse whitespace and cut to *limit* characters plus ``…``."""
    if not text:
        return ""
    plain = html.unescape(_TAG_RE.sub("", text))
    plain = _WS_RE.sub(" ", plain).strip()
    if len(plain) > limit:
        return plain[:limit] + "…"
    return plain


def format_news_date(moment: datetime) -> str:
    """``Feb 3, 2026 · 14:05 UTC``."""
    moment = moment.astimezone(UTC)
    return f"{moment:%b} {moment.day}, {moment.year} · {moment:%H:%M} UTC"


def ground_elapsed_time(now: datetime | None = None) -> str:
    """Mission clock ``DDDD/HH:MM:SS`` counted from the mission epoch."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    days = (moment - _MISSION_EPOCH).days
    return f"{days}/{utc_clock(moment)}"
