"""Worst-of system badge.

The badge has no memory: a tank dropping back to nominal clears it on the
very next recompute.
"""

from __future__ import annotations

from collections.abc import Iterable

from upatelemetry.models.telemetry import (
    BADGE_ALERT,
    BADGE_CAUTION,
    BADGE_NOMINAL,
    BADGE_STANDBY,
    Badge,
    Classification,
)


def compute_badge(classifications: Iterable[Classification]) -> Badge:
    worst: Classification | None = None
    for classification in classifications:
        if worst is None or classification.rank > worst.rank:
            worst = classification
    if worst is None:
        return BADGE_STANDBY
    if worst == Classification.CRITICAL:
        return BADGE_ALERT
    if worst == Classification.CAUTION:
        return BADGE_CAUTION
    return BADGE_NOMINAL
