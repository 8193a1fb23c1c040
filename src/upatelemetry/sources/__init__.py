"""Upstream REST/RSS collaborators.

Every source exposes ``async fetch()`` returning :class:`SourceOk` or
:class:`SourceFailure`; upstream problems never raise past this boundary.
"""

from upatelemetry.sources.crew import CrewSource
from upatelemetry.sources.news import NewsSource
from upatelemetry.sources.position import PositionSource
from upatelemetry.sources.result import SourceFailure, SourceOk
from upatelemetry.sources.stats import StatsSource

__all__ = [
    "CrewSource",
    "NewsSource",
    "PositionSource",
    "SourceFailure",
    "SourceOk",
    "StatsSource",
]
