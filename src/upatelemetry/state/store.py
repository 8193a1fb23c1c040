"""Owned dashboard state.

This is the single object that event handlers mutate: the tank table, badge,
link status, event log and the last-known-good side panels.  It is passed to
the feed manager and pollers explicitly instead of living in module globals.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from upatelemetry import _constants as const
from upatelemetry.config import FeedConfig
from upatelemetry.ingestion.normalize import ground_elapsed_time, utc_clock
from upatelemetry.models.crew import CrewManifest
from upatelemetry.models.news import NewsDigest
from upatelemetry.models.position import PositionReading
from upatelemetry.models.telemetry import BADGE_STANDBY, Badge, LogSeverity, TankState
from upatelemetry.sources.result import SourceFailure, SourceOk
from upatelemetry.state.badge import compute_badge
from upatelemetry.state.connection import ConnectionStatus
from upatelemetry.state.log import EventLog
from upatelemetry.state.tanks import ItemRegistry, TankStateReducer


class DashboardState:
    """Everything the dashboard renders, mutated one handler at a time."""

    def __init__(
        self,
        feed: FeedConfig,
        *,
        log: EventLog | None = None,
        default_stats: Mapping[str, str] | None = None,
        ground_track_points: int = const.GROUND_TRACK_POINTS,
    ) -> None:
        self.feed = feed
        self.log = log if log is not None else EventLog()
        self.registry = ItemRegistry(feed.items)
        self.connection = ConnectionStatus(self.log)
        self.tanks = TankStateReducer(self.registry, self.log)
        self.badge: Badge = BADGE_STANDBY
        self.feed_source = "——"

        self.position: PositionReading | None = None
        self.ground_track: list[tuple[float, float]] = []
        self._ground_track_points = ground_track_points
        self.crew: CrewManifest | None = None
        self.news: NewsDigest | None = None
        self.stats: dict[str, str] = dict(default_stats if default_stats is not None else const.DEFAULT_STATS)

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def apply_tank_update(
        self,
        external_id: str,
        raw_value: str | None,
        raw_timestamp: str | None = None,
    ) -> TankState | None:
        state = self.tanks.apply_update(external_id, raw_value, raw_timestamp)
        if state is not None:
            self.badge = compute_badge(tank.classification for tank in self.tanks.states.values())
        return state

    # ------------------------------------------------------------------
    # Side panels
    # ------------------------------------------------------------------

    def apply_position(self, result: SourceOk[PositionReading] | SourceFailure) -> None:
        if isinstance(result, SourceFailure):
            self.log.append(f"ISS position fetch failed: {result.reason}", LogSeverity.WARNING)
            return

        reading = result.value
        first_fix = self.position is None
        self.position = reading

        # Start a new segment instead of drawing a line across the date line.
        if self.ground_track and abs(reading.longitude - self.ground_track[-1][1]) > 180:
            self.ground_track.clear()
        self.ground_track.append((reading.latitude, reading.longitude))
        if len(self.ground_track) > self._ground_track_points:
            del self.ground_track[0]

        if first_fix:
            self.log.append(
                f"ISS position acquired — {reading.latitude:.2f}°, {reading.longitude:.2f}°",
                LogSeverity.INFO,
            )

    def apply_crew(self, result: SourceOk[CrewManifest] | SourceFailure) -> None:
        if isinstance(result, SourceFailure):
            self.log.append(f"Crew fetch failed: {result.reason}", LogSeverity.WARNING)
            return
        self.crew = result.value
        self.log.append(f"Crew manifest loaded — {result.value.iss_crew_count} aboard ISS", LogSeverity.INFO)

    def apply_news(self, result: SourceOk[NewsDigest] | SourceFailure) -> None:
        if isinstance(result, SourceFailure):
            self.log.append(f"News crawl failed: {result.reason}", LogSeverity.WARNING)
            return
        self.news = result.value
        self.log.append(f"NASA news crawled — {result.value.count} articles from RSS feed", LogSeverity.INFO)

    def apply_stats(self, result: SourceOk[dict[str, str]] | SourceFailure) -> None:
        if isinstance(result, SourceFailure):
            self.log.append(f"Stats fetch failed: {result.reason}", LogSeverity.WARNING)
            return
        if not result.value:
            return
        self.stats = {**self.stats, **result.value}
        self.log.append("Stats loaded — values updated", LogSeverity.INFO)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self, now: datetime | None = None) -> dict[str, Any]:
        """JSON-ready view of the whole dashboard."""
        moment = now or datetime.now(UTC)
        return {
            "tanks": [self.tanks.states[item.display_id].model_dump(mode="json") for item in self.registry],
            "badge": self.badge.model_dump(mode="json"),
            "connection": {
                "state": self.connection.state.value,
                "label": self.connection.state.label,
                "last_status": self.connection.last_status,
                "signal_locked": self.connection.signal_locked,
            },
            "feed_source": self.feed_source,
            "log": [entry.model_dump(mode="json") for entry in self.log.snapshot()],
            "position": self.position.model_dump(mode="json") if self.position is not None else None,
            "ground_track": [list(point) for point in self.ground_track],
            "crew": self.crew.model_dump(mode="json") if self.crew is not None else None,
            "news": self.news.model_dump(mode="json")["articles"] if self.news is not None else None,
            "stats": dict(self.stats),
            "clock": {
                "utc": utc_clock(moment),
                "ground_elapsed_time": ground_elapsed_time(moment),
            },
        }
