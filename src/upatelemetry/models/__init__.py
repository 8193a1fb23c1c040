"""Data models for telemetry state and upstream responses."""

from upatelemetry.models.crew import AstrosPayload, CrewManifest, CrewMember
from upatelemetry.models.news import NewsArticle, NewsDigest
from upatelemetry.models.position import OpenNotifyPosition, PositionReading, WhereTheIssPosition
from upatelemetry.models.telemetry import (
    BADGE_ALERT,
    BADGE_CAUTION,
    BADGE_NOMINAL,
    BADGE_STANDBY,
    Badge,
    BadgeClass,
    Classification,
    ConnectionState,
    LogEntry,
    LogSeverity,
    TankState,
    classify,
)

__all__ = [
    "AstrosPayload",
    "BADGE_ALERT",
    "BADGE_CAUTION",
    "BADGE_NOMINAL",
    "BADGE_STANDBY",
    "Badge",
    "BadgeClass",
    "Classification",
    "ConnectionState",
    "CrewManifest",
    "CrewMember",
    "LogEntry",
    "LogSeverity",
    "NewsArticle",
    "NewsDigest",
    "OpenNotifyPosition",
    "PositionReading",
    "TankState",
    "WhereTheIssPosition",
    "classify",
]
