"""Telemetry state models: tank readings, badge, log entries, link state."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from upatelemetry import _constants as const


class LogSeverity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"


class LogEntry(BaseModel):
    """One immutable event log line."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    severity: LogSeverity
    message: str


class ConnectionState(StrEnum):
    """Push feed link quality as shown in the header bar."""

    OK = "ok"
    WARN = "warn"
    DANGER = "danger"

    @property
    def label(self) -> str:
        return {
            ConnectionState.OK: "LIVE",
            ConnectionState.WARN: "RECONNECTING",
            ConnectionState.DANGER: "OFFLINE",
        }[self]


class Classification(StrEnum):
    NOMINAL = "nominal"
    CAUTION = "caution"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return {
            Classification.NOMINAL: 0,
            Classification.CAUTION: 1,
            Classification.CRITICAL: 2,
        }[self]


def classify(percent: float) -> Classification:
    """Threshold classification, inclusive lower bounds evaluated high to low."""
    if percent >= const.CRITICAL_THRESHOLD:
        return Classification.CRITICAL
    if percent >= const.CAUTION_THRESHOLD:
        return Classification.CAUTION
    return Classification.NOMINAL


class TankState(BaseModel):
    """Derived display state of one tank.

    ``classification`` and ``status_text`` are computed from ``percent`` and
    cannot be set on their own.  ``percent`` is stored unclamped; only
    ``gauge_percent`` is clamped for rendering.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    display_id: str
    external_id: str
    label: str
    full_name: str
    percent: float = 0.0
    timestamp: str = ""
    standby: bool = True

    @field_validator("percent", mode="before")
    @classmethod
    def _coerce_percent(cls, value: object) -> object:
        return 0.0 if value is None else value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def classification(self) -> Classification:
        return classify(self.percent)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_text(self) -> str:
        if self.standby:
            return "STANDBY"
        return self.classification.name

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_value(self) -> str:
        if self.standby:
            return "——"
        return f"{self.percent:.1f}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gauge_percent(self) -> float:
        return max(0.0, min(self.percent, 100.0))


class BadgeClass(StrEnum):
    NONE = "none"
    WARN = "warn"
    DANGER = "danger"


class Badge(BaseModel):
    """System-wide worst-of status badge."""

    model_config = ConfigDict(frozen=True)

    text: str
    classification: BadgeClass


BADGE_STANDBY = Badge(text="STANDBY", classification=BadgeClass.NONE)
BADGE_NOMINAL = Badge(text="NOMINAL", classification=BadgeClass.NONE)
BADGE_CAUTION = Badge(text="CAUTION", classification=BadgeClass.WARN)
BADGE_ALERT = Badge(text="ALERT", classification=BadgeClass.DANGER)
