"""ISS position reading model."""

from __future__ import annotations

import time
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from upatelemetry import _constants as const
from upatelemetry.ingestion.normalize import safe_float, safe_int


class PositionReading(BaseModel):
    """Normalized ISS ground position.

    Parameters
    ----------
    latitude, longitude : float
        Degrees.
    altitude : float
        Kilometres above the surface.
    velocity : float
        Ground speed in km/h.
    timestamp : int
        Epoch seconds of the fix.
    source : str
        Host name of the upstream that produced the fix.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    latitude: float
    longitude: float
    altitude: float = const.ISS_MEAN_ALTITUDE_KM
    velocity: float = const.ISS_MEAN_VELOCITY_KMH
    timestamp: int = Field(default_factory=lambda: int(time.time()))
    source: str = ""

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int:
        parsed = safe_int(value)
        return parsed if parsed is not None else int(time.time())


class OpenNotifyPosition(BaseModel):
    """``iss-now.json`` payload: ``{"iss_position": {...}, "timestamp": ...}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    latitude: float
    longitude: float
    timestamp: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_position(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        nested = values.get("iss_position")
        if not isinstance(nested, dict):
            raise ValueError("payload has no iss_position object")
        return {**nested, "timestamp": values.get("timestamp")}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        return safe_int(value)


class WhereTheIssPosition(BaseModel):
    """``wheretheiss.at`` satellite payload; missing numbers fall back to mean values."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = const.ISS_MEAN_ALTITUDE_KM
    velocity: float = const.ISS_MEAN_VELOCITY_KMH
    timestamp: int | None = Field(default=None, validation_alias=AliasChoices("timestamp"))

    @model_validator(mode="before")
    @classmethod
    def _drop_unparseable(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            raise ValueError("payload is not an object")
        cleaned = dict(values)
        for key in ("latitude", "longitude", "altitude", "velocity"):
            if key in cleaned and safe_float(cleaned[key]) is None:
                cleaned.pop(key)
        return cleaned

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        return safe_int(value)
