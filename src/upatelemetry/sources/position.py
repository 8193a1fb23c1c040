"""ISS position source.

Primary: Open Notify ``iss-now.json`` (lat/lon only, mean altitude and
velocity are filled in).  Fallback: ``wheretheiss.at``, tried only when the
primary fails.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from pydantic import ValidationError

from upatelemetry import _constants as const
from upatelemetry._transport import Transport
from upatelemetry.exceptions import UpaSourceError, UpaTransportError
from upatelemetry.models.position import OpenNotifyPosition, PositionReading, WhereTheIssPosition
from upatelemetry.sources.result import SourceFailure, SourceOk

_logger = logging.getLogger(__name__)


def _host(url: str) -> str:
    return urlsplit(url).netloc or url


def parse_open_notify(payload: Any, *, source: str) -> PositionReading:
    try:
        parsed = OpenNotifyPosition.model_validate(payload)
        return PositionReading(
            latitude=parsed.latitude,
            longitude=parsed.longitude,
            timestamp=parsed.timestamp,
            source=source,
        )
    except ValidationError as exc:
        raise UpaSourceError(f"unexpected position payload from {source}", source=source) from exc


def parse_where_the_iss(payload: Any, *, source: str) -> PositionReading:
    try:
        parsed = WhereTheIssPosition.model_validate(payload)
        return PositionReading(
            latitude=parsed.latitude,
            longitude=parsed.longitude,
            altitude=parsed.altitude,
            velocity=parsed.velocity,
            timestamp=parsed.timestamp,
            source=f"{source} (fallback)",
        )
    except ValidationError as exc:
        raise UpaSourceError(f"unexpected position payload from {source}", source=source) from exc


class PositionSource:
    """Fetches the current ISS ground position with one fallback."""

    name = "position"

    def __init__(
        self,
        transport: Transport,
        *,
        primary_url: str = const.POSITION_PRIMARY_URL,
        fallback_url: str = const.POSITION_FALLBACK_URL,
    ) -> None:
        self._transport = transport
        self._primary_url = primary_url
        self._fallback_url = fallback_url

    async def fetch(self) -> SourceOk[PositionReading] | SourceFailure:
        primary_host = _host(self._primary_url)
        try:
            payload = await self._transport.get_json(self._primary_url)
            reading = parse_open_notify(payload, source=primary_host)
            return SourceOk(reading, source=reading.source)
        except (UpaTransportError, UpaSourceError) as exc:
            primary_error = str(exc)
            _logger.debug("Primary position source failed: %s", primary_error)

        fallback_host = _host(self._fallback_url)
        try:
            payload = await self._transport.get_json(self._fallback_url)
            reading = parse_where_the_iss(payload, source=fallback_host)
            return SourceOk(reading, source=reading.source)
        except (UpaTransportError, UpaSourceError) as exc:
            _logger.debug("Fallback position source failed: %s", exc)
            return SourceFailure(
                f"Failed to fetch ISS position from both sources ({primary_error}; {exc})",
                source=self.name,
            )
