"""Crew manifest source (Open Notify ``astros.json``)."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from upatelemetry import _constants as const
from upatelemetry._transport import Transport
from upatelemetry.exceptions import UpaSourceError, UpaTransportError
from upatelemetry.models.crew import AstrosPayload, CrewManifest
from upatelemetry.sources.result import SourceFailure, SourceOk


def parse_astros(payload: Any) -> CrewManifest:
    """Filter the people-in-space list down to ISS crew."""
    if not isinstance(payload, dict):
        raise UpaSourceError("crew payload is not an object", source="crew")
    try:
        return AstrosPayload.model_validate(payload).to_manifest()
    except ValidationError as exc:
        raise UpaSourceError("unexpected crew payload", source="crew") from exc


class CrewSource:
    name = "crew"

    def __init__(self, transport: Transport, *, url: str = const.CREW_URL) -> None:
        self._transport = transport
        self._url = url

    async def fetch(self) -> SourceOk[CrewManifest] | SourceFailure:
        try:
            payload = await self._transport.get_json(self._url)
            return SourceOk(parse_astros(payload), source=self._url)
        except (UpaTransportError, UpaSourceError) as exc:
            return SourceFailure(str(exc), source=self.name)
