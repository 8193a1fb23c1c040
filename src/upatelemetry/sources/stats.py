"""System summary stats source.

The remote document is ``{"stats": {"total": "...", ...}}``; callers merge
the returned values over their defaults.
"""

from __future__ import annotations

from typing import Any

from upatelemetry._transport import Transport
from upatelemetry.exceptions import UpaSourceError, UpaTransportError
from upatelemetry.sources.result import SourceFailure, SourceOk


def parse_stats(payload: Any) -> dict[str, str]:
    stats = payload.get("stats") if isinstance(payload, dict) else None
    if not isinstance(stats, dict):
        raise UpaSourceError("stats payload has no 'stats' object", source="stats")
    return {str(key): str(value) for key, value in stats.items() if value is not None}


class StatsSource:
    name = "stats"

    def __init__(self, transport: Transport, *, url: str) -> None:
        self._transport = transport
        self._url = url

    async def fetch(self) -> SourceOk[dict[str, str]] | SourceFailure:
        try:
            payload = await self._transport.get_json(self._url)
            return SourceOk(parse_stats(payload), source=self._url)
        except (UpaTransportError, UpaSourceError) as exc:
            return SourceFailure(str(exc), source=self.name)
