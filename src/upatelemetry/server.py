"""JSON API for the dashboard front end.

``/api/telemetry`` and ``/api/log`` read the shared :class:`DashboardState`;
``/api/position``, ``/api/crew`` and ``/api/news`` proxy a live fetch
through the matching source.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Protocol

from aiohttp import web

from upatelemetry.config import DashboardConfig
from upatelemetry.sources.result import SourceFailure, SourceOk
from upatelemetry.state.store import DashboardState

_logger = logging.getLogger(__name__)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class Fetcher(Protocol):
    async def fetch(self) -> SourceOk[Any] | SourceFailure: ...


STATE_KEY = web.AppKey("state", DashboardState)
CONFIG_KEY = web.AppKey("config", DashboardConfig)
SOURCES_KEY = web.AppKey("sources", dict)

_COMMON_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cache-Control": "no-cache",
}


def _generated_at(now: datetime | None = None) -> str:
    return (now or datetime.now(UTC)).strftime("%Y-%m-%dT%H:%M:%SZ")


@web.middleware
async def _common_headers(request: web.Request, handler: _Handler) -> web.StreamResponse:
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(_COMMON_HEADERS)
        raise
    response.headers.update(_COMMON_HEADERS)
    return response


async def handle_telemetry(request: web.Request) -> web.Response:
    return web.json_response(request.app[STATE_KEY].snapshot())


async def handle_log(request: web.Request) -> web.Response:
    entries = [entry.model_dump(mode="json") for entry in request.app[STATE_KEY].log.snapshot()]
    return web.json_response({"entries": entries})


async def handle_config(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    state = request.app[STATE_KEY]
    feed = config.feed
    return web.json_response(
        {
            "lightstreamer": {
                "server": feed.server,
                "adapter": feed.adapter,
                "items": {
                    item.external_id: {"id": item.display_id, "label": item.label, "fullName": item.full_name}
                    for item in feed.items
                },
                "signal_item": feed.signal_item,
                "fields": list(feed.data_fields),
                "signal_fields": list(feed.signal_fields),
            },
            "stats": dict(state.stats),
            "generated_at": _generated_at(),
        }
    )


async def _proxy(request: web.Request, name: str, shape: Callable[[Any], dict[str, Any]]) -> web.Response:
    source: Fetcher = request.app[SOURCES_KEY][name]
    result = await source.fetch()
    if isinstance(result, SourceFailure):
        _logger.info("%s proxy failed: %s", name, result.reason)
        return web.json_response({"success": False, "error": result.reason}, status=502)
    return web.json_response({"success": True, **shape(result.value), "source": result.source})


async def handle_position(request: web.Request) -> web.Response:
    return await _proxy(request, "position", lambda reading: reading.model_dump(mode="json", exclude={"source"}))


async def handle_crew(request: web.Request) -> web.Response:
    return await _proxy(request, "crew", lambda manifest: manifest.model_dump(mode="json"))


async def handle_news(request: web.Request) -> web.Response:
    def shape(digest: Any) -> dict[str, Any]:
        return {
            "count": digest.count,
            "articles": digest.model_dump(mode="json")["articles"],
            "crawled_at": _generated_at(),
        }

    return await _proxy(request, "news", shape)


def create_app(
    state: DashboardState,
    config: DashboardConfig,
    *,
    position: Fetcher,
    crew: Fetcher,
    news: Fetcher,
) -> web.Application:
    app = web.Application(middlewares=[_common_headers])
    app[STATE_KEY] = state
    app[CONFIG_KEY] = config
    app[SOURCES_KEY] = {"position": position, "crew": crew, "news": news}
    app.router.add_get("/api/telemetry", handle_telemetry)
    app.router.add_get("/api/log", handle_log)
    app.router.add_get("/api/config", handle_config)
    app.router.add_get("/api/position", handle_position)
    app.router.add_get("/api/crew", handle_crew)
    app.router.add_get("/api/news", handle_news)
    return app
