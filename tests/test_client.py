from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from upatelemetry.client import DashboardClient
from upatelemetry.config import DashboardConfig
from upatelemetry.exceptions import UpaError
from upatelemetry.ingestion.feed import FeedItemUpdate, FeedLifecycle, SubscriptionSpec

_RSS = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>Station</title>
<item><title>Spacewalk prep</title><link>https://blogs.nasa.gov/spacestation/1</link>
<description>Crew prepared tools.</description></item>
</channel></rss>
"""


class _FakePushClient:
    def __init__(self) -> None:
        self.status_handler: Callable[[str], None] | None = None
        self.callbacks: list[Callable[[FeedItemUpdate], None]] = []
        self.connected = False

    def set_status_handler(self, handler: Callable[[str], None] | None) -> None:
        self.status_handler = handler

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def subscribe(self, spec: SubscriptionSpec, on_item_update: Callable[[FeedItemUpdate], None]) -> int:
        self.callbacks.append(on_item_update)
        return len(self.callbacks)

    def unsubscribe(self, handle: Any) -> None:
        pass


def _upstream_app() -> web.Application:
    async def iss_now(request: web.Request) -> web.Response:
        return web.json_response({"iss_position": {"latitude": "51.5", "longitude": "-0.1"}, "timestamp": 1770128709})

    async def astros(request: web.Request) -> web.Response:
        return web.json_response({"number": 3, "people": [{"name": "A", "craft": "ISS"}, {"name": "B", "craft": "X"}]})

    async def feed(request: web.Request) -> web.Response:
        return web.Response(text=_RSS, content_type="application/rss+xml")

    async def stats(request: web.Request) -> web.Response:
        return web.json_response({"stats": {"cycles": "1,300"}})

    app = web.Application()
    app.router.add_get("/iss-now.json", iss_now)
    app.router.add_get("/astros.json", astros)
    app.router.add_get("/feed", feed)
    app.router.add_get("/stats.json", stats)
    return app


@pytest_asyncio.fixture
async def upstream() -> AsyncIterator[test_utils.TestServer]:
    server = test_utils.TestServer(_upstream_app())
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def _config(server: test_utils.TestServer, **overrides: Any) -> DashboardConfig:
    params: dict[str, Any] = {
        "position_primary_url": str(server.make_url("/iss-now.json")),
        "position_fallback_url": str(server.make_url("/missing")),
        "crew_url": str(server.make_url("/astros.json")),
        "news_url": str(server.make_url("/feed")),
        "stats_url": str(server.make_url("/stats.json")),
        "position_interval": 60.0,
        "crew_interval": 60.0,
        "news_interval": 60.0,
    }
    params.update(overrides)
    return DashboardConfig(**params)


async def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_start_wires_feed_and_pollers(upstream: test_utils.TestServer) -> None:
    push = _FakePushClient()
    config = _config(upstream)

    async with DashboardClient(config, feed_client_factory=lambda cfg, loop: push) as client:
        await client.start()
        state = client.state

        assert push.connected
        assert state.feed_source == "https://push.lightstreamer.com / ISSLIVE"
        assert client.feed is not None
        assert client.feed.lifecycle == FeedLifecycle.CONNECTING
        assert [poller.name for poller in client.pollers] == ["position", "crew", "news", "stats"]

        push.callbacks[0](FeedItemUpdate(item_name="NODE3000005", values={"Value": "92", "TimeStamp": "1770128709"}))
        assert state.badge.text == "ALERT"

        await _wait_for(
            lambda: state.position is not None and state.crew is not None and state.news is not None
        )
        await _wait_for(lambda: state.stats["cycles"] == "1,300")

        assert state.position is not None
        assert state.position.latitude == 51.5
        assert state.crew is not None
        assert state.crew.iss_crew_count == 1
        assert state.news is not None
        assert state.news.articles[0].title == "Spacewalk prep"

    assert not push.connected
    assert push.status_handler is None
    assert client.feed is None
    assert client.pollers == ()


@pytest.mark.asyncio
async def test_feed_disabled_runs_pollers_only(upstream: test_utils.TestServer) -> None:
    def _no_feed(cfg: DashboardConfig, loop: asyncio.AbstractEventLoop) -> _FakePushClient:
        raise AssertionError("feed client must not be created")

    config = _config(upstream, feed_enabled=False, stats_url=None)
    async with DashboardClient(config, feed_client_factory=_no_feed) as client:
        await client.start()
        assert client.feed is None
        assert client.state.feed_source == "——"
        assert [poller.name for poller in client.pollers] == ["position", "crew", "news"]


@pytest.mark.asyncio
async def test_stop_is_idempotent(upstream: test_utils.TestServer) -> None:
    push = _FakePushClient()
    async with DashboardClient(_config(upstream), feed_client_factory=lambda cfg, loop: push) as client:
        await client.start()
        await client.stop()
        await client.stop()
        assert not push.connected


@pytest.mark.asyncio
async def test_external_session_is_not_closed(upstream: test_utils.TestServer) -> None:
    async with aiohttp.ClientSession() as session:
        config = _config(upstream, feed_enabled=False)
        async with DashboardClient(config, session=session) as client:
            assert client.config is config
        assert not session.closed


@pytest.mark.asyncio
async def test_start_outside_context_raises() -> None:
    client = DashboardClient(DashboardConfig(feed_enabled=False))
    with pytest.raises(UpaError):
        await client.start()
