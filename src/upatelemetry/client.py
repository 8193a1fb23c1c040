"""High-level async dashboard client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from upatelemetry._transport import HttpTransport
from upatelemetry.config import DashboardConfig
from upatelemetry.exceptions import UpaError
from upatelemetry.ingestion.feed import FeedSubscriptionManager, PushFeedClient
from upatelemetry.ingestion.polling import PeriodicPoller
from upatelemetry.sources import CrewSource, NewsSource, PositionSource, StatsSource
from upatelemetry.state.log import EventLog
from upatelemetry.state.store import DashboardState

_logger = logging.getLogger(__name__)

FeedClientFactory = Callable[[DashboardConfig, asyncio.AbstractEventLoop], PushFeedClient]


def _lightstreamer_factory(config: DashboardConfig, loop: asyncio.AbstractEventLoop) -> PushFeedClient:
    # Imported lazily so offline use never loads the Lightstreamer stack.
    from upatelemetry._lightstreamer import LightstreamerFeedClient

    return LightstreamerFeedClient(server=config.feed.server, adapter=config.feed.adapter, loop=loop)


class DashboardClient:
    """Runs the push feed and the side-panel pollers against one :class:`DashboardState`.

    Usage::

        async with DashboardClient(DashboardConfig.from_env()) as client:
            await client.start()
            print(client.state.snapshot())
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        feed_client_factory: FeedClientFactory | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._feed_client_factory = feed_client_factory or _lightstreamer_factory
        self._transport: HttpTransport | None = None
        self._feed: FeedSubscriptionManager | None = None
        self._pollers: list[PeriodicPoller] = []
        self.state = DashboardState(
            config.feed,
            log=EventLog(capacity=config.log_capacity),
            default_stats=config.stats,
        )

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def feed(self) -> FeedSubscriptionManager | None:
        return self._feed

    @property
    def pollers(self) -> tuple[PeriodicPoller, ...]:
        return tuple(self._pollers)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DashboardClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise UpaError("Client not initialized. Use 'async with DashboardClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def position_source(self) -> PositionSource:
        return PositionSource(
            self._require_transport(),
            primary_url=self._config.position_primary_url,
            fallback_url=self._config.position_fallback_url,
        )

    def crew_source(self) -> CrewSource:
        return CrewSource(self._require_transport(), url=self._config.crew_url)

    def news_source(self) -> NewsSource:
        return NewsSource(
            self._require_transport(),
            url=self._config.news_url,
            max_items=self._config.news_max_items,
            excerpt_chars=self._config.news_excerpt_chars,
        )

    def stats_source(self) -> StatsSource | None:
        if not self._config.stats_url:
            return None
        return StatsSource(self._require_transport(), url=self._config.stats_url)

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Open the push feed (if enabled) and start every poller."""
        self._require_transport()
        if self._feed is not None or self._pollers:
            return

        config = self._config
        if config.feed_enabled:
            self.state.feed_source = config.feed.source_label
            feed_client = self._feed_client_factory(config, asyncio.get_running_loop())
            self._feed = FeedSubscriptionManager(client=feed_client, state=self.state)
            self._feed.start(
                [item.external_id for item in config.feed.items],
                config.feed.data_fields,
                config.feed.signal_item,
                config.feed.signal_fields,
            )

        timeout = config.request_timeout
        state = self.state
        self._pollers = [
            PeriodicPoller(
                "position",
                fetch=self.position_source().fetch,
                apply=state.apply_position,
                interval=config.position_interval,
                timeout=timeout,
            ),
            PeriodicPoller(
                "crew",
                fetch=self.crew_source().fetch,
                apply=state.apply_crew,
                interval=config.crew_interval,
                timeout=timeout,
            ),
            PeriodicPoller(
                "news",
                fetch=self.news_source().fetch,
                apply=state.apply_news,
                interval=config.news_interval,
                timeout=timeout,
            ),
        ]
        stats = self.stats_source()
        if stats is not None:
            self._pollers.append(
                PeriodicPoller("stats", fetch=stats.fetch, apply=state.apply_stats, interval=0, timeout=timeout)
            )
        for poller in self._pollers:
            poller.start()
        _logger.debug("Dashboard client started (feed=%s, pollers=%d)", config.feed_enabled, len(self._pollers))

    async def stop(self) -> None:
        """Stop the feed and all pollers; idempotent."""
        feed, self._feed = self._feed, None
        if feed is not None:
            try:
                feed.stop()
            except Exception:
                _logger.debug("Feed stop failed", exc_info=True)

        pollers, self._pollers = self._pollers, []
        for poller in pollers:
            await poller.stop()
