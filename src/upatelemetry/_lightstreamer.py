"""Lightstreamer push feed client (ISS Live ``ISSLIVE`` adapter).

``lightstreamer-client-lib`` invokes listeners on its own worker threads.
Every event is handed to the asyncio loop with ``call_soon_threadsafe`` so
the dashboard state is only ever touched from the loop thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from lightstreamer.client import ClientListener, LightstreamerClient, Subscription, SubscriptionListener

from upatelemetry.ingestion.feed import FeedItemUpdate, SubscriptionSpec

_logger = logging.getLogger(__name__)


class _StatusListener(ClientListener):
    def __init__(self, on_status: Callable[[str], None]) -> None:
        self._on_status = on_status

    def onStatusChange(self, status: str) -> None:  # noqa: N802
        self._on_status(status)

    def onServerError(self, errorCode: int, errorMessage: str) -> None:  # noqa: N802, N803
        _logger.warning("Lightstreamer server error %s: %s", errorCode, errorMessage)


class _ItemListener(SubscriptionListener):
    def __init__(self, fields: tuple[str, ...], on_update: Callable[[FeedItemUpdate], None]) -> None:
        self._fields = fields
        self._on_update = on_update

    def onItemUpdate(self, update: Any) -> None:  # noqa: N802
        try:
            values = {name: update.getValue(name) for name in self._fields}
            self._on_update(FeedItemUpdate(item_name=update.getItemName(), values=values))
        except Exception:
            _logger.debug("Lightstreamer item update parse failure", exc_info=True)

    def onSubscriptionError(self, code: int, message: str) -> None:  # noqa: N802
        _logger.warning("Lightstreamer subscription error %s: %s", code, message)


class LightstreamerFeedClient:
    """:class:`~upatelemetry.ingestion.feed.PushFeedClient` over ``LightstreamerClient``."""

    def __init__(
        self,
        *,
        server: str,
        adapter: str,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._loop = loop
        self._client = LightstreamerClient(server, adapter)
        self._status_handler: Callable[[str], None] | None = None
        self._client.addListener(_StatusListener(self._from_thread(self._dispatch_status)))

    def _from_thread(self, target: Callable[[Any], None]) -> Callable[[Any], None]:
        def schedule(arg: Any) -> None:
            try:
                self._loop.call_soon_threadsafe(target, arg)
            except RuntimeError:
                _logger.debug("Event loop closed; dropping Lightstreamer event")

        return schedule

    def _dispatch_status(self, status: str) -> None:
        _logger.debug("Lightstreamer status %s", status)
        handler = self._status_handler
        if handler is not None:
            handler(status)

    def set_status_handler(self, handler: Callable[[str], None] | None) -> None:
        self._status_handler = handler

    def connect(self) -> None:
        self._client.connect()

    def disconnect(self) -> None:
        self._client.disconnect()

    def subscribe(self, spec: SubscriptionSpec, on_item_update: Callable[[FeedItemUpdate], None]) -> Subscription:
        subscription = Subscription(mode=spec.mode, items=list(spec.items), fields=list(spec.fields))
        if spec.snapshot:
            subscription.setRequestedSnapshot("yes")
        subscription.addListener(_ItemListener(spec.fields, self._from_thread(on_item_update)))
        self._client.subscribe(subscription)
        _logger.debug("Lightstreamer subscribe mode=%s items=%s fields=%s", spec.mode, spec.items, spec.fields)
        return subscription

    def unsubscribe(self, handle: Subscription) -> None:
        self._client.unsubscribe(handle)
