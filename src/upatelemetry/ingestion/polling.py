"""Periodic polling of the REST/RSS collaborators.

Each poller owns one asyncio task.  A fetch that outlives ``timeout`` is
reported as a failure, and nothing is applied once :meth:`stop` has run.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from upatelemetry._constants import REQUEST_TIMEOUT
from upatelemetry.sources.result import SourceFailure

_logger = logging.getLogger(__name__)


class PeriodicPoller:
    """Fetch now, then every ``interval`` seconds (``interval <= 0``: once)."""

    def __init__(
        self,
        name: str,
        *,
        fetch: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], None],
        interval: float,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.name = name
        self._fetch = fetch
        self._apply = apply
        self._interval = interval
        self._timeout = timeout
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._generation += 1
        self._task = asyncio.create_task(self._run(self._generation), name=f"poll-{self.name}")

    async def stop(self) -> None:
        """Cancel the poll loop; safe to call at any time, including twice."""
        self._generation += 1
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def poll_once(self) -> Any:
        """Run one bounded fetch and apply the result unless stopped meanwhile."""
        generation = self._generation
        try:
            result = await asyncio.wait_for(self._fetch(), self._timeout)
        except TimeoutError:
            result = SourceFailure(f"timed out after {self._timeout:g}s", source=self.name)
        except Exception as exc:
            _logger.debug("Poller %s fetch raised", self.name, exc_info=True)
            result = SourceFailure(str(exc) or type(exc).__name__, source=self.name)
        if generation != self._generation:
            _logger.debug("Discarding %s result that arrived after stop", self.name)
            return None
        self._apply(result)
        return result

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            try:
                await self.poll_once()
            except Exception:
                _logger.exception("Poller %s failed", self.name)
            if self._interval <= 0:
                return
            await asyncio.sleep(self._interval)
