from __future__ import annotations

import asyncio
from typing import Any

import pytest

from upatelemetry.config import FeedConfig
from upatelemetry.ingestion.polling import PeriodicPoller
from upatelemetry.models.telemetry import LogSeverity
from upatelemetry.sources.result import SourceFailure, SourceOk
from upatelemetry.state.store import DashboardState


class _Recorder:
    def __init__(self) -> None:
        self.applied: list[Any] = []

    def __call__(self, result: Any) -> None:
        self.applied.append(result)


@pytest.mark.asyncio
async def test_poll_once_applies_result() -> None:
    recorder = _Recorder()

    async def fetch() -> SourceOk[int]:
        return SourceOk(42)

    poller = PeriodicPoller("answer", fetch=fetch, apply=recorder, interval=60)
    result = await poller.poll_once()

    assert result == SourceOk(42)
    assert recorder.applied == [SourceOk(42)]


@pytest.mark.asyncio
async def test_slow_fetch_times_out_as_failure() -> None:
    recorder = _Recorder()

    async def fetch() -> SourceOk[int]:
        await asyncio.sleep(10)
        return SourceOk(1)

    poller = PeriodicPoller("slow", fetch=fetch, apply=recorder, interval=60, timeout=0.01)
    await poller.poll_once()

    (failure,) = recorder.applied
    assert isinstance(failure, SourceFailure)
    assert failure.reason == "timed out after 0.01s"
    assert failure.source == "slow"


@pytest.mark.asyncio
async def test_runs_periodically_until_stopped() -> None:
    recorder = _Recorder()
    calls = 0

    async def fetch() -> SourceOk[int]:
        nonlocal calls
        calls += 1
        return SourceOk(calls)

    poller = PeriodicPoller("tick", fetch=fetch, apply=recorder, interval=0.01)
    poller.start()
    assert poller.is_running
    await asyncio.sleep(0.1)
    await poller.stop()
    applied = len(recorder.applied)
    await asyncio.sleep(0.05)

    assert applied >= 2
    assert len(recorder.applied) == applied
    assert not poller.is_running


@pytest.mark.asyncio
async def test_non_positive_interval_runs_once() -> None:
    recorder = _Recorder()

    async def fetch() -> SourceOk[str]:
        return SourceOk("once")

    poller = PeriodicPoller("stats", fetch=fetch, apply=recorder, interval=0)
    poller.start()
    await asyncio.sleep(0.05)

    assert recorder.applied == [SourceOk("once")]
    assert not poller.is_running
    await poller.stop()


@pytest.mark.asyncio
async def test_result_arriving_after_stop_is_discarded() -> None:
    recorder = _Recorder()
    release = asyncio.Event()

    async def fetch() -> SourceOk[str]:
        await release.wait()
        return SourceOk("late")

    poller = PeriodicPoller("late", fetch=fetch, apply=recorder, interval=60)
    pending = asyncio.create_task(poller.poll_once())
    await asyncio.sleep(0)

    await poller.stop()
    release.set()

    assert await pending is None
    assert recorder.applied == []


@pytest.mark.asyncio
async def test_fetch_exception_does_not_kill_the_loop() -> None:
    recorder = _Recorder()
    calls = 0

    async def fetch() -> SourceOk[int]:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("flaky")
        return SourceOk(calls)

    poller = PeriodicPoller("flaky", fetch=fetch, apply=recorder, interval=0.01)
    poller.start()
    await asyncio.sleep(0.1)
    await poller.stop()

    assert recorder.applied[0] == SourceFailure("flaky", source="flaky")
    assert recorder.applied[1] == SourceOk(2)


@pytest.mark.asyncio
async def test_stop_is_idempotent_and_safe_before_start() -> None:
    async def fetch() -> SourceOk[None]:
        return SourceOk(None)

    poller = PeriodicPoller("idle", fetch=fetch, apply=_Recorder(), interval=1)
    await poller.stop()
    poller.start()
    await poller.stop()
    await poller.stop()
    assert not poller.is_running


@pytest.mark.asyncio
async def test_raising_fetch_reaches_the_event_log() -> None:
    state = DashboardState(FeedConfig())

    async def fetch() -> SourceOk[Any]:
        raise RuntimeError("boom")

    poller = PeriodicPoller("crew", fetch=fetch, apply=state.apply_crew, interval=60)
    result = await poller.poll_once()

    assert result == SourceFailure("boom", source="crew")
    entry = state.log.snapshot()[0]
    assert entry.message == "Crew fetch failed: boom"
    assert entry.severity == LogSeverity.WARNING
