"""Tests for the cancellable restart timer."""

import asyncio

import pytest

from api.timers import RestartTimer


def _counter():
    calls = []

    async def callback():
        calls.append(asyncio.get_running_loop().time())

    return calls, callback


@pytest.mark.asyncio
async def test_fires_once_after_delay():
    calls, callback = _counter()
    timer = RestartTimer(0.02)

    assert timer.schedule(callback)
    assert timer.pending
    await asyncio.sleep(0.1)

    assert len(calls) == 1
    assert not timer.pending
    assert timer.remaining is None


@pytest.mark.asyncio
async def test_cancel_prevents_firing():
    calls, callback = _counter()
    timer = RestartTimer(0.02)

    timer.schedule(callback)
    assert timer.cancel() is True
    await asyncio.sleep(0.1)

    assert calls == []
    assert timer.cancel() is False


@pytest.mark.asyncio
async def test_reschedule_supersedes_pending():
    first_calls, first = _counter()
    second_calls, second = _counter()
    timer = RestartTimer(0.05)

    timer.schedule(first)
    await asyncio.sleep(0.02)
    timer.schedule(second)
    await asyncio.sleep(0.15)

    assert first_calls == []
    assert len(second_calls) == 1


@pytest.mark.asyncio
async def test_remaining_counts_down():
    _, callback = _counter()
    timer = RestartTimer(1.0)

    timer.schedule(callback)
    first = timer.remaining
    await asyncio.sleep(0.05)
    second = timer.remaining

    assert 0 < second < first <= 1.0
    timer.cancel()


@pytest.mark.asyncio
async def test_disabled_timer():
    calls, callback = _counter()
    timer = RestartTimer(0)

    assert timer.schedule(callback) is False
    assert not timer.pending
    await asyncio.sleep(0.02)
    assert calls == []


@pytest.mark.asyncio
async def test_failing_callback_is_logged(caplog):
    async def boom():
        raise RuntimeError("boom")

    timer = RestartTimer(0.01)
    timer.schedule(boom)
    await asyncio.sleep(0.05)

    assert "Scheduled callback failed" in caplog.text
    assert not timer.pending
