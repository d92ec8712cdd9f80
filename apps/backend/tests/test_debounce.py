import asyncio

import pytest

from client.debounce import Debouncer


@pytest.mark.asyncio
async def test_burst_collapses_to_last_value():
    seen = []
    debouncer = Debouncer(seen.append, delay=0.05)

    for text in ["d", "du", "dun", "dune"]:
        debouncer.push(text)
        await asyncio.sleep(0.01)

    assert seen == []
    await asyncio.sleep(0.1)
    assert seen == ["dune"]


@pytest.mark.asyncio
async def test_separate_bursts_fire_separately():
    seen = []
    debouncer = Debouncer(seen.append, delay=0.02)

    debouncer.push("heat")
    await asyncio.sleep(0.06)
    debouncer.push("alien")
    await asyncio.sleep(0.06)

    assert seen == ["heat", "alien"]


@pytest.mark.asyncio
async def test_cancel_drops_pending_value():
    seen = []
    debouncer = Debouncer(seen.append, delay=0.02)

    debouncer.push("heat")
    debouncer.cancel()
    await asyncio.sleep(0.05)

    assert seen == []
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_flush_fires_now_and_awaits_coroutine():
    seen = []

    async def callback(value):
        await asyncio.sleep(0.01)
        seen.append(value)

    debouncer = Debouncer(callback, delay=10)
    debouncer.push("kindred")
    await debouncer.flush()

    assert seen == ["kindred"]


@pytest.mark.asyncio
async def test_flush_without_pending_is_noop():
    seen = []
    debouncer = Debouncer(seen.append, delay=0.01)

    await debouncer.flush()

    assert seen == []
