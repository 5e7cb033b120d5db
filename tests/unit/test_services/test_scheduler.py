"""Tests for AsyncioScheduler."""

import asyncio


def test_call_later_runs_on_the_loop():
    from inbox.services.scheduler import AsyncioScheduler

    scheduler = AsyncioScheduler()
    fired = []

    async def run():
        scheduler.call_later(0.01, lambda: fired.append("first"))
        cancelled = scheduler.call_later(0.01, lambda: fired.append("second"))
        cancelled.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(run())

    assert fired == ["first"]
