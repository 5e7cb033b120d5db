"""Timers on the running asyncio event loop."""

import asyncio
from typing import Callable


class AsyncioScheduler:
    """Schedules callbacks with ``loop.call_later``.

    The loop is looked up when a timer is requested, so the scheduler can
    be built before the loop starts.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)
