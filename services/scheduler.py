"""
Delayed callbacks for simulated journey progression.
Callbacks run on the event loop thread, interleaved with request handling.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class AsyncioScheduler:
    """Schedules on the given loop, or the loop running at call time."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
