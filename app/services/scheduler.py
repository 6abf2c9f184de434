"""Delayed-callback scheduling used for feedback dwell intervals."""
import asyncio
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay and hand back a cancellable handle."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class AsyncioScheduler:
    """Schedules callbacks on the running asyncio event loop.

    Must be called from inside the loop (e.g. an ``async def`` FastAPI endpoint),
    so callbacks run on the same thread as request handling.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)
