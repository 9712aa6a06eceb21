"""Timer scheduling for the intro sequence.

All delays are in milliseconds. A scheduler hands out opaque handles from
``call_later`` and accepts them back in ``cancel``; cancelling a handle that
already fired (or was already cancelled) is a no-op.
"""

import abc
import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Scheduler(abc.ABC):
    """Single-threaded timer source."""

    @abc.abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Any:
        ...

    @abc.abstractmethod
    def cancel(self, handle: Any) -> None:
        ...

    @property
    @abc.abstractmethod
    def now_ms(self) -> float:
        ...


@dataclass(order=True)
class FakeTimer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)


class FakeScheduler(Scheduler):
    """Manual clock. Nothing runs until ``advance``."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[FakeTimer] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for t in self._queue if not t.cancelled)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self._now + max(delay_ms, 0), next(self._seq), callback)
        heapq.heappush(self._queue, timer)
        return timer

    def cancel(self, handle: FakeTimer) -> None:
        handle.cancelled = True

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing every timer that comes due."""
        target = self._now + ms
        while self._queue and self._queue[0].due <= target:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = timer.due
            timer.fired = True
            timer.callback()
        self._now = target


class AsyncioScheduler(Scheduler):
    """Schedules on an asyncio event loop (one thread, cooperative)."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop
        self._start = loop.time()

    @property
    def now_ms(self) -> float:
        return (self.loop.time() - self._start) * 1000

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay_ms, 0) / 1000, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
