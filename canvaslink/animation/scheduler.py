"""Timer scheduling for highlight animations.

The sequencer only needs "call this later" and "never mind". Hosts running an
asyncio loop use AsyncioScheduler; hosts that drive their own frame clock
(and tests) use ManualScheduler and advance time explicitly.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay_ms, 0) / 1000.0, callback)


class ManualTimer:
    """Timer owned by a ManualScheduler."""

    def __init__(self, due_ms: float, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by advance()."""

    def __init__(self):
        self.now_ms = 0.0
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now_ms + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers still waiting to fire."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward, firing due timers in order.

        Returns the number of callbacks run.
        """
        target = self.now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            self.now_ms = due
            if timer.cancelled:
                continue
            timer.fired = True
            timer.callback()
            fired += 1
        self.now_ms = target
        return fired
