"""
Timer sources for :class:`~treetrace.playback.controller.PlaybackController`.

The controller only needs ``call_later(delay_ms, callback)`` returning a
handle with ``cancel()``. :class:`AsyncioScheduler` runs on an event loop;
:class:`ManualScheduler` is a virtual clock advanced by hand.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle: ...


@dataclass
class ManualTimer:
    due: int
    callback: Callback = field(repr=False)
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler with a millisecond clock that only moves on request.

    Example::

        sched = ManualScheduler()
        ctrl = PlaybackController(trace, scheduler=sched, delay_ms=100)
        sched.advance(250)   # fires the ticks due at 100 and 200
    """

    def __init__(self) -> None:
        self.now = 0
        self._heap: list[tuple[int, int, ManualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callback) -> ManualTimer:
        timer = ManualTimer(due=self.now + delay_ms, callback=callback)
        heapq.heappush(self._heap, (timer.due, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def next_due(self) -> Optional[int]:
        for due, _, timer in sorted(self._heap):
            if not timer.cancelled:
                return due
        return None

    def _pop_live(self, until: Optional[int] = None) -> Optional[ManualTimer]:
        while self._heap:
            due, _, timer = self._heap[0]
            if timer.cancelled:
                heapq.heappop(self._heap)
                continue
            if until is not None and due > until:
                return None
            heapq.heappop(self._heap)
            return timer
        return None

    def run_next(self) -> bool:
        """Jump to the earliest live timer and fire it; ``False`` if none is pending."""
        timer = self._pop_live()
        if timer is None:
            return False
        self.now = max(self.now, timer.due)
        timer.callback()
        return True

    def advance(self, ms: int) -> int:
        """Move the clock forward by *ms*, firing every timer that falls due. Returns the count."""
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self.now + ms
        fired = 0
        while True:
            timer = self._pop_live(until=target)
            if timer is None:
                break
            self.now = timer.due
            timer.callback()
            fired += 1
        self.now = target
        logger.debug("ManualScheduler.advance: now=%d fired=%d", self.now, fired)
        return fired


class AsyncioScheduler:
    """Schedules ticks with ``loop.call_later`` on the running (or given) event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: int, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000.0, callback)
