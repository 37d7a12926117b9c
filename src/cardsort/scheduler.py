"""Cooperative deferred-callback scheduler with a virtual millisecond clock."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

SleepFn = Callable[[float], None]


@dataclass(order=True)
class ScheduledCall:
    """One pending callback."""

    due_ms: int
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """Run callbacks after a delay on a single thread.

    Time only moves when ``advance`` or ``run_pending`` is called. With a
    ``sleep_fn`` (e.g. ``time.sleep``) the scheduler also waits in real time
    for the skipped interval, which is what an interactive front end wants.
    """

    def __init__(self, sleep_fn: SleepFn | None = None) -> None:
        self._sleep_fn = sleep_fn
        self._now_ms = 0
        self._queue: list[ScheduledCall] = []
        self._counter = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        return len([call for call in self._queue if not call.cancelled])

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        """Schedule ``callback`` to run ``delay_ms`` from now."""
        if delay_ms < 0:
            raise ValueError(f"delay_ms must not be negative, got {delay_ms}.")
        call = ScheduledCall(due_ms=self._now_ms + delay_ms, sequence=next(self._counter), callback=callback)
        heapq.heappush(self._queue, call)
        return call

    def cancel(self, call: ScheduledCall) -> None:
        call.cancelled = True

    def advance(self, ms: int) -> int:
        """Move the clock forward and run every callback that became due; return how many ran."""
        if ms < 0:
            raise ValueError(f"ms must not be negative, got {ms}.")
        target = self._now_ms + ms
        ran = 0
        while self._queue and self._queue[0].due_ms <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._wait_until(call.due_ms)
            call.callback()
            ran += 1
        self._wait_until(target)
        return ran

    def run_pending(self) -> bool:
        """Jump to the next live callback and run it; return False when nothing is pending."""
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        if not self._queue:
            return False
        call = heapq.heappop(self._queue)
        self._wait_until(call.due_ms)
        call.callback()
        return True

    def _wait_until(self, due_ms: int) -> None:
        if due_ms <= self._now_ms:
            return
        if self._sleep_fn is not None:
            self._sleep_fn((due_ms - self._now_ms) / 1000)
        self._now_ms = due_ms
