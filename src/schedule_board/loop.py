"""Millisecond timers for the single-threaded UI loop.

`ManualLoop` runs on a virtual clock that only moves when told to, which
makes gesture timing reproducible. `AsyncioLoop` schedules on a running
asyncio loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class EventLoop(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self._cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualLoop:
    """Virtual-clock loop; timers fire only inside `advance`/`advance_to`."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(0.0, float(delay_ms)), callback)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled())

    def advance_to(self, when_ms: float) -> None:
        """Move the clock to `when_ms`, firing due timers in order.

        Timers scheduled by a callback run too if they fall due before `when_ms`.
        """
        while self._queue and self._queue[0][0] <= when_ms:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled():
                continue
            self._now = max(self._now, due)
            timer.fired = True
            timer.callback()
        self._now = max(self._now, float(when_ms))

    def advance(self, delta_ms: float) -> None:
        self.advance_to(self._now + delta_ms)


class _AsyncioTimer:
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioLoop:
    """Adapter exposing an asyncio loop in milliseconds."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _AsyncioTimer:
        return _AsyncioTimer(self._loop.call_later(max(0.0, delay_ms) / 1000.0, callback))
