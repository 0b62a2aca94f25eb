"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Timer services used for deferred callbacks, plus small scheduling helpers.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger("loopkit.timers")


class TimerHandle(Protocol):
    """Handle returned by `TimerService.call_later`."""

    def cancel(self) -> None: ...


class TimerService(Protocol):
    """Clock plus one-shot callback scheduling."""

    def now(self) -> float: ...

    def call_later(
        self, delay_s: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle: ...


class LoopTimerService:
    """
    Timer service backed by an asyncio event loop.

    When no loop is supplied the running loop is resolved on every call, so one
    service can be reused across `asyncio.run` invocations. Timers still
    pending when a loop closes never fire; `now` keeps reading the loop clock
    (`time.monotonic` for the standard loops) so callers can detect that.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def now(self) -> float:
        if self._loop is not None:
            return self._loop.time()
        try:
            return asyncio.get_running_loop().time()
        except RuntimeError:
            return time.monotonic()

    def call_later(
        self, delay_s: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        return self._resolve_loop().call_later(delay_s, callback, *args)


@dataclass(slots=True)
class _ManualTimer:
    """Data type for one scheduled manual timer."""

    due_s: float
    callback: Callable[..., Any]
    args: tuple[Any, ...]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(slots=True)
class ManualTimerService:
    """
    Deterministic clock for tests and simulations.

    Time only moves through `advance`. Due callbacks run in due-time order,
    ties in scheduling order, and callbacks scheduled during an advance run in
    the same pass when they fall inside the advanced window.
    """

    start_s: float = 0.0
    _now_s: float = field(init=False)
    _heap: list[tuple[float, int, _ManualTimer]] = field(init=False)
    _seq: itertools.count = field(init=False)

    def __post_init__(self) -> None:
        self._now_s = self.start_s
        self._heap = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now_s

    def call_later(
        self, delay_s: float, callback: Callable[..., Any], *args: Any
    ) -> _ManualTimer:
        timer = _ManualTimer(
            due_s=self._now_s + max(0.0, delay_s), callback=callback, args=args
        )
        heapq.heappush(self._heap, (timer.due_s, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet fired, not cancelled timers."""
        return sum(1 for _, _, timer in self._heap if not timer.cancelled)

    def advance(self, delta_s: float) -> int:
        """
        Move the clock forward and fire every timer that becomes due.

        Args:
            delta_s: Seconds to advance; must be non-negative.

        Returns:
            Number of callbacks fired.
        """
        if delta_s < 0:
            raise ValueError("delta_s must be >= 0")
        target = self._now_s + delta_s
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due_s, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            self._now_s = due_s
            fired += 1
            timer.callback(*timer.args)
        self._now_s = target
        return fired


def delay(
    fn: Callable[..., Any],
    delay_s: float = 0.0,
    *args: Any,
    timers: TimerService | None = None,
) -> TimerHandle | None:
    """
    Run `fn` now when `delay_s` is zero, otherwise schedule it.

    Returns the timer handle for scheduled calls and `None` for synchronous ones.
    """
    if delay_s < 0:
        raise ValueError("delay_s must be >= 0")
    if not delay_s:
        fn(*args)
        return None
    service = timers if timers is not None else LoopTimerService()
    logger.debug("Scheduling %r in %.3fs", fn, delay_s)
    return service.call_later(delay_s, fn, *args)


async def wait(delay_s: float) -> None:
    """Resolve after `delay_s` seconds."""
    await asyncio.sleep(delay_s)
