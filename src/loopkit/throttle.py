"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Trailing-edge throttling driven by an injected timer service.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, Literal

from .metrics import CallMetrics, NoOpCallMetrics, call_tags
from .timers import LoopTimerService, TimerService

logger = logging.getLogger("loopkit.throttle")

ThrottleState = Literal["ready", "cooldown"]


class Throttled:
    """
    Wrapper invoking `fn` at most once per `window_s`.

    The first call in a window runs immediately and starts a cooldown. Calls
    made during the cooldown are coalesced: only the latest arguments are kept,
    and they are replayed once when the window ends. The wrapper then returns
    to the ready state whether or not a trailing call ran.

    Each cooldown also records its deadline. A call arriving at or after the
    deadline ends the window itself, so a timer that never fired (for example
    one scheduled on an event loop that has since closed) cannot leave the
    wrapper stuck in cooldown.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        window_s: float,
        *,
        timers: TimerService,
        metrics: CallMetrics,
    ) -> None:
        if window_s < 0:
            raise ValueError("window_s must be >= 0")
        functools.update_wrapper(self, fn)
        self._window_s = float(window_s)
        self._timers = timers
        self._metrics = metrics
        self._state: ThrottleState = "ready"
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._deadline_s: float | None = None
        self._window_id = 0
        self._tags = call_tags(fn)

    @property
    def window_s(self) -> float:
        return self._window_s

    @property
    def state(self) -> ThrottleState:
        return self._state

    @property
    def pending(self) -> bool:
        """Whether a trailing call is recorded for the current window."""
        return self._pending is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._metrics.incr("throttle_calls", tags=self._tags)
        if self._state == "cooldown" and self._window_expired():
            logger.debug("Cooldown for %s outlived its timer", self._tags["fn"])
            self._end_window(self._window_id)
        if self._state == "cooldown":
            if self._pending is not None:
                logger.debug("Replacing trailing call for %s", self._tags["fn"])
            self._pending = (args, kwargs)
            self._metrics.incr("throttle_coalesced", tags=self._tags)
            return

        self.__wrapped__(*args, **kwargs)
        if not self._window_s:
            return
        self._window_id += 1
        # State only changes once the timer is scheduled.
        self._timers.call_later(self._window_s, self._end_window, self._window_id)
        self._deadline_s = self._timers.now() + self._window_s
        self._state = "cooldown"

    def _window_expired(self) -> bool:
        if self._deadline_s is None:
            return False
        return self._timers.now() >= self._deadline_s

    def _end_window(self, window_id: int) -> None:
        if window_id != self._window_id or self._state != "cooldown":
            return
        pending, self._pending = self._pending, None
        self._state = "ready"
        self._deadline_s = None
        if pending is None:
            return
        args, kwargs = pending
        logger.debug("Dispatching trailing call for %s", self._tags["fn"])
        self._metrics.incr("throttle_trailing", tags=self._tags)
        self.__wrapped__(*args, **kwargs)


def throttle(
    fn: Callable[..., Any],
    window_s: float = 0.0,
    *,
    timers: TimerService | None = None,
    metrics: CallMetrics | None = None,
) -> Throttled:
    """
    Wrap `fn` so it runs at most once per `window_s` seconds.

    Args:
        fn: Function to throttle. Its return value is discarded.
        window_s: Cooldown length. `0` disables throttling entirely.
        timers: Timer service used to end cooldowns. Defaults to a
            `LoopTimerService` on the running asyncio loop.
        metrics: Counter sink for call/coalesce metrics.

    Errors raised by an immediate call propagate to the caller and leave the
    wrapper ready. Errors raised by a trailing call propagate out of the timer
    callback.
    """
    return Throttled(
        fn,
        window_s,
        timers=timers if timers is not None else LoopTimerService(),
        metrics=metrics or NoOpCallMetrics(),
    )
