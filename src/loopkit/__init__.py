"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Utility primitives for asyncio programs.

Quick start::

    from loopkit import deep_merge, defer, memoize, throttle

    deferred = defer()
    loop.call_later(1.0, deferred.resolve, "ready")
    print(await deferred)

    @memoize
    def area(width, height):
        return width * height

    on_resize = throttle(redraw, 0.1)

    config = {"plugins": ["a"], "ui": {"theme": "dark"}}
    deep_merge(config, {"plugins": ["b"], "ui": {"font": "mono"}})
"""

from .deferred import Deferred, DeferredState, defer
from .errors import DeferredRejectedError, LoopkitError, MergeDepthError, SettingsError
from .memoize import InMemoryMemoCache, MemoCache, Memoized, memo_key, memoize
from .merge import apply_defaults, concat, deep_merge
from .metrics import (
    CallMetrics,
    InMemoryCallMetrics,
    NoOpCallMetrics,
    PrometheusCallMetrics,
    call_tags,
)
from .settings import LoopkitSettings
from .throttle import Throttled, ThrottleState, throttle
from .timers import (
    LoopTimerService,
    ManualTimerService,
    TimerHandle,
    TimerService,
    delay,
    wait,
)
from .utils import is_one_of, uid

__all__ = [
    "Deferred",
    "DeferredState",
    "defer",
    "memoize",
    "Memoized",
    "MemoCache",
    "InMemoryMemoCache",
    "memo_key",
    "throttle",
    "Throttled",
    "ThrottleState",
    "deep_merge",
    "concat",
    "apply_defaults",
    "TimerService",
    "TimerHandle",
    "LoopTimerService",
    "ManualTimerService",
    "delay",
    "wait",
    "uid",
    "is_one_of",
    "LoopkitSettings",
    "CallMetrics",
    "NoOpCallMetrics",
    "InMemoryCallMetrics",
    "PrometheusCallMetrics",
    "call_tags",
    "LoopkitError",
    "DeferredRejectedError",
    "MergeDepthError",
    "SettingsError",
]
