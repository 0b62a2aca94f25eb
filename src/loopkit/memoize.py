"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Function memoization keyed by stringified arguments.

Keys are built by joining `str(arg)` for every argument with a separator, so
arguments that render to the same text share one cache row. `memoize(f)(1, 2)`
and `memoize(f)("1", "2")` hit the same entry, and compound values whose
`str()` drops information can produce false hits. This is accepted behaviour;
wrap only functions whose arguments render unambiguously.
"""

from __future__ import annotations

import functools
import logging
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar, overload

from .metrics import CallMetrics, NoOpCallMetrics, call_tags
from .settings import LoopkitSettings

logger = logging.getLogger("loopkit.memoize")

T = TypeVar("T")

_MISSING = object()


class MemoCache(Protocol):
    """Protocol implemented by memo cache stores."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def contains(self, key: str) -> bool: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


@dataclass(slots=True)
class InMemoryMemoCache(MemoCache):
    """Unbounded dict-backed store. Rows live as long as the cache object."""

    _rows: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self._rows.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._rows[key] = value

    def contains(self, key: str) -> bool:
        return key in self._rows

    def clear(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)


def memo_key(
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any] | None = None,
    *,
    separator: str = "--",
) -> str:
    """Build the cache key for one call."""
    parts = [str(arg) for arg in args]
    if kwargs:
        parts.extend(f"{name}={value}" for name, value in kwargs.items())
    return separator.join(parts)


class Memoized(Generic[T]):
    """Callable wrapper that caches results of `fn` per argument key."""

    def __init__(
        self,
        fn: Callable[..., T],
        *,
        separator: str,
        cache: MemoCache,
        metrics: CallMetrics,
    ) -> None:
        functools.update_wrapper(self, fn)
        self.cache = cache
        self.hits = 0
        self.misses = 0
        self._separator = separator
        self._metrics = metrics
        self._tags = call_tags(fn)

    def __call__(self, *args: Any, **kwargs: Any) -> T:
        key = memo_key(args, kwargs, separator=self._separator)
        cached = self.cache.get(key, _MISSING)
        if cached is not _MISSING:
            self.hits += 1
            self._metrics.incr("memoize_hits", tags=self._tags)
            return cached

        logger.debug("Memo miss for %s key=%r", self._tags["fn"], key)
        result = self.__wrapped__(*args, **kwargs)
        self.cache.set(key, result)
        self.misses += 1
        self._metrics.incr("memoize_misses", tags=self._tags)
        return result

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        # Bound methods pass the instance as the first key part.
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def cache_clear(self) -> None:
        self.cache.clear()
        self.hits = 0
        self.misses = 0


@overload
def memoize(fn: Callable[..., T], /) -> Memoized[T]: ...


@overload
def memoize(
    *,
    separator: str | None = None,
    cache: MemoCache | None = None,
    metrics: CallMetrics | None = None,
    settings: LoopkitSettings | None = None,
) -> Callable[[Callable[..., T]], Memoized[T]]: ...


def memoize(
    fn: Callable[..., T] | None = None,
    /,
    *,
    separator: str | None = None,
    cache: MemoCache | None = None,
    metrics: CallMetrics | None = None,
    settings: LoopkitSettings | None = None,
) -> Memoized[T] | Callable[[Callable[..., T]], Memoized[T]]:
    """
    Wrap `fn` so repeated calls with the same argument key reuse the first result.

    Works as `memoize(fn)`, `@memoize` and `@memoize(separator="|")`.

    Args:
        fn: Function to wrap.
        separator: Joins stringified arguments into the cache key. Defaults to
            `settings.memo_key_separator`.
        cache: Store owned by the wrapper. A fresh `InMemoryMemoCache` is
            created per wrapped function when omitted.
        metrics: Counter sink for hit/miss metrics.
        settings: Source of defaults.

    Exceptions raised by `fn` propagate and nothing is cached for that call.
    """
    resolved = settings or LoopkitSettings()

    def _wrap(target: Callable[..., T]) -> Memoized[T]:
        return Memoized(
            target,
            separator=separator if separator is not None else resolved.memo_key_separator,
            cache=cache if cache is not None else InMemoryMemoCache(),
            metrics=metrics or NoOpCallMetrics(),
        )

    if fn is not None:
        return _wrap(fn)
    return _wrap
