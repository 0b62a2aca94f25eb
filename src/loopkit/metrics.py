"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Counter sinks for memoize and throttle instrumentation.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol


def call_tags(fn: Callable[..., Any]) -> dict[str, str]:
    """Tags identifying a wrapped callable in metric rows."""
    return {"fn": getattr(fn, "__qualname__", None) or repr(fn)}


class CallMetrics(Protocol):
    """Minimal metrics interface used by wrapped callables."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpCallMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class InMemoryCallMetrics:
    """Process-local counters keyed by metric name and sorted tags."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, tuple[tuple[str, str], ...]], int] = {}

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        key = (name, tuple(sorted((tags or {}).items())))
        self._rows[key] = self._rows.get(key, 0) + value

    def total(self, name: str) -> int:
        """Sum one counter across all tag sets."""
        return sum(count for (row_name, _), count in self._rows.items() if row_name == name)

    def snapshot(self) -> dict[str, int]:
        out: dict[str, int] = {}
        for (name, _), count in self._rows.items():
            out[name] = out.get(name, 0) + count
        return out


class PrometheusCallMetrics:
    """
    Prometheus-backed metrics adapter.

    One counter family is registered per metric name. Its label set is the
    union of `const_tags` and the tags seen on the first increment (for
    loopkit wrappers that is `fn`); later increments fill absent labels with
    an empty string.

    Requires `prometheus_client` package.
    """

    def __init__(
        self,
        *,
        namespace: str = "loopkit",
        const_tags: Mapping[str, str] | None = None,
        registry: Any | None = None,
    ) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCallMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._Counter = Counter
        self._namespace = namespace
        self._const_tags = dict(const_tags or {})
        self._registry = registry if registry is not None else REGISTRY
        self._families: dict[str, tuple[Any, tuple[str, ...]]] = {}

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        merged = {**self._const_tags, **(tags or {})}
        family = self._families.get(name)
        if family is None:
            label_names = tuple(sorted(merged))
            counter = self._Counter(
                name=name,
                documentation=f"loopkit call metric {name}",
                namespace=self._namespace,
                labelnames=label_names,
                registry=self._registry,
            )
            family = (counter, label_names)
            self._families[name] = family

        counter, label_names = family
        if label_names:
            counter.labels(*(str(merged.get(label, "")) for label in label_names)).inc(value)
        else:
            counter.inc(value)
