from __future__ import annotations

import pytest

from loopkit import InMemoryCallMetrics, NoOpCallMetrics, call_tags, memoize


def test_in_memory_metrics_aggregate_across_tags():
    metrics = InMemoryCallMetrics()
    metrics.incr("hits", tags={"fn": "a"})
    metrics.incr("hits", 2, tags={"fn": "b"})
    metrics.incr("misses")
    assert metrics.total("hits") == 3
    assert metrics.snapshot() == {"hits": 3, "misses": 1}


def test_noop_metrics_accept_calls():
    NoOpCallMetrics().incr("anything", 5, tags={"k": "v"})


def test_prometheus_metrics_record_counters():
    prometheus_client = pytest.importorskip("prometheus_client")
    from loopkit import PrometheusCallMetrics

    registry = prometheus_client.CollectorRegistry()
    metrics = PrometheusCallMetrics(
        namespace="loopkit_test", const_tags={"service": "api"}, registry=registry
    )

    @memoize(metrics=metrics)
    def ident(x: int) -> int:
        return x

    ident(1)
    ident(1)
    labels = {**call_tags(ident), "service": "api"}
    assert registry.get_sample_value("loopkit_test_memoize_hits_total", labels) == 1.0
    assert registry.get_sample_value("loopkit_test_memoize_misses_total", labels) == 1.0

    metrics.incr("memoize_hits")
    assert (
        registry.get_sample_value(
            "loopkit_test_memoize_hits_total", {"fn": "", "service": "api"}
        )
        == 1.0
    )


def test_call_tags_use_qualified_name():
    def inner() -> None:
        return None

    assert call_tags(inner) == {"fn": "test_call_tags_use_qualified_name.<locals>.inner"}
