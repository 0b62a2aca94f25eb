from __future__ import annotations

import asyncio
import gc

import pytest

from loopkit import Deferred, DeferredRejectedError, defer


def run_async(coro):
    return asyncio.run(coro)


def test_second_resolve_is_ignored():
    async def scenario() -> None:
        deferred = defer()
        deferred.resolve(5)
        deferred.resolve(6)
        deferred.reject(RuntimeError("late"))
        assert await deferred.value == 5
        assert deferred.state == "fulfilled"

    run_async(scenario())


def test_resolve_from_scheduled_callback():
    async def scenario() -> None:
        deferred = defer()
        assert deferred.state == "pending"
        asyncio.get_running_loop().call_later(0.01, deferred.resolve, "ready")
        assert await deferred == "ready"

    run_async(scenario())


def test_rejection_reaches_awaiters():
    async def scenario() -> None:
        deferred = defer()
        deferred.reject(ValueError("boom"))
        deferred.resolve("ignored")
        with pytest.raises(ValueError, match="boom"):
            await deferred
        assert deferred.state == "rejected"

    run_async(scenario())


def test_non_exception_reason_is_wrapped():
    async def scenario() -> None:
        deferred = defer()
        deferred.reject({"code": 42})
        with pytest.raises(DeferredRejectedError) as info:
            await deferred
        assert info.value.reason == {"code": 42}

    run_async(scenario())


def test_unhandled_rejection_is_not_reported():
    reported: list[dict] = []

    async def scenario() -> None:
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda _loop, context: reported.append(context))
        deferred = defer()
        deferred.reject(RuntimeError("nobody listens"))
        del deferred
        gc.collect()
        await asyncio.sleep(0)

    run_async(scenario())
    assert reported == []


def test_callbacks_observe_fulfilled_and_rejected():
    async def scenario() -> None:
        seen: list[tuple[str, object]] = []

        ok = defer()
        ok.add_callbacks(lambda value: seen.append(("ok", value)))
        ok.resolve(1)

        failed = defer()
        failed.add_callbacks(
            lambda value: seen.append(("ok", value)),
            lambda error: seen.append(("err", str(error))),
        )
        failed.reject(KeyError("missing"))

        await ok
        with pytest.raises(KeyError):
            await failed
        await asyncio.sleep(0)

        assert ("ok", 1) in seen
        assert ("err", "'missing'") in seen
        assert len(seen) == 2

    run_async(scenario())


def test_cancelled_value_counts_as_rejected():
    async def scenario() -> None:
        deferred = defer()
        deferred.value.cancel()
        deferred.resolve("too late")
        assert deferred.state == "rejected"
        with pytest.raises(asyncio.CancelledError):
            await deferred.value

    run_async(scenario())


def test_defer_requires_loop_outside_async_context():
    with pytest.raises(RuntimeError):
        defer()

    loop = asyncio.new_event_loop()
    try:
        deferred = Deferred(loop=loop)
        deferred.resolve("x")
        assert loop.run_until_complete(deferred.value) == "x"
    finally:
        loop.close()
