from __future__ import annotations

import asyncio

import pytest

from loopkit import LoopTimerService, ManualTimerService, delay, wait


def test_manual_timers_fire_in_due_order():
    timers = ManualTimerService(start_s=10.0)
    fired: list[str] = []
    timers.call_later(2.0, fired.append, "late")
    timers.call_later(1.0, fired.append, "early")
    timers.call_later(1.0, fired.append, "early-second")

    assert timers.advance(0.5) == 0
    assert timers.now() == 10.5
    assert timers.advance(2.0) == 3
    assert fired == ["early", "early-second", "late"]
    assert timers.now() == 12.5


def test_manual_timers_scheduled_during_advance_run_in_window():
    timers = ManualTimerService()
    fired: list[float] = []

    def chain() -> None:
        fired.append(timers.now())
        if len(fired) < 3:
            timers.call_later(1.0, chain)

    timers.call_later(1.0, chain)
    timers.advance(2.5)
    assert fired == [1.0, 2.0]
    timers.advance(1.0)
    assert fired == [1.0, 2.0, 3.0]
    assert timers.pending == 0


def test_cancelled_manual_timer_is_skipped():
    timers = ManualTimerService()
    fired: list[str] = []
    handle = timers.call_later(1.0, fired.append, "x")
    handle.cancel()
    assert timers.pending == 0
    assert timers.advance(5.0) == 0
    assert fired == []

    with pytest.raises(ValueError):
        timers.advance(-1.0)


def test_delay_zero_runs_synchronously():
    fired: list[int] = []
    assert delay(fired.append, 0, 7) is None
    assert fired == [7]


def test_delay_schedules_through_timer_service():
    timers = ManualTimerService()
    fired: list[int] = []
    handle = delay(fired.append, 0.3, 8, timers=timers)
    assert handle is not None
    assert fired == []
    timers.advance(0.3)
    assert fired == [8]

    with pytest.raises(ValueError):
        delay(fired.append, -0.1, timers=timers)


def test_loop_timer_service_and_wait():
    async def scenario() -> list[str]:
        fired: list[str] = []
        service = LoopTimerService()
        started = service.now()
        delay(fired.append, 0.01, "scheduled")
        await wait(0.05)
        assert service.now() > started
        return fired

    assert asyncio.run(scenario()) == ["scheduled"]
