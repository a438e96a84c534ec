"""Tests for the daily scheduler."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from pharos_auto.scheduler import Scheduler, calculate_delay_until_next_run, next_run_at

NOW = datetime(2026, 3, 10, 14, 30, 15)


def test_past_time_rolls_to_tomorrow():
    delay = calculate_delay_until_next_run(9, 0, now=NOW)

    assert delay > 0
    assert NOW + timedelta(seconds=delay) == datetime(2026, 3, 11, 9, 0)


def test_future_time_runs_today():
    delay = calculate_delay_until_next_run(18, 45, now=NOW)
    assert delay == timedelta(hours=4, minutes=14, seconds=45).total_seconds()


def test_exact_current_minute_rolls_to_tomorrow():
    now = datetime(2026, 3, 10, 14, 30)
    assert next_run_at(14, 30, now) == datetime(2026, 3, 11, 14, 30)


@pytest.mark.parametrize("hour,minute", [(0, 0), (14, 30), (14, 31), (23, 59)])
def test_delay_is_never_negative_and_within_a_day(hour, minute):
    delay = calculate_delay_until_next_run(hour, minute, now=NOW)
    assert 0 < delay <= 24 * 3600


def test_month_end_rollover():
    now = datetime(2026, 1, 31, 23, 0)
    assert next_run_at(8, 15, now) == datetime(2026, 2, 1, 8, 15)


class FakeTimer:
    created: list["FakeTimer"] = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def is_alive(self):
        return self.started and not self.cancelled

    def join(self):
        pass


@pytest.fixture(autouse=True)
def _reset_timers():
    FakeTimer.created = []


def _scheduler(cycle, now=NOW):
    return Scheduler(cycle, 15, 0, clock=lambda: now, timer_factory=FakeTimer)


def test_arm_schedules_timer_for_next_run():
    sched = _scheduler(lambda: None)
    sched.arm()

    [timer] = FakeTimer.created
    assert timer.started and timer.daemon
    assert timer.interval == timedelta(minutes=29, seconds=45).total_seconds()
    assert sched.next_run == datetime(2026, 3, 10, 15, 0)


def test_fire_runs_cycle_and_rearms():
    runs = []
    sched = _scheduler(lambda: runs.append(1))
    sched.arm()
    FakeTimer.created[0].function()

    assert runs == [1]
    assert sched.cycles == 1
    assert len(FakeTimer.created) == 2
    assert FakeTimer.created[1].started


def test_failing_cycle_still_rearms():
    def boom():
        raise RuntimeError("rpc down")

    sched = _scheduler(boom)
    sched.arm()
    FakeTimer.created[0].function()

    assert sched.cycles == 1
    assert len(FakeTimer.created) == 2


def test_stop_cancels_pending_timer_and_prevents_rearm():
    sched = _scheduler(lambda: None)
    sched.arm()
    sched.stop()

    assert FakeTimer.created[0].cancelled
    FakeTimer.created[0].function()
    assert len(FakeTimer.created) == 1
    assert sched.stopped


def test_run_forever_returns_once_stopped():
    sched = _scheduler(lambda: None)
    sched.stop()
    sched.run_forever(countdown=False, tick=0.01)

    assert FakeTimer.created == []


def test_stop_does_not_block_while_arm_holds_the_lock():
    sched = _scheduler(lambda: None)
    sched.arm()
    with sched._lock:
        stopper = threading.Thread(target=sched.stop, daemon=True)
        stopper.start()
        stopper.join(timeout=2)
        assert not stopper.is_alive()
    assert sched.stopped
    assert FakeTimer.created[0].cancelled


def test_stop_arriving_during_arm_still_ends_run_forever():
    sched = None

    def clock():
        # a signal landing between the stop check and the timer start
        sched.stop()
        return NOW

    sched = Scheduler(lambda: None, 15, 0, clock=clock, timer_factory=FakeTimer)
    runner = threading.Thread(target=sched.run_forever, kwargs={"countdown": False, "tick": 0.01}, daemon=True)
    runner.start()
    runner.join(timeout=2)

    assert not runner.is_alive()
    [timer] = FakeTimer.created
    assert timer.cancelled
