# pharos_auto/scheduler.py
import sys
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from .util import get_logger, fmt_hms, on_error
log = get_logger()


def next_run_at(hour: int, minute: int, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now()
    nxt = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if nxt <= now:
        nxt += timedelta(days=1)
    return nxt


def calculate_delay_until_next_run(hour: int, minute: int, now: Optional[datetime] = None) -> float:
    """Seconds until the next hour:minute. Today if still ahead, otherwise tomorrow."""
    now = now or datetime.now()
    return (next_run_at(hour, minute, now) - now).total_seconds()


class Scheduler:
    """Daily timer: fire ``cycle`` at hour:minute, then re-arm for the next occurrence.

    ``stop()`` cancels a pending timer and prevents re-arming. A cycle already
    running is left to finish; ``run_forever`` joins it before returning.
    """

    def __init__(self, cycle: Callable[[], None], hour: int, minute: int,
                 clock: Callable[[], datetime] = datetime.now,
                 timer_factory: Callable[..., threading.Timer] = threading.Timer):
        self.cycle = cycle
        self.hour = hour
        self.minute = minute
        self.clock = clock
        self.timer_factory = timer_factory
        self.next_run: Optional[datetime] = None
        self.cycles = 0
        self._timer = None
        self._stop = threading.Event()
        self._lock = threading.Lock()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def arm(self) -> None:
        with self._lock:
            if self.stopped:
                return
            now = self.clock()
            self.next_run = next_run_at(self.hour, self.minute, now)
            delay = (self.next_run - now).total_seconds()
            self._timer = self.timer_factory(delay, self._fire)
            self._timer.daemon = True
            self._timer.start()
        log.info(f"⏰ next scheduled run: {self.next_run:%Y-%m-%d %H:%M:%S}")

    def _fire(self) -> None:
        try:
            self.cycle()
            log.info("🎉 daily cycle completed, waiting for next scheduled run")
        except Exception as e:
            on_error(log, "daily cycle failed", e)
        self.cycles += 1
        self.arm()

    def stop(self) -> None:
        # called from signal handlers, so it must not take the arm lock
        self._stop.set()
        timer = self._timer
        if timer is not None:
            timer.cancel()

    def run_forever(self, countdown: bool = True, tick: float = 1.0) -> None:
        """Arm the timer and block until ``stop()``, drawing the countdown meanwhile."""
        self.arm()
        while not self._stop.wait(tick):
            if not countdown or self.next_run is None:
                continue
            remaining = (self.next_run - self.clock()).total_seconds()
            if remaining > 0:
                sys.stdout.write(f"\r⏰ Next run in: {fmt_hms(remaining)}")
                sys.stdout.flush()
        timer = self._timer
        if timer is not None:
            timer.cancel()
            if timer.is_alive():
                log.info("waiting for the running cycle to finish")
                timer.join()
        log.info("scheduler stopped")
