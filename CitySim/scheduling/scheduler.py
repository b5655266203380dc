# scheduler.py – fixed-period loops driving the model
from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from CitySim.config import Defaults
from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """
    Runs ``callback(dt)`` every ``period`` seconds on a daemon thread, where
    ``dt`` is the wall-clock time since the previous run. Exceptions raised
    by one run are logged and the loop carries on.
    """

    def __init__(self, name: str, period: float, callback: Callable[[float], None]) -> None:
        self.name = name
        self.period = period
        self.callback = callback
        self.runs = 0
        self._thread: threading.Thread | None = None
        self._stop_requested = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_requested.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info("%s scheduler started (period=%.3fs)", self.name, self.period)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_requested.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("%s scheduler stopped after %d runs", self.name, self.runs)

    def run_once(self, dt: float) -> None:
        try:
            self.callback(dt)
        except Exception:
            logger.exception("%s scheduler run failed", self.name)
        self.runs += 1

    # -- internals --

    def _run_loop(self) -> None:
        last = time.monotonic()
        next_deadline = last + self.period
        while not self._stop_requested.wait(max(0.0, next_deadline - time.monotonic())):
            now = time.monotonic()
            dt = now - last
            last = now
            self.run_once(dt)
            next_deadline += self.period
            if next_deadline < now:
                # fell behind; skip missed ticks instead of bursting
                next_deadline = now + self.period


def make_tick_scheduler(city: CityModel, period: float = Defaults.TICK_PERIOD_SECONDS) -> PeriodicScheduler:
    """Slow clock: construction, economy and AI."""
    return PeriodicScheduler("tick", period, lambda dt: city.step())


def make_traffic_scheduler(city: CityModel, period: float = Defaults.TRAFFIC_PERIOD_SECONDS) -> PeriodicScheduler:
    """Fast clock: vehicles, goods and citizen groups."""
    return PeriodicScheduler("traffic", period, city.traffic_step)
