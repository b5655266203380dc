"""Unit tests for the periodic schedulers."""

import time

from CitySim.config import Defaults
from CitySim.scheduling.scheduler import PeriodicScheduler, make_tick_scheduler, make_traffic_scheduler


class TestPeriodicScheduler:
    """Tests for PeriodicScheduler."""

    def test_run_once_passes_dt(self):
        seen = []
        sched = PeriodicScheduler("test", 1.0, seen.append)
        sched.run_once(0.25)
        assert seen == [0.25]
        assert sched.runs == 1

    def test_failing_run_does_not_propagate(self):
        def boom(dt):
            raise RuntimeError("boom")
        sched = PeriodicScheduler("test", 1.0, boom)
        sched.run_once(0.1)
        sched.run_once(0.1)
        assert sched.runs == 2

    def test_start_and_stop(self):
        seen = []
        sched = PeriodicScheduler("test", 0.01, seen.append)
        sched.start()
        assert sched.running
        deadline = time.monotonic() + 2.0
        while not seen and time.monotonic() < deadline:
            time.sleep(0.01)
        sched.stop()
        assert not sched.running
        assert seen and all(dt >= 0 for dt in seen)


class TestCityClocks:
    """Tests for the slow and fast clocks built around a city."""

    def test_tick_clock_steps_model(self, city):
        sched = make_tick_scheduler(city)
        assert sched.period == Defaults.TICK_PERIOD_SECONDS
        sched.run_once(1.0)
        assert city.tick == 1

    def test_traffic_clock_publishes(self, city, events):
        sched = make_traffic_scheduler(city)
        assert sched.period == Defaults.TRAFFIC_PERIOD_SECONDS
        sched.run_once(0.1)
        assert len(events("traffic")) == 1
