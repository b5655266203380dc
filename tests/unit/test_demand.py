"""Unit tests for demand drift and employment feedback."""

import random

from CitySim.config import Defaults
from CitySim.economy.demand import Demand, employment_demand_adjust, residential_slots


class TestDemand:
    """Tests for Demand."""

    def test_initial_values(self):
        d = Demand()
        assert d.to_dict() == {"residential": 10, "commercial": 5, "industrial": 5}

    def test_clamped_on_construction(self):
        d = Demand(500, -500, 0)
        assert d.residential == Defaults.DEMAND_MAX
        assert d.commercial == Defaults.DEMAND_MIN

    def test_drift_stays_in_range(self):
        rng = random.Random(1)
        d = Demand(Defaults.DEMAND_MAX, Defaults.DEMAND_MIN, 0)
        for _ in range(500):
            before = d.to_dict()
            d.drift(rng)
            for name, value in d.to_dict().items():
                assert Defaults.DEMAND_MIN <= value <= Defaults.DEMAND_MAX
                assert abs(value - before[name]) <= Defaults.DEMAND_DRIFT


class TestEmploymentFeedback:
    """Tests for employment_demand_adjust."""

    def test_no_population_no_change(self, city):
        before = city.demand.to_dict()
        employment_demand_adjust(city)
        assert city.demand.to_dict() == before
        assert city.employed == 0

    def test_full_homes_and_high_unemployment(self, city, make_building, fixed_random):
        make_building(1, 1, "R", residents=10)
        city.population = 10
        city.random = fixed_random(0.99)
        employment_demand_adjust(city)
        # no free housing +6; unemployment 100% gives I+2, C+1
        assert city.demand.to_dict() == {"residential": 16, "commercial": 6, "industrial": 7}

    def test_low_unemployment_lowers_residential(self, city, make_building):
        make_building(1, 1, "R", residents=4)
        make_building(3, 1, "I", employees=4)
        city.population = 4
        employment_demand_adjust(city)
        assert city.employed == 4
        # 6 open slots +3; full employment -1
        assert city.demand.residential == 12

    def test_unfilled_jobs_bonus(self, city, make_building):
        make_building(1, 1, "R", residents=2)
        for x in range(3, 9):
            make_building(x, 1, "I", employees=0)
        make_building(10, 1, "I", employees=2)
        city.population = 2
        employment_demand_adjust(city)
        # 8 open slots: no slot adjustment; 26 unfilled jobs gives +2; ratio 0 gives -1
        assert city.demand.residential == 11

    def test_out_migration(self, city, make_building, fixed_random):
        home = make_building(1, 1, "R", residents=10)
        city.population = 10
        city.random = fixed_random(0.0)
        employment_demand_adjust(city)
        assert home.residents <= 10 - Defaults.OUT_MIGRATION_MIN

    def test_residential_slots_skip_abandoning(self, city, make_building):
        make_building(1, 1, "R", residents=3)
        make_building(2, 1, "R", residents=1, abandon_phase=2)
        assert residential_slots(city) == (10, 3)
