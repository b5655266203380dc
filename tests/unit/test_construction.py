"""Unit tests for construction progress and housing growth."""

from CitySim.agents.city_structure_entities.tile import Zone
from CitySim.config import Defaults
from CitySim.economy.construction import ResidentApplicantPool, progress_buildings, recount_population


class TestProgressBuildings:
    """Tests for progress_buildings."""

    def test_zone_starts_building(self, city):
        city.get_tile(4, 4).set_zone(Zone("I", "p"))
        updates = progress_buildings(city)
        b = city.get_tile(4, 4).building
        assert b is not None and b.zone_type == "I" and b.stage == 1
        assert [(u.x, u.y) for u in updates] == [(4, 4)]

    def test_final_after_three_passes(self, city):
        city.get_tile(4, 4).set_zone(Zone("R", "p"))
        for _ in range(3):
            progress_buildings(city)
        assert city.get_tile(4, 4).building.final

    def test_final_buildings_not_reported(self, city, make_building):
        make_building(1, 1, "C")
        assert progress_buildings(city) == []


class TestApplicantPool:
    """Tests for ResidentApplicantPool."""

    def test_applicants_wait_without_housing(self, city):
        pool = ResidentApplicantPool()
        pool.growth_tick(city)
        assert pool.waiting == [1, 1, 1]

    def test_applicants_leave_after_max_wait(self, city):
        pool = ResidentApplicantPool()
        for _ in range(Defaults.APPLICANT_MAX_WAIT):
            pool.growth_tick(city)
        assert len(pool) == 15
        pool.growth_tick(city)
        assert len(pool) == 15
        assert max(pool.waiting) == Defaults.APPLICANT_MAX_WAIT

    def test_applicants_move_in(self, city, make_building):
        home = make_building(2, 2, "R")
        pool = ResidentApplicantPool()
        updates = pool.growth_tick(city)
        assert home.residents == 3
        assert len(pool) == 0
        assert len(updates) == 3

    def test_capacity_never_exceeded(self, city, make_building):
        home = make_building(2, 2, "R", residents=8)
        pool = ResidentApplicantPool()
        pool.waiting = [2, 2]
        pool.growth_tick(city)
        assert home.residents == Defaults.RESIDENTIAL_CAPACITY
        assert pool.waiting == [1, 1, 1]

    def test_first_home_in_scan_order_fills_first(self, city, make_building):
        first = make_building(5, 1, "R", residents=9)
        second = make_building(0, 2, "R")
        pool = ResidentApplicantPool()
        pool.growth_tick(city)
        assert first.residents == 10
        assert second.residents == 2

    def test_abandoning_homes_skipped(self, city, make_building):
        home = make_building(2, 2, "R", abandon_phase=2)
        pool = ResidentApplicantPool()
        pool.growth_tick(city)
        assert home.residents == 0


def test_recount_population(city, make_building):
    make_building(1, 1, "R", residents=4)
    make_building(2, 1, "R", residents=7)
    make_building(3, 1, "I", employees=3)
    assert recount_population(city) == 11
    assert city.population == 11
