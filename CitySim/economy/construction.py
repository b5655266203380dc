from __future__ import annotations

from typing import TYPE_CHECKING

from CitySim.config import Defaults
from CitySim.agents.city_structure_entities.building import Building
from CitySim.economy.updates import BuildingUpdate

if TYPE_CHECKING:
    from CitySim.city_model import CityModel


def progress_buildings(city: "CityModel") -> list[BuildingUpdate]:
    """Start a building on every bare zone and push unfinished ones one stage further."""
    updates: list[BuildingUpdate] = []
    for tile in city.iter_tiles():
        x, y = tile.get_position()
        if tile.zone is not None and tile.building is None:
            tile.building = Building(tile.zone.zone_type)
            updates.append(BuildingUpdate(x, y, tile.building))
        elif tile.building is not None and not tile.building.final:
            tile.building.advance_construction()
            updates.append(BuildingUpdate(x, y, tile.building))
    return updates


def recount_population(city: "CityModel") -> int:
    city.population = sum(b.residents for _, b in city.iter_buildings(Defaults.RESIDENTIAL))
    return city.population


class ResidentApplicantPool:
    """
    People queueing for housing. Each entry is the number of ticks the
    applicant has waited so far.

    Matching walks the pool by index and every match takes the first free
    residential slot in grid scan order. Unmatched entries are rebuilt with
    one more tick of waiting, so ordering inside a tick follows pool
    position only.
    """

    def __init__(self) -> None:
        self.waiting: list[int] = []

    def __len__(self):
        return len(self.waiting)

    def growth_tick(self, city: "CityModel") -> list[BuildingUpdate]:
        updates: list[BuildingUpdate] = []
        self.waiting.extend([0] * Defaults.NEW_APPLICANTS_PER_TICK)

        assigned: set[int] = set()
        for idx in range(len(self.waiting)):
            target = self._first_open_home(city)
            if target is None:
                continue
            tile, b = target
            b.add_resident()
            x, y = tile.get_position()
            updates.append(BuildingUpdate(x, y, b))
            assigned.add(idx)

        remaining: list[int] = []
        for idx, wait in enumerate(self.waiting):
            if idx in assigned:
                continue
            wait += 1
            if wait > Defaults.APPLICANT_MAX_WAIT:
                continue
            remaining.append(wait)
        self.waiting = remaining
        return updates

    @staticmethod
    def _first_open_home(city: "CityModel"):
        for tile, b in city.iter_buildings(Defaults.RESIDENTIAL):
            if b.is_active() and b.residents < Defaults.RESIDENTIAL_CAPACITY:
                return tile, b
        return None
