from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from CitySim.config import Defaults
from CitySim.utilities.general import clamp

if TYPE_CHECKING:
    from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)


class Demand:
    """Residential / commercial / industrial pressure, each kept in [DEMAND_MIN, DEMAND_MAX]."""

    FIELDS = ("residential", "commercial", "industrial")

    def __init__(self, residential: int = Defaults.INITIAL_DEMAND["residential"],
                 commercial: int = Defaults.INITIAL_DEMAND["commercial"],
                 industrial: int = Defaults.INITIAL_DEMAND["industrial"]) -> None:
        self.residential = residential
        self.commercial = commercial
        self.industrial = industrial
        self.clamp()

    def clamp(self) -> None:
        for name in self.FIELDS:
            setattr(self, name, clamp(getattr(self, name), Defaults.DEMAND_MIN, Defaults.DEMAND_MAX))

    def drift(self, rng: random.Random) -> None:
        """Baseline random walk applied every tick."""
        for name in self.FIELDS:
            delta = rng.randint(-Defaults.DEMAND_DRIFT, Defaults.DEMAND_DRIFT)
            setattr(self, name, getattr(self, name) + delta)
        self.clamp()

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.FIELDS}

    def __repr__(self):
        return f"<Demand R={self.residential} C={self.commercial} I={self.industrial}>"


# ──────────────────────────────────────────────────────────────────────
#  Employment / demand feedback
# ──────────────────────────────────────────────────────────────────────
def residential_slots(city: "CityModel") -> tuple[int, int]:
    """Return ``(capacity, occupied)`` over active residential buildings."""
    capacity = 0
    used = 0
    for _, b in city.iter_buildings(Defaults.RESIDENTIAL):
        if b.is_active():
            capacity += Defaults.RESIDENTIAL_CAPACITY
            used += b.residents
    return capacity, used


def employment_demand_adjust(city: "CityModel") -> None:
    """Recount employment, push demand around and trigger light out-migration."""
    job_capacity = 0
    employed = 0
    for _, b in city.iter_buildings():
        if not b.is_active():
            continue
        if b.zone_type == Defaults.INDUSTRIAL:
            job_capacity += Defaults.INDUSTRIAL_CAPACITY
        elif b.zone_type == Defaults.COMMERCIAL:
            job_capacity += Defaults.COMMERCIAL_CAPACITY
        employed += b.employees
    city.employed = employed

    if city.population == 0:
        return

    demand = city.demand
    ratio = (city.population - employed) / city.population

    res_cap, res_used = residential_slots(city)
    open_slots = res_cap - res_used
    if res_cap == 0:
        demand.residential += 8
    elif open_slots <= 0:
        demand.residential += 6
    elif open_slots < 8:
        demand.residential += 3
    elif open_slots > 50:
        demand.residential -= 4
    elif open_slots > 30:
        demand.residential -= 2

    unfilled = job_capacity - employed
    if unfilled > 0:
        bonus = min(unfilled // Defaults.UNFILLED_JOBS_BONUS_DIVISOR, Defaults.UNFILLED_JOBS_BONUS_CAP)
        if bonus > 0:
            demand.residential += bonus

    if ratio > Defaults.UNEMPLOYMENT_HIGH_RATIO:
        demand.industrial += 2
        demand.commercial += 1
        if city.random.random() < ratio * Defaults.OUT_MIGRATION_CHANCE_SCALE:
            target = city.random.randint(Defaults.OUT_MIGRATION_MIN, Defaults.OUT_MIGRATION_MAX)
            removed = 0
            for _, b in city.iter_buildings(Defaults.RESIDENTIAL):
                if removed >= target:
                    break
                if b.residents > 0:
                    b.residents -= 1
                    removed += 1
            logger.debug("Out-migration removed %d residents (unemployment %.2f)", removed, ratio)
    elif ratio < Defaults.UNEMPLOYMENT_LOW_RATIO:
        demand.residential -= 1

    demand.clamp()
