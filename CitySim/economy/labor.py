from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from CitySim.config import Defaults
from CitySim.agents.city_structure_entities.building import Building
from CitySim.economy.updates import BuildingUpdate

if TYPE_CHECKING:
    from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────
#  Workforce
# ──────────────────────────────────────────────────────────────────────
def _trim_workers(inds: list[Building], comm: list[Building], diff: int) -> None:
    """Remove *diff* workers, commercial first, walking each list backwards."""
    while diff > 0:
        changed = False
        for group in (comm, inds):
            for b in reversed(group):
                if diff == 0:
                    break
                if b.is_abandoning() or b.employees == 0:
                    continue
                b.employees -= 1
                diff -= 1
                changed = True
        if not changed:
            break


def _hire_workers(inds: list[Building], comm: list[Building], diff: int) -> None:
    """Add *diff* workers: one per industry, one per shop, then round-robin fill."""
    for group in (inds, comm):
        for b in group:
            if diff == 0:
                return
            if not b.is_abandoning() and b.employees == 0 and b.capacity > 0:
                b.employees = 1
                diff -= 1

    while diff > 0:
        progress = False
        for group in (inds, comm):
            for b in group:
                if diff == 0:
                    break
                if not b.is_abandoning() and b.employees < b.capacity:
                    b.employees += 1
                    diff -= 1
                    progress = True
        if not progress:
            break


def _distribute_goods(inds: list[Building], comm: list[Building]) -> int:
    produced = 0
    for b in inds:
        if b.employees > 0:
            produced += max(1, b.employees // Defaults.INDUSTRIAL_CAPACITY)

    delivered = 0
    if not comm:
        return delivered
    while produced > 0:
        progress = False
        for b in comm:
            if produced == 0:
                break
            if b.add_supply():
                produced -= 1
                delivered += 1
                progress = True
        if not progress:
            break
    return delivered


# ──────────────────────────────────────────────────────────────────────
#  Allocation + abandonment state machine
# ──────────────────────────────────────────────────────────────────────
def allocate_labor_and_supplies(city: "CityModel") -> list[BuildingUpdate]:
    """
    Move the workforce toward ``min(job capacity, population)`` without
    resetting existing jobs, ship industrial output into shops, then run the
    idle / abandonment bookkeeping for every finished building.
    """
    refs = list(city.iter_buildings())
    inds = [b for _, b in refs if b.zone_type == Defaults.INDUSTRIAL]
    comm = [b for _, b in refs if b.zone_type == Defaults.COMMERCIAL]
    res = [b for _, b in refs if b.zone_type == Defaults.RESIDENTIAL]

    job_capacity = len(inds) * Defaults.INDUSTRIAL_CAPACITY + len(comm) * Defaults.COMMERCIAL_CAPACITY
    target_workers = min(job_capacity, city.population)
    current_workers = sum(b.employees for b in inds + comm if not b.is_abandoning())

    if current_workers > target_workers:
        _trim_workers(inds, comm, current_workers - target_workers)
    elif current_workers < target_workers:
        _hire_workers(inds, comm, target_workers - current_workers)

    _distribute_goods(inds, comm)

    customer_pool = sum(b.residents for b in res)

    updates: list[BuildingUpdate] = []
    for tile, b in refs:
        x, y = tile.get_position()
        if b.is_abandoning():
            b.abandon_phase -= 1
            if b.abandon_phase == 0:
                tile.zone = None
                tile.building = None
                logger.debug("Abandoned %s building removed at (%d,%d)", b.zone_type, x, y)
                updates.append(BuildingUpdate(x, y, None))
            else:
                updates.append(BuildingUpdate(x, y, b))
            continue

        if b.is_failing(customer_pool):
            b.idle_ticks += 1
        else:
            b.idle_ticks = 0

        if b.idle_ticks >= Building.abandon_threshold_for(b.zone_type):
            b.idle_ticks = 0
            b.abandon_phase = Defaults.ABANDON_PHASE_TICKS
        updates.append(BuildingUpdate(x, y, b))
    return updates
