from __future__ import annotations

import logging
from typing import Literal

from CitySim.config import Defaults
from CitySim.agents.vehicles.vehicle_base import PathFollowingAgent
from CitySim.utilities.general import adjacent_road
from CitySim.utilities.pathfinding import road_path

logger = logging.getLogger(__name__)

OUTBOUND = "outbound"
WORKING = "working"
RETURN = "return"


class CitizenGroupAgent(PathFollowingAgent):
    """
    A handful of residents commuting from home to a job or shop and back.

    States:
      * ``outbound`` – walking/driving to the destination
      * ``working``  – parked at the destination until ``timer`` runs out
      * ``return``   – heading home; credits headcount back on arrival
    """

    speed = Defaults.CITIZEN_SPEED

    def __init__(self, model, custom_id: int, path: list[tuple[int, int]], count: int,
                 origin: tuple[int, int], destination: tuple[int, int]):
        super().__init__(model, custom_id, path)
        self.count = count
        self.state: Literal["outbound", "working", "return"] = OUTBOUND
        self.timer = 0.0
        self.origin = origin
        self.destination = destination

    def is_moving(self) -> bool:
        return self.state != WORKING

    # ════════════════════════════════════════════════════════════
    #  Step – returns False once the group should leave the map
    # ════════════════════════════════════════════════════════════
    def step(self, dt: float) -> bool:
        if self.state == WORKING:
            self.timer -= dt
            if self.timer > 0:
                return True
            if not self._start_return():
                return False

        if not self.has_arrived():
            self.advance(dt)

        if not self.has_arrived():
            return True

        if self.state == OUTBOUND:
            return self._arrive_at_destination()
        if self.state == RETURN:
            self.city_model.get_tile(*self.origin).citizens += self.count
            return False
        return True

    # ------------------------------------------------------------
    def _arrive_at_destination(self) -> bool:
        dest = self.city_model.get_tile(*self.destination)
        if dest.building is not None and dest.building.customers_give_up():
            logger.debug("Citizen group %d gave up at empty shop %s", self.id, self.destination)
            return False
        self.state = WORKING
        self.timer = self.random.uniform(Defaults.CITIZEN_DWELL_MIN, Defaults.CITIZEN_DWELL_MAX)
        dest.citizens += self.count
        return True

    def _start_return(self) -> bool:
        city = self.city_model
        dest_road = adjacent_road(city, *self.destination)
        origin_road = adjacent_road(city, *self.origin)
        if dest_road is None or origin_road is None:
            return False
        segment = road_path(city, dest_road, origin_road, Defaults.PATH_LIMIT_FREIGHT)
        if not segment:
            return False
        self.set_path(segment + [self.origin])
        self.state = RETURN
        dest = city.get_tile(*self.destination)
        dest.citizens = max(0, dest.citizens - self.count)
        return True
