from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from mesa import Agent

from CitySim.config import Defaults
from CitySim.agents.player import Player
from CitySim.economy.demand import residential_slots
from CitySim.utilities.road_growth import RoadGrowthPlanner

if TYPE_CHECKING:
    from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)


class AIController(Agent):
    """
    Scripted "Planner" player. Every few ticks it pushes the road network
    outward and zones land next to roads according to current demand.
    """

    def __init__(self, model, player: Player):
        super().__init__(model)
        self.city_model = cast("CityModel", model)
        self.player = player
        self.last_action_tick = 0
        self.planner = RoadGrowthPlanner(self.city_model, self.city_model.random)

    # ════════════════════════════════════════════════════════════════
    #  Public step (called from the slow tick with the lock held)
    # ════════════════════════════════════════════════════════════════
    def step(self):
        city = self.city_model
        if city.tick - self.last_action_tick < Defaults.AI_ACTION_INTERVAL:
            return
        if self.player.money < Defaults.AI_MIN_MONEY:
            return
        self.last_action_tick = city.tick

        self.ensure_some_roads()

        road_done = False
        if self.random.random() < Defaults.AI_ROAD_EXTEND_CHANCE:
            self.planner.grow(self.player)
            road_done = True

        if not road_done or self.random.random() < Defaults.AI_ZONE_AFTER_ROAD_BIAS:
            self.place_zones()

    # ------------------------------------------------------------------
    def ensure_some_roads(self) -> None:
        """Lay a small cross at the map centre when the map has no road at all."""
        city = self.city_model
        if city.road_map.any():
            return
        cx, cy = city.width // 2, city.height // 2
        arm = Defaults.AI_SEED_ROAD_ARM
        for dx in range(-arm, arm + 1):
            city.place_road_locked(self.player, cx + dx, cy)
        for dy in range(-arm, arm + 1):
            city.place_road_locked(self.player, cx, cy + dy)
        logger.info("Planner seeded initial road cross at (%d,%d)", cx, cy)

    def place_zones(self) -> int:
        city = self.city_model
        zone_type = self.pick_zone_type()
        placed = 0
        for _ in range(Defaults.AI_ZONE_ATTEMPTS):
            spot = self.find_zone_spot_near_road()
            if spot is None:
                break
            x, y = spot
            if city.was_recently_roaded(x, y):
                continue
            if self.encases_road(x, y):
                continue
            if city.place_zone_locked(self.player, x, y, zone_type):
                placed += 1
        return placed

    # ------------------------------------------------------------------
    # Heuristics
    # ------------------------------------------------------------------
    def pick_zone_type(self) -> str:
        """Highest adjusted demand wins; ties favour R, then C, then I."""
        city = self.city_model
        d = city.demand
        unemployed = max(0, city.population - city.employed)
        res_cap, res_used = residential_slots(city)
        open_res = res_cap - res_used

        r_score = d.residential
        c_score = d.commercial + Defaults.AI_COMMERCIAL_BIAS
        i_score = d.industrial

        if unemployed < 5:
            i_score -= 8
        elif unemployed < 15:
            i_score -= 4
        if open_res <= 0:
            r_score += 10
        elif open_res < 10:
            r_score += 5
        if unemployed > 10 and open_res > 5:
            c_score += 2

        best, best_val = Defaults.RESIDENTIAL, r_score
        if c_score > best_val:
            best, best_val = Defaults.COMMERCIAL, c_score
        if i_score > best_val:
            best = Defaults.INDUSTRIAL
        return best

    def find_zone_spot_near_road(self) -> tuple[int, int] | None:
        city = self.city_model
        roads = city.road_cells()
        if not roads:
            return None
        for i in range(min(len(roads), Defaults.AI_ZONE_SHUFFLE_WINDOW)):
            j = self.random.randrange(len(roads))
            roads[i], roads[j] = roads[j], roads[i]
        for rx, ry in roads:
            for dx, dy in Defaults.DIRECTION_VECTORS:
                nx, ny = rx + dx, ry + dy
                if not city.in_bounds(nx, ny):
                    continue
                tile = city.get_tile(nx, ny)
                if not tile.has_ground_feature() and not tile.is_water():
                    return nx, ny
        return None

    def encases_road(self, x: int, y: int) -> bool:
        """
        True if zoning (x, y) would box in its only neighbouring road: exactly
        one adjacent road and no other open orthogonal tile.
        """
        city = self.city_model
        if not city.in_bounds(x, y):
            return False
        tile = city.get_tile(x, y)
        if tile.has_ground_feature() or tile.is_water():
            return False
        road_count = 0
        open_alternatives = 0
        for dx, dy in Defaults.DIRECTION_VECTORS:
            nx, ny = x + dx, y + dy
            if not city.in_bounds(nx, ny):
                continue
            nt = city.get_tile(nx, ny)
            if nt.road is not None:
                road_count += 1
            elif nt.zone is None and nt.structure is None and not nt.is_water():
                open_alternatives += 1
        return road_count == 1 and open_alternatives == 0
