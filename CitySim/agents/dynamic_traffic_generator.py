from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, cast

from mesa import Agent

from CitySim.config import Defaults
from CitySim.agents.citizen_group import CitizenGroupAgent
from CitySim.agents.vehicles.goods_shipment import GoodShipmentAgent
from CitySim.agents.vehicles.vehicle_base import PathFollowingAgent, VehicleAgent
from CitySim.utilities.general import adjacent_road
from CitySim.utilities.pathfinding import road_path

if TYPE_CHECKING:  # avoid circular at runtime
    from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────
#  Main agent
# ──────────────────────────────────────────────────────────────────────
class DynamicTrafficAgent(Agent):
    """Moves and spawns **vehicles**, **goods** and **citizen groups** on the fast clock."""

    # ------------------------------------------------------------------
    def __init__(self, model):
        super().__init__(model)
        self.city_model = cast("CityModel", model)

        self.vehicle_seq = 0
        self.goods_seq = 0
        self.citizen_seq = 0

        # seconds accumulated toward the next spawn round of each kind
        self.vehicle_spawn_acc = 0.0
        self.goods_spawn_acc = 0.0
        self.citizen_spawn_acc = 0.0

    # ════════════════════════════════════════════════════════════════
    #  Public step
    # ════════════════════════════════════════════════════════════════
    def step(self, dt: float):
        city = self.city_model
        city.vehicles = self._advance_all(city.vehicles, dt)
        self._update_citizens(dt)
        city.goods_ic = self._advance_all(city.goods_ic, dt)
        city.goods_cc = self._advance_all(city.goods_cc, dt)

        self.vehicle_spawn_acc += dt
        if self.vehicle_spawn_acc >= Defaults.VEHICLE_SPAWN_INTERVAL:
            self.vehicle_spawn_acc -= Defaults.VEHICLE_SPAWN_INTERVAL
            self.spawn_vehicles()

        self.citizen_spawn_acc += dt
        if self.citizen_spawn_acc >= Defaults.CITIZEN_SPAWN_INTERVAL:
            self.citizen_spawn_acc -= Defaults.CITIZEN_SPAWN_INTERVAL
            self.spawn_citizen_groups()

        self.goods_spawn_acc += dt
        if self.goods_spawn_acc >= Defaults.GOODS_SPAWN_INTERVAL:
            self.goods_spawn_acc -= Defaults.GOODS_SPAWN_INTERVAL
            self.spawn_goods_shipments()

    # ════════════════════════════════════════════════════════════════
    #  Movement
    # ════════════════════════════════════════════════════════════════
    @staticmethod
    def _advance_all(agents: list[PathFollowingAgent], dt: float) -> list[PathFollowingAgent]:
        kept = []
        for ag in agents:
            ag.advance(dt)
            if ag.has_arrived():
                ag.remove()
            else:
                kept.append(ag)
        return kept

    def _update_citizens(self, dt: float) -> None:
        city = self.city_model
        kept = []
        for group in city.citizen_groups:
            if group.step(dt):
                kept.append(group)
            else:
                group.remove()
        city.citizen_groups = kept

    # ════════════════════════════════════════════════════════════════
    #  Spawning
    # ════════════════════════════════════════════════════════════════
    def spawn_vehicles(self) -> int:
        city = self.city_model
        desired = min(city.population // Defaults.VEHICLE_POPULATION_DIVISOR, Defaults.VEHICLE_MAX)
        deficit = min(desired - len(city.vehicles), Defaults.VEHICLE_MAX_SPAWN_PER_INTERVAL)
        if deficit <= 0:
            return 0
        roads = city.road_cells()
        if len(roads) < 2:
            return 0

        spawned = 0
        for _ in range(deficit):
            a = self.random.choice(roads)
            b = self.random.choice(roads)
            if a == b:
                continue
            path = road_path(city, a, b, Defaults.PATH_LIMIT_LOCAL)
            if len(path) < 2:
                continue
            self.vehicle_seq += 1
            city.vehicles.append(VehicleAgent(city, self.vehicle_seq, path))
            spawned += 1
        return spawned

    def _freight_path(self, a: tuple[int, int], b: tuple[int, int]) -> list[tuple[int, int]]:
        city = self.city_model
        a_road = adjacent_road(city, *a)
        b_road = adjacent_road(city, *b)
        if a_road is None or b_road is None:
            return []
        return road_path(city, a_road, b_road, Defaults.PATH_LIMIT_FREIGHT)

    def _goods_in_flight(self) -> int:
        return len(self.city_model.goods_ic) + len(self.city_model.goods_cc)

    def spawn_goods_shipments(self) -> int:
        city = self.city_model
        if self._goods_in_flight() >= Defaults.GOODS_MAX:
            return 0
        inds = [t.get_position() for t, _ in city.iter_buildings(Defaults.INDUSTRIAL)]
        comm = [t.get_position() for t, _ in city.iter_buildings(Defaults.COMMERCIAL)]

        spawned = 0
        if inds and comm:
            for _ in range(Defaults.GOODS_SPAWN_TRIES):
                path = self._freight_path(self.random.choice(inds), self.random.choice(comm))
                if len(path) < 2:
                    continue
                self.goods_seq += 1
                city.goods_ic.append(GoodShipmentAgent(city, self.goods_seq, path, "IC"))
                spawned += 1
                break

        if len(comm) > 1 and self._goods_in_flight() < Defaults.GOODS_MAX:
            for _ in range(Defaults.GOODS_SPAWN_TRIES):
                a = self.random.choice(comm)
                b = self.random.choice(comm)
                if a == b:
                    continue
                path = self._freight_path(a, b)
                if len(path) < 2:
                    continue
                self.goods_seq += 1
                city.goods_cc.append(GoodShipmentAgent(city, self.goods_seq, path, "CC"))
                spawned += 1
                break
        return spawned

    def spawn_citizen_groups(self) -> int:
        city = self.city_model
        if len(city.citizen_groups) >= Defaults.CITIZEN_GROUPS_MAX:
            return 0
        homes = [t.get_position() for t, _ in city.iter_buildings(Defaults.RESIDENTIAL)]
        jobs = [t.get_position() for t, b in city.iter_buildings()
                if b.zone_type in (Defaults.COMMERCIAL, Defaults.INDUSTRIAL)]
        if not homes or not jobs:
            return 0

        for _ in range(Defaults.CITIZEN_SPAWN_TRIES):
            origin = self.random.choice(homes)
            dest = self.random.choice(jobs)
            segment = self._freight_path(origin, dest)
            if not segment:
                continue
            path = [origin] + segment + [dest]
            count = self.random.randint(Defaults.CITIZEN_GROUP_MIN, Defaults.CITIZEN_GROUP_MAX)
            self.citizen_seq += 1
            group = CitizenGroupAgent(city, self.citizen_seq, path, count, origin, dest)
            origin_tile = city.get_tile(*origin)
            origin_tile.citizens = max(0, origin_tile.citizens - count)
            city.citizen_groups.append(group)
            return 1
        return 0

    # ════════════════════════════════════════════════════════════════
    #  Snapshot
    # ════════════════════════════════════════════════════════════════
    def snapshot(self) -> dict:
        city = self.city_model
        return {
            "ts": time.time_ns(),
            "vehicles": [v.to_dict() for v in city.vehicles],
            "goodsIC": [g.to_dict() for g in city.goods_ic],
            "goodsCC": [g.to_dict() for g in city.goods_cc],
            "citizens": [g.to_dict() for g in city.citizen_groups if g.is_moving()],
        }
