# city_model.py ─ the shared world: tiles, players, demand, agents and the lock guarding them
from __future__ import annotations

import logging
import threading
from typing import Iterator

import numpy as np
from mesa import Model

from CitySim.config import Defaults
from CitySim.agents.ai_controller import AIController
from CitySim.agents.city_structure_entities.building import Building
from CitySim.agents.city_structure_entities.tile import Road, Structure, TileAgent, Zone
from CitySim.agents.citizen_group import CitizenGroupAgent
from CitySim.agents.dynamic_traffic_generator import DynamicTrafficAgent
from CitySim.agents.player import Player
from CitySim.agents.vehicles.goods_shipment import GoodShipmentAgent
from CitySim.agents.vehicles.vehicle_base import VehicleAgent
from CitySim.economy.construction import ResidentApplicantPool, progress_buildings, recount_population
from CitySim.economy.demand import Demand, employment_demand_adjust
from CitySim.economy.labor import allocate_labor_and_supplies
from CitySim.scheduling.events import (
    EVENT_BUILDING_UPDATE,
    EVENT_BULLDOZED,
    EVENT_FULL_STATE,
    EVENT_ROAD_PLACED,
    EVENT_STRUCTURE_PLACED,
    EVENT_TICK,
    EVENT_TRAFFIC,
    EVENT_ZONE_PLACED,
    EventPublisher,
    Subscriber,
)

logger = logging.getLogger(__name__)


class CityModel(Model):
    """
    Authoritative world state.

    Every reader and writer – the slow economy tick, the fast traffic tick
    and player actions – goes through ``self.lock``. Public action methods
    take the lock themselves; ``*_locked`` helpers expect the caller to
    hold it already.
    """

    def __init__(self,
                 width=Defaults.WIDTH,
                 height=Defaults.HEIGHT,
                 publisher: EventPublisher | None = None,
                 create_bot: bool = True,
                 seed=None):

        super().__init__(seed=seed)
        self.width = width
        self.height = height
        self.lock = threading.RLock()
        self.publisher = publisher if publisher is not None else EventPublisher()

        self.tiles: list[list[TileAgent]] = []
        self.road_map: np.ndarray = np.zeros((self.height, self.width), dtype=bool)

        self.players: dict[str, Player] = {}
        self.demand = Demand()
        self.tick = 0
        self.population = 0
        self.employed = 0
        self.applicants = ResidentApplicantPool()
        self.recently_roaded: dict[tuple[int, int], int] = {}

        # transient agent collections
        self.vehicles: list[VehicleAgent] = []
        self.goods_ic: list[GoodShipmentAgent] = []
        self.goods_cc: list[GoodShipmentAgent] = []
        self.citizen_groups: list[CitizenGroupAgent] = []

        self._build_terrain()

        self.traffic_generator = DynamicTrafficAgent(self)
        self.bot: AIController | None = None
        if create_bot:
            self.create_bot()

    # -------------------------------------------------------------------
    #  construction helpers
    # -------------------------------------------------------------------
    def _build_terrain(self) -> None:
        for y in range(self.height):
            row = []
            for x in range(self.width):
                tile = TileAgent(self, (x, y))
                row.append(tile)
            self.tiles.append(row)

    def create_bot(self) -> AIController:
        with self.lock:
            if self.bot is None:
                player = Player(Defaults.BOT_NAME, Defaults.BOT_STARTING_MONEY)
                self.players[player.id] = player
                self.bot = AIController(self, player)
                logger.info("AI bot created %s", player.id)
            return self.bot

    @property
    def bot_id(self) -> str | None:
        return self.bot.player.id if self.bot is not None else None

    # -------------------------------------------------------------------
    #  lookups
    # -------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> TileAgent:
        return self.tiles[y][x]

    def iter_tiles(self) -> Iterator[TileAgent]:
        """Row-major scan, y outer and x inner."""
        for row in self.tiles:
            yield from row

    def iter_buildings(self, zone_type: str | None = None) -> Iterator[tuple[TileAgent, Building]]:
        """Finished buildings in scan order, optionally filtered by zone type."""
        for tile in self.iter_tiles():
            b = tile.final_building(zone_type)
            if b is not None:
                yield tile, b

    def road_cells(self) -> list[tuple[int, int]]:
        return [(int(x), int(y)) for y, x in np.argwhere(self.road_map)]

    def was_recently_roaded(self, x: int, y: int) -> bool:
        expiry = self.recently_roaded.get((x, y))
        return expiry is not None and expiry > self.tick

    def get_player(self, player_id: str) -> Player | None:
        return self.players.get(player_id)

    # -------------------------------------------------------------------
    #  events
    # -------------------------------------------------------------------
    def publish(self, event_type: str, payload) -> None:
        self.publisher.publish(event_type, payload)

    def publish_bulldozed(self, x: int, y: int) -> None:
        self.publish(EVENT_BULLDOZED, {"x": x, "y": y})

    def summary(self) -> dict:
        return {
            "tick": self.tick,
            "demand": self.demand.to_dict(),
            "population": self.population,
            "employed": self.employed,
        }

    def full_state(self) -> dict:
        with self.lock:
            state = {
                "width": self.width,
                "height": self.height,
                "tiles": [[tile.to_dict() for tile in row] for row in self.tiles],
                "players": {pid: p.to_dict() for pid, p in self.players.items()},
                "vehicles": [v.to_dict() for v in self.vehicles],
                "goodsIC": [g.to_dict() for g in self.goods_ic],
                "goodsCC": [g.to_dict() for g in self.goods_cc],
                "citizenGroups": [g.to_dict() for g in self.citizen_groups],
            }
            state.update(self.summary())
            if self.bot_id is not None:
                state["botId"] = self.bot_id
            return state

    # ═══════════════════════════════════════════════════════════════════
    #  Connection bootstrap
    # ═══════════════════════════════════════════════════════════════════
    def add_player(self, name: str | None = None) -> Player:
        with self.lock:
            player = Player(name or Defaults.PLAYER_DEFAULT_NAME, Defaults.PLAYER_STARTING_MONEY)
            self.players[player.id] = player
            return player

    def connect(self, name: str | None, subscriber: Subscriber) -> Player:
        """Create a player for a new client, register its queue and send ``full_state``."""
        with self.lock:
            player = self.add_player(name)
            self.publisher.subscribe(subscriber)
            self.publisher.send(subscriber, EVENT_FULL_STATE, self.full_state())
            logger.info("Player %s (%s) connected", player.name, player.id)
            return player

    def disconnect(self, subscriber: Subscriber) -> None:
        self.publisher.unsubscribe(subscriber)

    # ═══════════════════════════════════════════════════════════════════
    #  Player actions – silent no-op (False) on any rejection
    # ═══════════════════════════════════════════════════════════════════
    def place_zone(self, player_id: str, x: int, y: int, zone_type: str) -> bool:
        with self.lock:
            player = self.players.get(player_id)
            if player is None:
                return False
            return self.place_zone_locked(player, x, y, zone_type)

    def place_road(self, player_id: str, x: int, y: int) -> bool:
        with self.lock:
            player = self.players.get(player_id)
            if player is None:
                return False
            return self.place_road_locked(player, x, y)

    def place_structure(self, player_id: str, x: int, y: int, kind: str) -> bool:
        with self.lock:
            player = self.players.get(player_id)
            if player is None:
                return False
            return self.place_structure_locked(player, x, y, kind)

    def bulldoze(self, player_id: str, x: int, y: int) -> bool:
        with self.lock:
            if player_id not in self.players or not self.in_bounds(x, y):
                return False
            tile = self.get_tile(x, y)
            if not tile.clear():
                return False
            self.publish_bulldozed(x, y)
            return True

    # -------------------------------------------------------------------
    #  locked helpers (shared by players and the AI)
    # -------------------------------------------------------------------
    def _free_land(self, x: int, y: int) -> TileAgent | None:
        if not self.in_bounds(x, y):
            return None
        tile = self.get_tile(x, y)
        if tile.has_ground_feature() or tile.is_water():
            return None
        return tile

    def place_zone_locked(self, player: Player, x: int, y: int, zone_type: str) -> bool:
        if zone_type not in Defaults.ZONE_TYPES:
            return False
        tile = self._free_land(x, y)
        if tile is None or not player.charge(Defaults.ZONE_COST):
            return False
        tile.set_zone(Zone(zone_type, player.id))
        self.publish(EVENT_ZONE_PLACED, {"x": x, "y": y, "zone": tile.zone.to_dict()})
        return True

    def place_road_locked(self, player: Player, x: int, y: int) -> bool:
        tile = self._free_land(x, y)
        if tile is None or not player.charge(Defaults.ROAD_COST):
            return False
        tile.set_road(Road(player.id))
        self.recently_roaded[(x, y)] = self.tick + Defaults.RECENT_ROAD_TICKS
        self.publish(EVENT_ROAD_PLACED, {"x": x, "y": y, "road": tile.road.to_dict()})
        return True

    def place_structure_locked(self, player: Player, x: int, y: int, kind: str) -> bool:
        cost = Defaults.STRUCTURE_COSTS.get(kind)
        if cost is None:
            return False
        tile = self._free_land(x, y)
        if tile is None or not player.charge(cost):
            return False
        tile.set_structure(Structure(kind, player.id))
        self.publish(EVENT_STRUCTURE_PLACED, {"x": x, "y": y, "structure": tile.structure.to_dict()})
        return True

    # ═══════════════════════════════════════════════════════════════════
    #  Slow tick – construction, economy, AI
    # ═══════════════════════════════════════════════════════════════════
    def _prune_recent_roads(self) -> None:
        expired = [pos for pos, expiry in self.recently_roaded.items() if expiry <= self.tick]
        for pos in expired:
            del self.recently_roaded[pos]

    def economic_tick(self) -> int:
        income = (self.employed // Defaults.INCOME_PER_EMPLOYED_DIVISOR
                  + self.population // Defaults.INCOME_PER_POPULATION_DIVISOR)
        for player in self.players.values():
            player.credit(income)
        return income

    def step(self):
        with self.lock:
            self._prune_recent_roads()
            self.tick += 1
            self.demand.drift(self.random)

            updates = progress_buildings(self)
            updates += self.applicants.growth_tick(self)
            recount_population(self)
            updates += allocate_labor_and_supplies(self)
            employment_demand_adjust(self)
            self.economic_tick()

            if self.bot is not None:
                self.bot.step()

            # AI bulldozes and abandonment may have replaced buildings since the update was recorded
            for update in updates:
                update.resolve(self)
            if updates:
                self.publish(EVENT_BUILDING_UPDATE, {"updates": [u.to_dict() for u in updates]})
            self.publish(EVENT_TICK, self.summary())
            logger.debug("Tick %d pop=%d employed=%d %r",
                         self.tick, self.population, self.employed, self.demand)

    # ═══════════════════════════════════════════════════════════════════
    #  Fast tick – vehicles, goods, citizens
    # ═══════════════════════════════════════════════════════════════════
    def traffic_step(self, dt: float = Defaults.TRAFFIC_PERIOD_SECONDS) -> None:
        with self.lock:
            self.traffic_generator.step(dt)
            self.publish(EVENT_TRAFFIC, self.traffic_generator.snapshot())
