from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from CitySim.config import Defaults

if TYPE_CHECKING:
    from CitySim.agents.player import Player
    from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)


class Endpoint(NamedTuple):
    x: int
    y: int
    dx: int   # growth direction, pointing away from the single neighbour
    dy: int


class StraightSegment(NamedTuple):
    x: int
    y: int
    horizontal: bool


def classify_roads(road_map: np.ndarray) -> tuple[list[Endpoint], list[StraightSegment]]:
    """
    Split road cells into *endpoints* (exactly one road neighbour) and
    *straight segments* (two opposite road neighbours). Both lists come out
    in row-major scan order.
    """
    padded = np.pad(road_map, 1, mode="constant", constant_values=False)
    right = padded[1:-1, 2:]
    left = padded[1:-1, :-2]
    down = padded[2:, 1:-1]
    up = padded[:-2, 1:-1]
    count = right.astype(np.int8) + left + down + up

    endpoints: list[Endpoint] = []
    for y, x in np.argwhere(road_map & (count == 1)):
        dx = 1 if right[y, x] else (-1 if left[y, x] else 0)
        dy = 1 if down[y, x] else (-1 if up[y, x] else 0)
        endpoints.append(Endpoint(int(x), int(y), -dx, -dy))

    segments: list[StraightSegment] = []
    straight = road_map & (count == 2) & ((right & left) | (up & down))
    for y, x in np.argwhere(straight):
        segments.append(StraightSegment(int(x), int(y), bool(right[y, x] and left[y, x])))
    return endpoints, segments


class RoadGrowthPlanner:
    """Extends a road network by straight growth, curves and perpendicular branches."""

    def __init__(self, city: "CityModel", rng: random.Random | None = None) -> None:
        self.city = city
        self.random = rng if rng is not None else city.random

    # ------------------------------------------------------------------
    # Placement rules
    # ------------------------------------------------------------------
    def would_thicken(self, x: int, y: int) -> bool:
        """True if a road at (x, y) would complete a 2×2 block of road."""
        city = self.city
        for ax in (x - 1, x):
            for ay in (y - 1, y):
                if not city.in_bounds(ax, ay) or not city.in_bounds(ax + 1, ay + 1):
                    continue
                corners = ((ax, ay), (ax + 1, ay), (ax, ay + 1), (ax + 1, ay + 1))
                if all(city.road_map[cy, cx] for cx, cy in corners if (cx, cy) != (x, y)):
                    return True
        return False

    def try_place(self, player: "Player", x: int, y: int) -> bool:
        city = self.city
        if not city.in_bounds(x, y) or self.would_thicken(x, y):
            return False
        tile = city.get_tile(x, y)
        if tile.is_water() or tile.road is not None:
            return False
        if not player.can_afford(Defaults.ROAD_COST):
            return False
        if not tile.is_empty():
            # single obstacle in the way is demolished for free
            tile.clear()
            city.publish_bulldozed(x, y)
        return city.place_road_locked(player, x, y)

    # ------------------------------------------------------------------
    # Growth
    # ------------------------------------------------------------------
    def grow(self, player: "Player") -> int:
        """Run up to ``ROAD_MAX_ATTEMPTS`` growth steps; returns the number of roads laid."""
        if player.money < Defaults.ROAD_MIN_MONEY:
            return 0

        placed_total = 0
        for _ in range(Defaults.ROAD_MAX_ATTEMPTS):
            endpoints, segments = classify_roads(self.city.road_map)
            if not endpoints and not segments:
                break

            placed = False
            if segments and self.random.random() < Defaults.ROAD_BRANCH_CHANCE:
                seg = self.random.choice(segments)
                sides = [(0, 1), (0, -1)] if seg.horizontal else [(1, 0), (-1, 0)]
                self.random.shuffle(sides)
                for dx, dy in sides:
                    if self.try_place(player, seg.x + dx, seg.y + dy):
                        placed = True
                        break

            if not placed and endpoints:
                ep = self.random.choice(endpoints)
                if self.random.random() < Defaults.ROAD_CURVE_CHANCE:
                    turns = [(0, 1), (0, -1)] if ep.dx != 0 else [(1, 0), (-1, 0)]
                    self.random.shuffle(turns)
                    for dx, dy in turns:
                        if self.try_place(player, ep.x + dx, ep.y + dy):
                            placed = True
                            break
                if not placed:
                    placed = self.try_place(player, ep.x + ep.dx, ep.y + ep.dy)

            if not placed:
                break
            placed_total += 1

        logger.debug("Road growth laid %d segment(s)", placed_total)
        return placed_total
