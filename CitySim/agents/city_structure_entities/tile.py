# tile.py
from __future__ import annotations

import time
from typing import TYPE_CHECKING, cast

from mesa import Agent

from CitySim.config import Defaults
from CitySim.agents.city_structure_entities.building import Building

if TYPE_CHECKING:
    from CitySim.city_model import CityModel


def _now() -> int:
    return int(time.time())


# ──────────────────────────────────────────────────────────────────────
#  Ground features – at most one of them lives on a tile
# ──────────────────────────────────────────────────────────────────────
class Zone:
    __slots__ = ("zone_type", "owner", "placed_at")

    def __init__(self, zone_type: str, owner: str, placed_at: int | None = None) -> None:
        self.zone_type = zone_type
        self.owner = owner
        self.placed_at = _now() if placed_at is None else placed_at

    def to_dict(self) -> dict:
        return {"type": self.zone_type, "owner": self.owner, "placedAt": self.placed_at}

    def __repr__(self):
        return f"<Zone {self.zone_type} owner={self.owner}>"


class Road:
    __slots__ = ("owner", "placed_at")

    def __init__(self, owner: str, placed_at: int | None = None) -> None:
        self.owner = owner
        self.placed_at = _now() if placed_at is None else placed_at

    def to_dict(self) -> dict:
        return {"owner": self.owner, "placedAt": self.placed_at}


class Structure:
    __slots__ = ("kind", "owner", "placed_at")

    def __init__(self, kind: str, owner: str, placed_at: int | None = None) -> None:
        self.kind = kind
        self.owner = owner
        self.placed_at = _now() if placed_at is None else placed_at

    def to_dict(self) -> dict:
        return {"type": self.kind, "owner": self.owner, "placedAt": self.placed_at}


# ──────────────────────────────────────────────────────────────────────
#  Tile agent
# ──────────────────────────────────────────────────────────────────────
class TileAgent(Agent):
    """
    One grid cell of the world. A tile carries terrain data plus at most one
    *ground feature*:
      - Zone       (optionally with a Building layered on top)
      - Road
      - Structure
    ``citizens`` counts the transient commuters currently on the tile.
    """
    def __init__(self, model, position: tuple[int, int], terrain: str = Defaults.DEFAULT_TERRAIN,
                 elevation: int = 0, foliage: str | None = None):
        super().__init__(model)
        self.position = position
        self.city_model = cast("CityModel", model)
        self.terrain = terrain
        self.elevation = elevation
        self.foliage = foliage

        self.zone: Zone | None = None
        self.road: Road | None = None
        self.structure: Structure | None = None
        self.building: Building | None = None
        self.citizens = 0

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def get_position(self) -> tuple[int, int]:
        return self.position

    def is_water(self) -> bool:
        return self.terrain == Defaults.WATER_TERRAIN

    def has_ground_feature(self) -> bool:
        return self.zone is not None or self.road is not None or self.structure is not None

    def is_empty(self) -> bool:
        return not self.has_ground_feature() and self.building is None

    def final_building(self, zone_type: str | None = None) -> Building | None:
        """Return the finished building on this tile, optionally filtered by type."""
        b = self.building
        if b is None or not b.final:
            return None
        if zone_type is not None and b.zone_type != zone_type:
            return None
        return b

    # ------------------------------------------------------------------
    # Mutation – ground features stay mutually exclusive
    # ------------------------------------------------------------------
    def set_zone(self, zone: Zone) -> None:
        self.foliage = None
        self.zone = zone

    def set_road(self, road: Road) -> None:
        self.road = road
        self.city_model.road_map[self.position[1], self.position[0]] = True

    def set_structure(self, structure: Structure) -> None:
        self.structure = structure

    def clear(self) -> bool:
        """Remove every ground feature and building. Returns *True* if anything was removed."""
        had_anything = not self.is_empty()
        if self.road is not None:
            self.city_model.road_map[self.position[1], self.position[0]] = False
        self.zone = None
        self.building = None
        self.road = None
        self.structure = None
        return had_anything

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        x, y = self.position
        out = {"x": x, "y": y, "elevation": self.elevation, "terrain": self.terrain}
        if self.foliage:
            out["foliage"] = self.foliage
        if self.zone is not None:
            out["zone"] = self.zone.to_dict()
        if self.road is not None:
            out["road"] = self.road.to_dict()
        if self.structure is not None:
            out["structure"] = self.structure.to_dict()
        if self.building is not None:
            out["building"] = self.building.to_dict()
        if self.citizens:
            out["citizens"] = self.citizens
        return out

    def __repr__(self):
        return f"<Tile {self.position} {self.terrain}>"
