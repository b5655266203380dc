# vehicle_base.py – path following with a per-tick movement budget
from __future__ import annotations

from typing import TYPE_CHECKING, cast

from mesa import Agent

from CitySim.config import Defaults
from CitySim.utilities.general import sign

if TYPE_CHECKING:
    from CitySim.city_model import CityModel


class PathFollowingAgent(Agent):
    """
    Base for every moving thing on the map. Holds a continuous position and
    a list of grid cells still to visit; ``advance`` spends ``speed * dt``
    of Manhattan distance, rolling leftover budget into the next segment.
    """

    speed: float = 1.0

    def __init__(self, model, custom_id: int, path: list[tuple[int, int]]):
        super().__init__(model)
        self.id = custom_id
        self.city_model = cast("CityModel", model)
        start = path[0]
        self.x = float(start[0])
        self.y = float(start[1])
        self.path: list[tuple[int, int]] = list(path[1:])
        self.path_index = 0

    # ------------------------------------------------------------
    #  Movement
    # ------------------------------------------------------------
    def set_path(self, path: list[tuple[int, int]]) -> None:
        self.path = list(path)
        self.path_index = 0

    def has_arrived(self) -> bool:
        return self.path_index >= len(self.path)

    def advance(self, dt: float) -> None:
        remain = self.speed * dt
        while remain > 0 and self.path_index < len(self.path):
            tx, ty = self.path[self.path_index]
            dx = tx - self.x
            dy = ty - self.y
            dist = abs(dx) + abs(dy)
            if dist <= remain:
                self.x, self.y = float(tx), float(ty)
                self.path_index += 1
                remain -= dist
            else:
                if dx != 0:
                    self.x += remain * sign(dx)
                elif dy != 0:
                    self.y += remain * sign(dy)
                remain = 0

    def get_position(self) -> tuple[float, float]:
        return self.x, self.y

    def to_dict(self) -> dict:
        return {"id": self.id, "x": self.x, "y": self.y}

    def __repr__(self):
        return f"<{type(self).__name__} {self.id} @({self.x:.2f},{self.y:.2f})>"


class VehicleAgent(PathFollowingAgent):
    """Ambient car driving between two random road cells."""

    speed = Defaults.VEHICLE_SPEED
