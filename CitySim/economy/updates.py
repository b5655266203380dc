from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from CitySim.agents.city_structure_entities.building import Building
    from CitySim.city_model import CityModel


class BuildingUpdate:
    __slots__ = ("x", "y", "building")

    def __init__(self, x: int, y: int, building: "Building | None") -> None:
        self.x = x
        self.y = y
        self.building = building

    def resolve(self, city: "CityModel") -> "BuildingUpdate":
        """Point at whatever building lives on the tile *now* (None if it is gone)."""
        if city.in_bounds(self.x, self.y):
            self.building = city.get_tile(self.x, self.y).building
        return self

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "building": self.building.to_dict() if self.building is not None else None,
        }

    def __repr__(self):
        return f"<BuildingUpdate ({self.x},{self.y}) {self.building!r}>"
