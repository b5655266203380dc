from __future__ import annotations

from typing import TYPE_CHECKING

from CitySim.config import Defaults

if TYPE_CHECKING:
    from CitySim.city_model import CityModel


def sign(v: float) -> float:
    return -1.0 if v < 0 else 1.0


def adjacent_road(city: "CityModel", x: int, y: int) -> tuple[int, int] | None:
    """First orthogonal neighbour of (x, y) that carries a road, in E/W/S/N order."""
    for dx, dy in Defaults.DIRECTION_VECTORS:
        nx, ny = x + dx, y + dy
        if city.in_bounds(nx, ny) and city.road_map[ny, nx]:
            return nx, ny
    return None


def clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))
