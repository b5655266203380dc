from __future__ import annotations

from typing import TYPE_CHECKING

from CitySim.config import Defaults
from CitySim.utilities.pathfinding.bfs_python import bfs_python

if TYPE_CHECKING:
    from CitySim.city_model import CityModel

if Defaults.PATHFINDING_METHOD == "NUMBA":
    from CitySim.utilities.pathfinding.bfs_numba import bfs_numba as bfs
else:
    bfs = bfs_python


def road_path(city: "CityModel", start: tuple[int, int], goal: tuple[int, int],
              limit: int = Defaults.PATH_LIMIT_LOCAL) -> list[tuple[int, int]]:
    """
    Path over live road topology. The caller must hold ``city.lock``.

    Returns ``[]`` when *goal* is unreachable within *limit* discovered nodes.
    """
    if not (city.in_bounds(*start) and city.in_bounds(*goal)):
        return []
    return bfs(city.road_map, tuple(start), tuple(goal), limit)
