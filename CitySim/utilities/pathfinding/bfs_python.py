from collections import deque

import numpy as np

from CitySim.config import Defaults


def bfs_python(road_map: np.ndarray, start: tuple[int, int], goal: tuple[int, int],
               limit: int) -> list[tuple[int, int]]:
    """
    Breadth-first search over 4-connected road cells.

    Exploration stops once *limit* nodes have been discovered. The start cell
    does not need to be a road, every other cell on the path does.
    """
    if start == goal:
        return [start]

    height, width = road_map.shape
    queue = deque([start])
    prev: dict[tuple[int, int], tuple[int, int]] = {}
    visited = {start}

    while queue and len(prev) < limit:
        cur = queue.popleft()
        if cur == goal:
            break
        cx, cy = cur
        for dx, dy in Defaults.DIRECTION_VECTORS:
            nx, ny = cx + dx, cy + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            if not road_map[ny, nx]:
                continue
            npos = (nx, ny)
            if npos not in visited:
                visited.add(npos)
                prev[npos] = cur
                queue.append(npos)

    if goal not in prev:
        return []

    path = [goal]
    cur = goal
    while cur != start:
        cur = prev[cur]
        path.append(cur)
    path.reverse()
    return path
