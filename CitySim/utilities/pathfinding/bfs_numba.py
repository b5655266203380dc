import numpy as np
from numba import njit


@njit(cache=True)
def _bfs_kernel(road_map, sx, sy, gx, gy, limit):
    """
    Flat-index BFS. Returns an (n, 2) int64 array of (x, y) from start to
    goal, or an empty (0, 2) array when the goal was not discovered.
    """
    height, width = road_map.shape
    n_cells = height * width
    prev = np.full(n_cells, -1, dtype=np.int64)
    visited = np.zeros(n_cells, dtype=np.bool_)
    queue = np.empty(n_cells, dtype=np.int64)

    dxs = np.array([1, -1, 0, 0], dtype=np.int64)
    dys = np.array([0, 0, 1, -1], dtype=np.int64)

    start = sy * width + sx
    goal = gy * width + gx
    head = 0
    tail = 0
    queue[tail] = start
    tail += 1
    visited[start] = True
    discovered = 0

    while head < tail and discovered < limit:
        cur = queue[head]
        head += 1
        if cur == goal:
            break
        cx = cur % width
        cy = cur // width
        for k in range(4):
            nx = cx + dxs[k]
            ny = cy + dys[k]
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            if not road_map[ny, nx]:
                continue
            n = ny * width + nx
            if not visited[n]:
                visited[n] = True
                prev[n] = cur
                queue[tail] = n
                tail += 1
                discovered += 1

    if prev[goal] == -1:
        return np.empty((0, 2), dtype=np.int64)

    length = 1
    c = goal
    while c != start:
        c = prev[c]
        length += 1

    out = np.empty((length, 2), dtype=np.int64)
    c = goal
    i = length - 1
    while i >= 0:
        out[i, 0] = c % width
        out[i, 1] = c // width
        if c == start:
            break
        c = prev[c]
        i -= 1
    return out


def bfs_numba(road_map: np.ndarray, start: tuple[int, int], goal: tuple[int, int],
              limit: int) -> list[tuple[int, int]]:
    """JIT-compiled twin of :func:`bfs_python`; same inputs, same result."""
    if start == goal:
        return [start]
    coords = _bfs_kernel(road_map, int(start[0]), int(start[1]), int(goal[0]), int(goal[1]), int(limit))
    return [(int(x), int(y)) for x, y in coords]
