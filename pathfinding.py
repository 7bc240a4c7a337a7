# Toroidal A* search and flood fill used by the autopilot.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import heapq
import itertools
from typing import Iterable

try:
    from .toroidal_grid import Position, neighbours, occupancy_board, wrap_distance
except ImportError:
    from toroidal_grid import Position, neighbours, occupancy_board, wrap_distance


@dataclass
class PathNode:
    position: Position
    g: int
    h: int
    parent: PathNode | None = None

    @property
    def f(self) -> int:
        return self.g + self.h


def _reconstruct(node: PathNode) -> list[Position]:
    path: list[Position] = []
    while node.parent is not None:
        path.append(node.position)
        node = node.parent
    path.reverse()
    return path


def find_path(
    start: Position,
    goal: Position,
    obstacles: Iterable[Position],
    tile_count: int,
) -> list[Position]:
    """
    A* over the wrap-around board.

    Returns the cells after `start` up to and including `goal`, or an empty
    list when the goal cannot be reached. Nodes with equal f are expanded in
    the order they were discovered, which keeps the chosen path reproducible.
    """
    if start == goal:
        return []
    blocked = obstacles if isinstance(obstacles, (set, frozenset)) else set(obstacles)

    discovery = itertools.count()
    root = PathNode(start, 0, wrap_distance(start, goal, tile_count))
    open_heap: list[tuple[int, int, PathNode]] = [(root.f, next(discovery), root)]
    open_g: dict[Position, int] = {start: 0}
    closed: set[Position] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current.position in closed:
            continue  # stale entry superseded by a cheaper one
        if current.position == goal:
            return _reconstruct(current)
        closed.add(current.position)

        for _direction, neighbour in neighbours(current.position, tile_count):
            if neighbour in closed or neighbour in blocked:
                continue
            g = current.g + 1
            known = open_g.get(neighbour)
            if known is not None and known <= g:
                continue
            open_g[neighbour] = g
            node = PathNode(neighbour, g, wrap_distance(neighbour, goal, tile_count), current)
            heapq.heappush(open_heap, (node.f, next(discovery), node))

    return []


def flood_fill_count(start: Position, obstacles: Iterable[Position], tile_count: int) -> int:
    """Number of free tiles reachable from `start` (0 if `start` itself is blocked)."""
    visited = occupancy_board(obstacles, tile_count)
    x, y = start
    if visited[y, x]:
        return 0

    visited[y, x] = True
    frontier: deque[Position] = deque([start])
    count = 0
    while frontier:
        position = frontier.popleft()
        count += 1
        for _direction, (nx, ny) in neighbours(position, tile_count):
            if not visited[ny, nx]:
                visited[ny, nx] = True
                frontier.append((nx, ny))
    return count
