# Wrap-around grid geometry shared by the simulation and the autopilot.
from __future__ import annotations

from typing import Iterable

import numpy as np


Position = tuple[int, int]

# Screen coordinates: y grows downward.
DIRECTION_VECTORS: dict[str, tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
REVERSE_DIRECTION = {"up": "down", "down": "up", "left": "right", "right": "left"}
# Neighbour order used by the search and the survival heuristic.
SEARCH_ORDER = ("up", "right", "down", "left")


def wrap(position: Position, tile_count: int) -> Position:
    x, y = position
    return x % tile_count, y % tile_count


def step(position: Position, direction: str, tile_count: int) -> Position:
    """Move one tile, re-entering on the opposite edge instead of clamping."""
    dx, dy = DIRECTION_VECTORS[direction]
    x, y = position
    return wrap((x + dx, y + dy), tile_count)


def _axis_delta(a: int, b: int, tile_count: int) -> int:
    delta = (b - a) % tile_count
    if delta > tile_count // 2:
        delta -= tile_count
    return delta


def wrap_delta(a: Position, b: Position, tile_count: int) -> tuple[int, int]:
    """Shortest signed offset from a to b on each axis."""
    return _axis_delta(a[0], b[0], tile_count), _axis_delta(a[1], b[1], tile_count)


def wrap_distance(a: Position, b: Position, tile_count: int) -> int:
    """Manhattan distance where each axis may go around the edge."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return min(dx, tile_count - dx) + min(dy, tile_count - dy)


def neighbours(position: Position, tile_count: int) -> list[tuple[str, Position]]:
    return [(direction, step(position, direction, tile_count)) for direction in SEARCH_ORDER]


def direction_between(a: Position, b: Position, tile_count: int) -> str:
    """Direction of the single move from a to the adjacent cell b.

    A raw delta of magnitude > 1 only happens across an edge; the wrapped
    delta folds it back into a unit step (x: 0 -> n-1 is a move left).
    """
    delta = wrap_delta(a, b, tile_count)
    for direction, vector in DIRECTION_VECTORS.items():
        if vector == delta:
            return direction
    raise ValueError(f"{b} is not adjacent to {a} on a {tile_count}x{tile_count} grid.")


def occupancy_board(cells: Iterable[Position], tile_count: int) -> np.ndarray:
    """Boolean board indexed [y, x]; True marks an occupied tile."""
    board = np.zeros((tile_count, tile_count), dtype=bool)
    for x, y in cells:
        board[y, x] = True
    return board


def free_cells(blocked: Iterable[Position], tile_count: int) -> list[Position]:
    board = occupancy_board(blocked, tile_count)
    ys, xs = np.nonzero(~board)
    return list(zip(xs.tolist(), ys.tolist()))
