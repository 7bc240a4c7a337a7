"""
Tests for toroidal_grid.py - wrap-around board geometry.
"""

import numpy as np
import pytest

from toroidal_grid import (
    SEARCH_ORDER,
    direction_between,
    free_cells,
    neighbours,
    occupancy_board,
    step,
    wrap,
    wrap_delta,
    wrap_distance,
)


class TestStep:
    """Moving one tile re-enters on the opposite edge."""

    @pytest.mark.parametrize(
        "start, direction, expected",
        [
            ((19, 7), "right", (0, 7)),
            ((0, 7), "left", (19, 7)),
            ((7, 0), "up", (7, 19)),
            ((7, 19), "down", (7, 0)),
            ((7, 7), "right", (8, 7)),
        ],
    )
    def test_step_wraps_each_axis(self, start, direction, expected):
        assert step(start, direction, 20) == expected

    def test_wrap_normalizes_negative_and_large_coordinates(self):
        assert wrap((-1, 20), 20) == (19, 0)
        assert wrap((41, -21), 20) == (1, 19)


class TestDistance:
    """Wrap-aware Manhattan distance and offsets."""

    def test_distance_across_the_edge_is_one(self):
        assert wrap_distance((0, 0), (19, 0), 20) == 1
        assert wrap_distance((0, 0), (0, 19), 20) == 1

    def test_distance_takes_the_shorter_way_per_axis(self):
        assert wrap_distance((2, 3), (5, 1), 20) == 5
        assert wrap_distance((0, 0), (10, 10), 20) == 20
        assert wrap_distance((1, 1), (18, 17), 20) == 3 + 4

    def test_wrap_delta_is_signed(self):
        assert wrap_delta((0, 0), (19, 0), 20) == (-1, 0)
        assert wrap_delta((19, 0), (0, 0), 20) == (1, 0)
        assert wrap_delta((5, 5), (5, 8), 20) == (0, 3)


class TestNeighbours:
    """Neighbour generation wraps and follows the search order."""

    def test_order_is_up_right_down_left(self):
        result = neighbours((0, 0), 20)
        assert [direction for direction, _ in result] == list(SEARCH_ORDER)
        assert [cell for _, cell in result] == [(0, 19), (1, 0), (0, 1), (19, 0)]


class TestDirectionBetween:
    """Single-step direction, with wrap deltas folded into unit moves."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ((0, 0), (19, 0), "left"),
            ((19, 5), (0, 5), "right"),
            ((3, 0), (3, 19), "up"),
            ((3, 19), (3, 0), "down"),
            ((4, 4), (4, 3), "up"),
            ((4, 4), (5, 4), "right"),
        ],
    )
    def test_adjacent_cells(self, a, b, expected):
        assert direction_between(a, b, 20) == expected

    def test_non_adjacent_cells_raise(self):
        with pytest.raises(ValueError):
            direction_between((0, 0), (2, 0), 20)
        with pytest.raises(ValueError):
            direction_between((0, 0), (1, 1), 20)

    def test_agrees_with_step_for_every_cell(self):
        for x in range(5):
            for y in range(5):
                for direction in SEARCH_ORDER:
                    target = step((x, y), direction, 5)
                    assert direction_between((x, y), target, 5) == direction

    def test_two_tiles_across_the_edge_is_not_adjacent(self):
        with pytest.raises(ValueError):
            direction_between((0, 0), (18, 0), 20)
        with pytest.raises(ValueError):
            direction_between((0, 1), (0, 19), 20)


class TestBoards:
    """Numpy occupancy boards and free-cell enumeration."""

    def test_occupancy_board_is_indexed_y_then_x(self):
        board = occupancy_board([(3, 1)], 5)
        assert board.shape == (5, 5)
        assert board.dtype == np.bool_
        assert board[1, 3]
        assert int(board.sum()) == 1

    def test_free_cells_lists_every_unblocked_tile(self):
        blocked = {(x, y) for x in range(5) for y in range(5)} - {(2, 4)}
        assert free_cells(blocked, 5) == [(2, 4)]

    def test_free_cells_on_full_board_is_empty(self):
        blocked = {(x, y) for x in range(5) for y in range(5)}
        assert free_cells(blocked, 5) == []
