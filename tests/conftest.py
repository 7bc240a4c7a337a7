"""Shared fixtures for the Snake simulation tests."""

import os

# Headless plotting for the stats CLI tests.
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from game_logic import SnakeConfig, SnakeGame


@pytest.fixture
def serpentine():
    """Boustrophedon walk over a size x size board, as a list of cells."""

    def build(size):
        cells = []
        for y in range(size):
            xs = range(size) if y % 2 == 0 else range(size - 1, -1, -1)
            cells.extend((x, y) for x in xs)
        return cells

    return build


@pytest.fixture
def make_game():
    """Seeded game factory; extra keyword arguments go to SnakeConfig."""

    def build(**overrides):
        overrides.setdefault("seed", 1234)
        return SnakeGame(SnakeConfig(**overrides))

    return build
