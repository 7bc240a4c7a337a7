# Autopilot: A* toward food, flood-fill survival when no food is reachable.
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable

try:
    from .game_logic import GameSnapshot, Phase, SnakeGame
    from .pathfinding import find_path, flood_fill_count
    from .toroidal_grid import Position, direction_between, neighbours
except ImportError:
    from game_logic import GameSnapshot, Phase, SnakeGame
    from pathfinding import find_path, flood_fill_count
    from toroidal_grid import Position, direction_between, neighbours

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """One autopilot choice. `target` is "special", "food", "survival" or None."""
    direction: str | None
    target: str | None
    path_length: int = 0


def survival_direction(head: Position, body: Iterable[Position], tile_count: int) -> str | None:
    """Pick the first step that keeps the most free tiles reachable.

    Candidates are tried up, right, down, left; the first one wins a tie.
    None means every neighbouring tile is part of the body.
    """
    obstacles = set(body)
    best_direction: str | None = None
    best_space = -1
    for direction, candidate in neighbours(head, tile_count):
        if candidate in obstacles:
            continue
        space = flood_fill_count(candidate, obstacles, tile_count)
        if space > best_space:
            best_direction = direction
            best_space = space
    return best_direction


class AutoPlayer:
    """Steers a SnakeGame through its direction queue, like a player at the keys."""

    def __init__(self, decision_ms: int = 50) -> None:
        if decision_ms <= 0:
            raise ValueError("decision_ms must be > 0")
        self.decision_ms = decision_ms
        self.last_decision: Decision | None = None
        self._last_decision_ms: float | None = None

    def reset(self) -> None:
        self.last_decision = None
        self._last_decision_ms = None

    def plan(self, snapshot: GameSnapshot) -> Decision:
        """Choose a direction from a read-only snapshot without touching the game."""
        size = snapshot.tile_count
        head = snapshot.head
        obstacles = set(snapshot.snake)

        if snapshot.special_food_active and snapshot.special_food is not None:
            path = find_path(head, snapshot.special_food, obstacles, size)
            # The bonus is only worth chasing if we arrive before it expires.
            if path and len(path) < snapshot.special_food_remaining:
                return Decision(direction_between(head, path[0], size), "special", len(path))

        if snapshot.food is not None:
            path = find_path(head, snapshot.food, obstacles, size)
            if path:
                return Decision(direction_between(head, path[0], size), "food", len(path))

        direction = survival_direction(head, snapshot.snake, size)
        if direction is None:
            return Decision(None, None)
        return Decision(direction, "survival")

    def decide(self, game: SnakeGame) -> Decision:
        """Plan on the current state and queue the resulting turn."""
        if game.phase is not Phase.RUNNING:
            return Decision(None, None)
        decision = self.plan(game.snapshot())
        if decision.direction is not None:
            game.queue_direction(decision.direction)
        logger.debug(
            "Tick %d: %s via %s (path %d).",
            game.state.tick,
            decision.direction,
            decision.target,
            decision.path_length,
        )
        self.last_decision = decision
        return decision

    def on_frame(self, game: SnakeGame, now_ms: float) -> Decision | None:
        """Frame callback with its own cadence, usually faster than the game tick."""
        if self._last_decision_ms is not None and now_ms - self._last_decision_ms < self.decision_ms:
            return None
        self._last_decision_ms = now_ms
        return self.decide(game)
