# Shared helpers: key aliases, headless autopilot episodes, and score statistics.
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

import numpy as np

try:
    from .autoplayer import AutoPlayer
    from .game_logic import Command, Phase, SnakeConfig, SnakeGame
except ImportError:
    from autoplayer import AutoPlayer
    from game_logic import Command, Phase, SnakeConfig, SnakeGame


TILE_COUNT_CHOICES = (10, 20, 30, 40)

# Raw key name -> command. Letters are matched case-insensitively.
DEFAULT_KEYMAP: dict[str, Command] = {
    "w": Command.MOVE_UP,
    "k": Command.MOVE_UP,
    "Up": Command.MOVE_UP,
    "s": Command.MOVE_DOWN,
    "j": Command.MOVE_DOWN,
    "Down": Command.MOVE_DOWN,
    "a": Command.MOVE_LEFT,
    "h": Command.MOVE_LEFT,
    "Left": Command.MOVE_LEFT,
    "d": Command.MOVE_RIGHT,
    "l": Command.MOVE_RIGHT,
    "Right": Command.MOVE_RIGHT,
    "p": Command.TOGGLE_PAUSE,
    "r": Command.RESTART,
}


def command_for_key(key: str, keymap: Mapping[str, Command] | None = None) -> Command | None:
    """Translate a raw key name; unknown keys map to None and are ignored."""
    table = DEFAULT_KEYMAP if keymap is None else keymap
    if key in table:
        return table[key]
    if len(key) == 1:
        return table.get(key.lower())
    return None


@dataclass
class EpisodeResult:
    score: int
    length: int
    ticks: int
    food_eaten: int
    special_eaten: int
    end_reason: str  # "collision" | "board_full" | "max_ticks"


def run_episode(
    cfg: SnakeConfig,
    max_ticks: int = 5000,
    autoplayer: AutoPlayer | None = None,
    game: SnakeGame | None = None,
    render_step: Callable[[SnakeGame, int], None] | None = None,
) -> EpisodeResult:
    """Play one game with the autopilot on logical ticks (no wall clock)."""
    if max_ticks <= 0:
        raise ValueError("max_ticks must be > 0")
    if game is None:
        game = SnakeGame(cfg)
    if autoplayer is None:
        autoplayer = AutoPlayer(cfg.autoplay_ms)
    game.start()

    for tick in range(max_ticks):
        if game.phase is Phase.GAME_OVER:
            break
        autoplayer.decide(game)
        game.step()
        if render_step is not None:
            render_step(game, tick)

    state = game.state
    end_reason = state.end_reason if game.phase is Phase.GAME_OVER else "max_ticks"
    return EpisodeResult(
        score=state.score,
        length=len(state.snake),
        ticks=state.tick,
        food_eaten=state.food.eaten_count,
        special_eaten=state.special_food.eaten_count,
        end_reason=end_reason or "max_ticks",
    )


def summarize_scores(scores: list[float]) -> dict[str, float]:
    """Mean/median/spread summary used by the stats report."""
    arr = np.asarray(scores, dtype=np.float32)
    if arr.size == 0:
        raise ValueError("scores cannot be empty")
    return {
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "max": float(arr.max()),
        "min": float(arr.min()),
        "std": float(arr.std()),
        "p25": float(np.percentile(arr, 25)),
        "p75": float(np.percentile(arr, 75)),
    }


def chunked_mean(values: list[float], chunk_size: int) -> tuple[np.ndarray, np.ndarray]:
    """Compute mean value per fixed-size chunk."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    arr = np.asarray(values, dtype=np.float32)
    if arr.size == 0:
        empty = np.array([], dtype=np.float32)
        return empty, empty

    x_end: list[float] = []
    means: list[float] = []
    for start in range(0, arr.size, chunk_size):
        chunk = arr[start : start + chunk_size]
        x_end.append(float(start + chunk.size))
        means.append(float(np.mean(chunk)))

    return np.asarray(x_end, dtype=np.float32), np.asarray(means, dtype=np.float32)
