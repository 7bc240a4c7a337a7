"""
Tests for utils.py - key aliases, headless episodes and score summaries.
"""

import numpy as np
import pytest

from game_logic import Command, SnakeConfig, SnakeGame
from utils import (
    DEFAULT_KEYMAP,
    chunked_mean,
    command_for_key,
    run_episode,
    summarize_scores,
)


class TestKeymap:
    """Raw key names to commands."""

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("w", Command.MOVE_UP),
            ("K", Command.MOVE_UP),
            ("Up", Command.MOVE_UP),
            ("j", Command.MOVE_DOWN),
            ("A", Command.MOVE_LEFT),
            ("Left", Command.MOVE_LEFT),
            ("l", Command.MOVE_RIGHT),
            ("Right", Command.MOVE_RIGHT),
            ("P", Command.TOGGLE_PAUSE),
            ("r", Command.RESTART),
        ],
    )
    def test_aliases(self, key, expected):
        assert command_for_key(key) is expected

    @pytest.mark.parametrize("key", ["x", "space", "Escape", "UP"])
    def test_unknown_keys_map_to_none(self, key):
        assert command_for_key(key) is None

    def test_custom_keymap(self):
        keymap = dict(DEFAULT_KEYMAP, q=Command.RESTART)
        assert command_for_key("Q", keymap) is Command.RESTART
        assert command_for_key("q") is None


class TestRunEpisode:
    """Headless autopilot games."""

    def test_tick_cap_reports_max_ticks(self):
        cfg = SnakeConfig(tile_count=20, seed=4)
        result = run_episode(cfg, max_ticks=5)
        assert result.ticks == 5
        assert result.end_reason == "max_ticks"
        assert result.length >= cfg.initial_length

    def test_finished_game_reports_its_reason(self):
        cfg = SnakeConfig(tile_count=5, initial_length=4, seed=9)
        result = run_episode(cfg, max_ticks=5000)
        assert result.end_reason in ("collision", "board_full")
        assert result.score == result.food_eaten * 10 + result.special_eaten * 50

    def test_over_game_is_not_stepped(self):
        cfg = SnakeConfig(tile_count=10, seed=1)
        game = SnakeGame(cfg)
        game.reset(segments=[(5, 5), (5, 6), (5, 7), (5, 8), (5, 9)], direction="up", food=(0, 0))
        game.start()
        for direction in ("right", "down", "left"):
            game.queue_direction(direction)
        for _ in range(3):
            game.step()

        result = run_episode(cfg, max_ticks=10, game=game)
        assert result.ticks == 3
        assert result.end_reason == "collision"

    def test_non_positive_cap_is_rejected(self):
        with pytest.raises(ValueError):
            run_episode(SnakeConfig(), max_ticks=0)


class TestSummaries:
    """numpy-backed score statistics."""

    def test_summarize_scores(self):
        stats = summarize_scores([10, 20, 30, 40])
        assert stats["mean"] == pytest.approx(25.0)
        assert stats["median"] == pytest.approx(25.0)
        assert stats["max"] == 40
        assert stats["min"] == 10
        assert stats["p25"] == pytest.approx(17.5)
        assert stats["p75"] == pytest.approx(32.5)

    def test_summarize_empty_raises(self):
        with pytest.raises(ValueError):
            summarize_scores([])

    def test_chunked_mean_handles_partial_chunk(self):
        x, means = chunked_mean([1, 2, 3, 4, 5], chunk_size=2)
        np.testing.assert_allclose(x, [2, 4, 5])
        np.testing.assert_allclose(means, [1.5, 3.5, 5.0])

    def test_chunked_mean_rejects_bad_chunk(self):
        with pytest.raises(ValueError):
            chunked_mean([1.0], chunk_size=0)
