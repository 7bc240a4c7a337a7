"""
Tests for DirectionQueue - pending turns with reversal filtering.
"""

import random

from game_logic import DirectionQueue
from toroidal_grid import REVERSE_DIRECTION


class TestEnqueue:
    """Queue growth rules."""

    def test_repeat_of_last_queued_direction_is_dropped(self):
        queue = DirectionQueue()
        assert queue.enqueue("up") is True
        assert queue.enqueue("up") is False
        assert queue.pending == ("up",)

    def test_only_the_last_entry_is_deduplicated(self):
        queue = DirectionQueue()
        for direction in ("up", "left", "up"):
            queue.enqueue(direction)
        assert queue.pending == ("up", "left", "up")

    def test_unknown_direction_is_ignored(self):
        queue = DirectionQueue()
        assert queue.enqueue("sideways") is False
        assert len(queue) == 0

    def test_clear_empties_the_queue(self):
        queue = DirectionQueue()
        queue.enqueue("left")
        queue.enqueue("down")
        queue.clear()
        assert len(queue) == 0


class TestResolve:
    """At most one turn per tick, reversals discarded."""

    def test_empty_queue_keeps_current_direction(self):
        assert DirectionQueue().resolve("left") == "left"

    def test_legal_turn_is_applied(self):
        queue = DirectionQueue()
        queue.enqueue("left")
        assert queue.resolve("up") == "left"
        assert len(queue) == 0

    def test_reversal_is_discarded_silently(self):
        queue = DirectionQueue()
        queue.enqueue("down")
        assert queue.resolve("up") == "up"
        assert len(queue) == 0

    def test_pops_a_single_entry_per_call(self):
        queue = DirectionQueue()
        queue.enqueue("left")
        queue.enqueue("down")
        assert queue.resolve("up") == "left"
        assert queue.pending == ("down",)
        assert queue.resolve("left") == "down"

    def test_quick_double_turn_cannot_reverse(self):
        """up -> left -> right in one burst: right is a reversal once left applies."""
        queue = DirectionQueue()
        queue.enqueue("left")
        queue.enqueue("right")
        current = queue.resolve("up")
        assert current == "left"
        assert queue.resolve(current) == "left"

    def test_never_applies_a_reversal(self):
        rng = random.Random(7)
        queue = DirectionQueue()
        current = "up"
        for _ in range(500):
            for _ in range(rng.randrange(3)):
                queue.enqueue(rng.choice(["up", "down", "left", "right"]))
            applied = queue.resolve(current)
            assert applied != REVERSE_DIRECTION[current]
            current = applied
