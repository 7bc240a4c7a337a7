# Core Snake simulation on a wrap-around board, independent from GUI/autopilot code.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import enum
from itertools import islice
import logging
import random
from typing import Iterable, Union

try:
    from .toroidal_grid import (
        DIRECTION_VECTORS,
        REVERSE_DIRECTION,
        Position,
        free_cells,
        step,
    )
except ImportError:
    from toroidal_grid import (
        DIRECTION_VECTORS,
        REVERSE_DIRECTION,
        Position,
        free_cells,
        step,
    )

logger = logging.getLogger(__name__)


# Bounds used by SnakeConfig and the GUI when validating settings.
MIN_TILE_COUNT = 5
MAX_TILE_COUNT = 60
MIN_CELL_SIZE = 8
MAX_CELL_SIZE = 48
MIN_TICK_MS = 20
MAX_TICK_MS = 1000

FOOD_POINTS = 10
SPECIAL_FOOD_POINTS = 5 * FOOD_POINTS

HELP_MESSAGE = "[WASD/HJKL] Move [P] Pause/Resume [R] Restart"
STARTING_DIRECTIONS = ("up", "down", "left", "right")


@dataclass
class SnakeConfig:
    """Runtime settings shared between the simulation, autopilot and GUI."""
    tile_count: int = 20
    cell_size: int = 20
    tick_ms: int = 100
    autoplay_ms: int = 50
    initial_length: int = 4
    special_food_rate: int = 5          # every Nth regular food
    special_food_lifetime: int = 50     # ticks
    spawn_attempts: int = 64            # random draws before enumerating free cells
    seed: int | None = None

    def __post_init__(self) -> None:
        if not (MIN_TILE_COUNT <= self.tile_count <= MAX_TILE_COUNT):
            raise ValueError(f"Tile count must be between {MIN_TILE_COUNT} and {MAX_TILE_COUNT}.")
        if not (MIN_CELL_SIZE <= self.cell_size <= MAX_CELL_SIZE):
            raise ValueError(f"Cell size must be between {MIN_CELL_SIZE} and {MAX_CELL_SIZE}.")
        if not (MIN_TICK_MS <= self.tick_ms <= MAX_TICK_MS):
            raise ValueError(f"Tick interval must be between {MIN_TICK_MS} and {MAX_TICK_MS} ms.")
        if self.autoplay_ms <= 0:
            raise ValueError("Autoplay interval must be > 0.")
        if not (1 <= self.initial_length < self.tile_count):
            raise ValueError("Initial length must be at least 1 and shorter than the board side.")
        if self.special_food_rate <= 0:
            raise ValueError("Special food rate must be > 0.")
        if self.special_food_lifetime <= 0:
            raise ValueError("Special food lifetime must be > 0.")
        if self.spawn_attempts < 0:
            raise ValueError("Spawn attempts cannot be negative.")


class Phase(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Command(enum.Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    TOGGLE_PAUSE = "toggle_pause"
    RESTART = "restart"


COMMAND_DIRECTIONS = {
    Command.MOVE_UP: "up",
    Command.MOVE_DOWN: "down",
    Command.MOVE_LEFT: "left",
    Command.MOVE_RIGHT: "right",
}
MOVEMENT_COMMANDS = frozenset(COMMAND_DIRECTIONS)


class Meal(enum.Enum):
    NONE = "none"
    FOOD = "food"
    SPECIAL = "special"


class SpecialFoodState(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    EXPIRED = "expired"


class BoardFullError(RuntimeError):
    """No free tile is left for a spawn."""


def sample_free_cell(
    rng: random.Random,
    tile_count: int,
    blocked: set[Position],
    attempts: int,
) -> Position:
    """Uniformly pick a tile outside `blocked`.

    A few cheap random draws cover the common sparse board; after that the
    free tiles are enumerated so a crowded board still terminates.
    """
    for _ in range(attempts):
        candidate = (rng.randrange(tile_count), rng.randrange(tile_count))
        if candidate not in blocked:
            return candidate
    remaining = free_cells(blocked, tile_count)
    if not remaining:
        raise BoardFullError(f"No free tile left on the {tile_count}x{tile_count} board.")
    return rng.choice(remaining)


class DirectionQueue:
    """Pending turns for one snake; at most one is applied per tick."""

    def __init__(self) -> None:
        self._pending: deque[str] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def enqueue(self, direction: str) -> bool:
        """Append a turn unless it repeats the last queued one (key repeat)."""
        if direction not in DIRECTION_VECTORS:
            return False
        if self._pending and self._pending[-1] == direction:
            return False
        self._pending.append(direction)
        return True

    def resolve(self, current: str) -> str:
        """Pop one queued turn and return the direction to apply this tick."""
        if not self._pending:
            return current
        requested = self._pending.popleft()
        if requested == REVERSE_DIRECTION[current]:
            logger.debug("Dropped reversal to %s while heading %s.", requested, current)
            return current
        return requested

    def clear(self) -> None:
        self._pending.clear()


@dataclass(frozen=True)
class SnakeModel:
    segments: tuple[Position, ...]
    direction: str


@dataclass(frozen=True)
class FoodModel:
    position: Position | None


@dataclass(frozen=True)
class SpecialFoodModel:
    position: Position | None
    active: bool
    remaining: int


@dataclass(frozen=True)
class StatusModel:
    text: str


RenderModel = Union[SnakeModel, FoodModel, SpecialFoodModel, StatusModel]


class Entity:
    """Contract shared by everything a tick updates and the renderer draws."""

    def update(self, state: GameState) -> None:
        raise NotImplementedError

    def to_render_model(self) -> RenderModel:
        raise NotImplementedError


class Snake(Entity):
    """
    Ordered body on the board.

    Attributes:
        segments: deque of (x, y) from head at index 0 to tail at the end
        direction: heading applied on the last tick
        queue: pending turns from the player or the autopilot
        last_meal: what the head landed on during the last update
        alive: False once the head ran into the body
    """

    def __init__(self, segments: Iterable[Position], direction: str) -> None:
        self.segments: deque[Position] = deque(segments)
        if not self.segments:
            raise ValueError("A snake needs at least one segment.")
        if direction not in DIRECTION_VECTORS:
            raise ValueError(f"Unknown direction: {direction}")
        self.direction = direction
        self.queue = DirectionQueue()
        self.last_meal = Meal.NONE
        self.alive = True

    @property
    def head(self) -> Position:
        return self.segments[0]

    def __len__(self) -> int:
        return len(self.segments)

    def occupies(self, position: Position) -> bool:
        return position in self.segments

    def hits_itself(self) -> bool:
        head = self.segments[0]
        return any(segment == head for segment in islice(self.segments, 1, None))

    def update(self, state: GameState) -> None:
        """Turn, advance, grow or drop the tail, then look for a self-hit."""
        self.last_meal = Meal.NONE
        self.direction = self.queue.resolve(self.direction)
        new_head = step(self.head, self.direction, state.tile_count)
        self.segments.appendleft(new_head)

        special = state.special_food
        if new_head == state.food.position:
            self.last_meal = Meal.FOOD
        elif special.active and new_head == special.position:
            self.last_meal = Meal.SPECIAL
        else:
            self.segments.pop()

        # Growth is already applied, so a meal and a fatal hit can share a tick.
        if self.hits_itself():
            self.alive = False

    def to_render_model(self) -> SnakeModel:
        return SnakeModel(tuple(self.segments), self.direction)


class Food(Entity):
    """Single regular food tile and the running count of pickups."""

    def __init__(self, rng: random.Random, spawn_attempts: int) -> None:
        self.rng = rng
        self.spawn_attempts = spawn_attempts
        self.position: Position | None = None
        self.eaten_count = 0

    def place(self, tile_count: int, blocked: set[Position]) -> Position:
        """Put the food on a free tile without counting a pickup."""
        self.position = None
        position = sample_free_cell(self.rng, tile_count, blocked, self.spawn_attempts)
        assert position not in blocked, "food placed on an occupied tile"
        self.position = position
        return position

    def consume(self, tile_count: int, blocked: set[Position]) -> Position:
        self.eaten_count += 1
        return self.place(tile_count, blocked)

    def update(self, state: GameState) -> None:
        if state.snake.last_meal is Meal.FOOD:
            self.consume(state.tile_count, state.food_blockers())

    def to_render_model(self) -> FoodModel:
        return FoodModel(self.position)


class SpecialFood(Entity):
    """
    Bonus food that shows up after every `spawn_threshold`-th regular food
    and disappears after `lifetime` ticks.

    IDLE -> ACTIVE when the regular food count reaches a new positive
    multiple of the threshold. ACTIVE -> IDLE on pickup. ACTIVE -> EXPIRED
    when the countdown runs out, and EXPIRED -> IDLE on the next update.
    """

    def __init__(
        self,
        rng: random.Random,
        spawn_threshold: int,
        lifetime: int,
        spawn_attempts: int,
    ) -> None:
        self.rng = rng
        self.spawn_threshold = spawn_threshold
        self.lifetime = lifetime
        self.spawn_attempts = spawn_attempts
        self.state = SpecialFoodState.IDLE
        self.position: Position | None = None
        self.remaining = lifetime
        self.eaten_count = 0
        self._spawned_for = 0  # regular food count that produced the last spawn

    @property
    def active(self) -> bool:
        return self.state is SpecialFoodState.ACTIVE

    def update(self, state: GameState) -> None:
        if self.state is SpecialFoodState.ACTIVE:
            if state.snake.last_meal is Meal.SPECIAL:
                self._collect()
            else:
                self.remaining -= 1
                if self.remaining <= 0:
                    self._expire()
        elif self.state is SpecialFoodState.EXPIRED:
            self.state = SpecialFoodState.IDLE
        self._maybe_spawn(state)

    def _collect(self) -> None:
        self.eaten_count += 1
        self.position = None
        self.remaining = self.lifetime
        self.state = SpecialFoodState.IDLE
        logger.debug("Special food collected (%d so far).", self.eaten_count)

    def _expire(self) -> None:
        logger.info("Special food at %s expired.", self.position)
        self.position = None
        self.remaining = 0
        self.state = SpecialFoodState.EXPIRED

    def _maybe_spawn(self, state: GameState) -> None:
        if self.state is not SpecialFoodState.IDLE:
            return
        count = state.food.eaten_count
        if count <= 0 or count % self.spawn_threshold != 0 or count == self._spawned_for:
            return

        blocked = set(state.snake.segments)
        if state.food.position is not None:
            blocked.add(state.food.position)
        try:
            position = sample_free_cell(self.rng, state.tile_count, blocked, self.spawn_attempts)
        except BoardFullError:
            # Not terminal: the milestone is still pending, so the next tick retries.
            logger.warning("No room for special food on tick %d; retrying next tick.", state.tick)
            return

        self._spawned_for = count
        self.position = position
        self.remaining = self.lifetime
        self.state = SpecialFoodState.ACTIVE
        logger.info("Special food spawned at %s for %d ticks.", position, self.lifetime)

    def to_render_model(self) -> SpecialFoodModel:
        return SpecialFoodModel(self.position, self.active, self.remaining if self.active else 0)


class StatusMessage(Entity):
    """Human-readable status line derived from phase and score."""

    def __init__(self) -> None:
        self.text = HELP_MESSAGE

    def update(self, state: GameState) -> None:
        if state.phase is Phase.GAME_OVER:
            self.text = f"Game Over! Score: {state.score}. Press R to restart."
        elif state.phase is Phase.RUNNING and state.score > 0:
            self.text = f"Score: {state.score}"
        else:
            self.text = HELP_MESSAGE

    def to_render_model(self) -> StatusModel:
        return StatusModel(self.text)


@dataclass
class GameState:
    """Everything one game owns; rebuilt from scratch on every reset."""
    tile_count: int
    snake: Snake
    food: Food
    special_food: SpecialFood
    status: StatusMessage = field(default_factory=StatusMessage)
    phase: Phase = Phase.NOT_STARTED
    tick: int = 0
    end_reason: str | None = None  # "collision" | "board_full"

    @property
    def score(self) -> int:
        return self.food.eaten_count * FOOD_POINTS + self.special_food.eaten_count * SPECIAL_FOOD_POINTS

    @property
    def entities(self) -> tuple[Entity, ...]:
        """Draw order: body first, food on top, status last."""
        return (self.snake, self.food, self.special_food, self.status)

    def food_blockers(self) -> set[Position]:
        blocked = set(self.snake.segments)
        if self.special_food.active and self.special_food.position is not None:
            blocked.add(self.special_food.position)
        return blocked


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view handed to renderers and the autopilot."""
    tile_count: int
    snake: tuple[Position, ...]
    direction: str
    food: Position | None
    special_food: Position | None
    special_food_active: bool
    special_food_remaining: int
    score: int
    phase: Phase
    message: str
    tick: int
    end_reason: str | None = None
    autoplay: bool = False
    models: tuple[RenderModel, ...] = ()

    @property
    def head(self) -> Position:
        return self.snake[0]


class SnakeGame:
    """Tick engine and phase machine; the only writer of its GameState."""

    def __init__(self, config: SnakeConfig | None = None) -> None:
        self.config = config or SnakeConfig()
        self.rng = random.Random(self.config.seed)
        self._last_step_ms: float | None = None
        self.reset()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def score(self) -> int:
        return self.state.score

    def reset(
        self,
        segments: Iterable[Position] | None = None,
        direction: str | None = None,
        food: Position | None = None,
    ) -> None:
        """Build a fresh game. Explicit layouts are accepted for scripted setups."""
        cfg = self.config
        size = cfg.tile_count
        if direction is None:
            direction = self.rng.choice(STARTING_DIRECTIONS)
        if segments is None:
            segments = self._spawn_segments(direction)
        snake = Snake(segments, direction)
        for x, y in snake.segments:
            if not (0 <= x < size and 0 <= y < size):
                raise ValueError(f"Segment {(x, y)} is outside the {size}x{size} board.")

        state = GameState(
            tile_count=size,
            snake=snake,
            food=Food(self.rng, cfg.spawn_attempts),
            special_food=SpecialFood(
                self.rng,
                spawn_threshold=cfg.special_food_rate,
                lifetime=cfg.special_food_lifetime,
                spawn_attempts=cfg.spawn_attempts,
            ),
        )
        if food is None:
            state.food.place(size, set(snake.segments))
        elif snake.occupies(food):
            raise ValueError(f"Food {food} overlaps the snake.")
        else:
            state.food.position = food
        state.status.update(state)

        self.state = state
        self._last_step_ms = None
        logger.info("New game: head %s heading %s.", snake.head, direction)

    def _spawn_segments(self, direction: str) -> list[Position]:
        """Random head away from the edges with the body trailing behind it."""
        size = self.config.tile_count
        length = self.config.initial_length
        if size > 2 * length:
            head_x = self.rng.randrange(length, size - length)
            head_y = self.rng.randrange(length, size - length)
        else:
            head_x = self.rng.randrange(size)
            head_y = self.rng.randrange(size)
        dx, dy = DIRECTION_VECTORS[direction]
        return [((head_x - i * dx) % size, (head_y - i * dy) % size) for i in range(length)]

    def _set_phase(self, phase: Phase) -> None:
        logger.info("Phase %s -> %s (tick %d).", self.state.phase.value, phase.value, self.state.tick)
        self.state.phase = phase
        self.state.status.update(self.state)

    def start(self) -> bool:
        if self.state.phase is not Phase.NOT_STARTED:
            return False
        self._set_phase(Phase.RUNNING)
        return True

    def pause(self) -> bool:
        if self.state.phase is not Phase.RUNNING:
            return False
        self._set_phase(Phase.PAUSED)
        return True

    def resume(self) -> bool:
        if self.state.phase is not Phase.PAUSED:
            return False
        self.state.snake.queue.clear()
        self._set_phase(Phase.RUNNING)
        return True

    def queue_direction(self, direction: str) -> bool:
        """Queue a turn; the first accepted one also starts a fresh game."""
        phase = self.state.phase
        if phase not in (Phase.NOT_STARTED, Phase.RUNNING):
            logger.debug("Ignored %s while %s.", direction, phase.value)
            return False
        accepted = self.state.snake.queue.enqueue(direction)
        if accepted and phase is Phase.NOT_STARTED:
            self.start()
        return accepted

    def handle(self, command: Command) -> bool:
        """Apply one input command. Returns False when it was ignored."""
        if command is Command.RESTART:
            self.reset()
            return True
        if command is Command.TOGGLE_PAUSE:
            if self.state.phase is Phase.RUNNING:
                return self.pause()
            return self.resume()
        direction = COMMAND_DIRECTIONS.get(command)
        if direction is None:
            return False
        return self.queue_direction(direction)

    def step(self) -> bool:
        """Advance one logical tick. Returns False when the game is not running."""
        state = self.state
        if state.phase is not Phase.RUNNING:
            return False

        state.tick += 1
        state.snake.update(state)
        if not state.snake.alive:
            state.end_reason = "collision"
            self._set_phase(Phase.GAME_OVER)
            logger.info("Snake hit itself at %s; final score %d.", state.snake.head, state.score)

        try:
            state.food.update(state)
        except BoardFullError:
            logger.warning("Board is full after %d ticks; final score %d.", state.tick, state.score)
            if state.phase is not Phase.GAME_OVER:
                state.end_reason = "board_full"
                self._set_phase(Phase.GAME_OVER)

        state.special_food.update(state)
        self._check_invariants()
        state.status.update(state)
        return True

    def advance(self, now_ms: float) -> bool:
        """Frame callback: step only once `tick_ms` has elapsed since the last step."""
        if self._last_step_ms is None:
            self._last_step_ms = now_ms
            return False
        if now_ms - self._last_step_ms < self.config.tick_ms:
            return False
        self._last_step_ms = now_ms
        return self.step()

    def _check_invariants(self) -> None:
        state = self.state
        segments = state.snake.segments
        if state.phase is not Phase.GAME_OVER:
            assert len(set(segments)) == len(segments), "snake overlaps itself outside a collision"
        if state.food.position is not None:
            assert not state.snake.occupies(state.food.position), "food under the snake"
        special = state.special_food
        if special.active:
            assert special.remaining > 0, "active special food without lifetime"
            assert special.position != state.food.position, "special food on regular food"
            assert not state.snake.occupies(special.position), "special food under the snake"

    def snapshot(self, autoplay: bool = False) -> GameSnapshot:
        state = self.state
        special = state.special_food
        return GameSnapshot(
            tile_count=state.tile_count,
            snake=tuple(state.snake.segments),
            direction=state.snake.direction,
            food=state.food.position,
            special_food=special.position if special.active else None,
            special_food_active=special.active,
            special_food_remaining=special.remaining if special.active else 0,
            score=state.score,
            phase=state.phase,
            message=state.status.text,
            tick=state.tick,
            end_reason=state.end_reason,
            autoplay=autoplay,
            models=tuple(entity.to_render_model() for entity in state.entities),
        )
