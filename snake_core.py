from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Optional, Tuple


GRID_SIZE = 20
START_POSITION = (10, 10)
INITIAL_FOOD = (5, 5)
INITIAL_SPEED_MS = 150
SPEED_STEP_MS = 5
MIN_SPEED_MS = 50
FOOD_REWARD = 10
TRAIL_LENGTH = 3

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))

    @classmethod
    def parse(cls, raw: str) -> Direction:
        name = str(raw).strip().upper()
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"invalid direction: {raw!r}") from None


START_DIRECTION = Direction.RIGHT


class StepEvent(Enum):
    MOVED = "moved"
    GREW = "grew"
    WALL = "wall"
    SELF = "self"
    IDLE = "idle"


@dataclass(frozen=True)
class GameConfig:
    grid_size: int = GRID_SIZE
    start: Position = START_POSITION
    start_direction: Direction = START_DIRECTION
    initial_food: Optional[Position] = INITIAL_FOOD
    initial_interval_ms: int = INITIAL_SPEED_MS
    interval_step_ms: int = SPEED_STEP_MS
    min_interval_ms: int = MIN_SPEED_MS
    food_reward: int = FOOD_REWARD
    trail_length: int = TRAIL_LENGTH
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError("grid_size must be at least 1")
        if not self.contains(self.start):
            raise ValueError(f"start position {self.start} is outside a {self.grid_size}x{self.grid_size} grid")
        if self.initial_food is not None and not self.contains(self.initial_food):
            raise ValueError(f"initial food {self.initial_food} is outside the grid")
        if self.min_interval_ms <= 0 or self.initial_interval_ms < self.min_interval_ms:
            raise ValueError("intervals must satisfy 0 < min_interval_ms <= initial_interval_ms")
        if self.interval_step_ms < 0 or self.food_reward < 0 or self.trail_length < 0:
            raise ValueError("interval_step_ms, food_reward and trail_length must be non-negative")

    def contains(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    @classmethod
    def for_grid(cls, grid_size: int, seed: Optional[int] = None) -> GameConfig:
        # Start in the centre; first food a quarter of the way in, as on the default board.
        center = grid_size // 2
        quarter = grid_size // 4
        return cls(grid_size=grid_size, start=(center, center), initial_food=(quarter, quarter), seed=seed)


@dataclass
class DirectionBuffer:
    """Stages the next heading until the following tick commits it."""

    committed: Direction = START_DIRECTION
    pending: Direction = START_DIRECTION

    def request(self, direction: Direction) -> bool:
        if not isinstance(direction, Direction):
            raise TypeError(f"expected a Direction, got {direction!r}")
        # Checked against the committed heading, not the pending one.
        if direction is self.committed.opposite:
            logger.debug("Ignoring reversal %s while heading %s", direction.name, self.committed.name)
            return False
        self.pending = direction
        return True

    def commit(self) -> Direction:
        self.committed = self.pending
        return self.committed


@dataclass
class GameState:
    snake: Deque[Position]
    food: Position
    directions: DirectionBuffer
    interval_ms: int
    score: int = 0
    game_over: bool = False
    reason: Optional[str] = None
    ticks: int = 0

    @property
    def direction(self) -> Direction:
        return self.directions.committed

    @property
    def pending_direction(self) -> Direction:
        return self.directions.pending


@dataclass(frozen=True)
class GameSnapshot:
    snake: tuple[Position, ...]
    food: Position
    score: int
    game_over: bool
    reason: Optional[str]
    interval_ms: int
    direction: Direction
    grid_size: int
    ticks: int

    @property
    def head(self) -> Position:
        return self.snake[0]

    def render_text(self) -> str:
        board = [["." for _ in range(self.grid_size)] for _ in range(self.grid_size)]
        food_x, food_y = self.food
        board[food_y][food_x] = "*"
        # Snake cells are drawn over food; the head last.
        for x, y in self.snake[1:]:
            board[y][x] = "o"
        head_x, head_y = self.head
        board[head_y][head_x] = "H"
        return "\n".join("".join(row) for row in board)


@dataclass(frozen=True)
class StepResult:
    event: StepEvent
    snapshot: GameSnapshot
    trail: tuple[Position, ...] = field(default_factory=tuple)

    @property
    def game_over(self) -> bool:
        return self.event in (StepEvent.WALL, StepEvent.SELF)


class SnakeGame:
    """Single-player snake state machine advanced one tick per step()."""

    def __init__(self, config: GameConfig | None = None, rng: random.Random | None = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self._state = self._initial_state(self.config.initial_food)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def game_over(self) -> bool:
        return self._state.game_over

    def reset(self) -> GameSnapshot:
        self._state = self._initial_state(None)
        logger.info("Game reset: food at %s", self._state.food)
        return self.snapshot()

    def request_direction(self, direction: Direction) -> bool:
        if self._state.game_over:
            return False
        return self._state.directions.request(direction)

    def step(self) -> StepResult:
        state = self._state
        if state.game_over:
            return StepResult(StepEvent.IDLE, self.snapshot())

        direction = state.directions.commit()
        head_x, head_y = state.snake[0]
        dx, dy = direction.value
        new_head = (head_x + dx, head_y + dy)

        if not self.config.contains(new_head):
            return self._finish("wall", StepEvent.WALL)
        # Includes the tail cell even though it would be vacated this tick.
        if new_head in state.snake:
            return self._finish("self", StepEvent.SELF)

        state.snake.appendleft(new_head)
        state.ticks += 1
        if new_head == state.food:
            state.score += self.config.food_reward
            state.interval_ms = max(state.interval_ms - self.config.interval_step_ms, self.config.min_interval_ms)
            state.food = self._spawn_food()
            logger.debug("Food eaten at %s, score=%d interval=%dms", new_head, state.score, state.interval_ms)
            trail = tuple(list(state.snake)[: self.config.trail_length])
            return StepResult(StepEvent.GREW, self.snapshot(), trail)

        state.snake.pop()
        return StepResult(StepEvent.MOVED, self.snapshot())

    def snapshot(self) -> GameSnapshot:
        state = self._state
        return GameSnapshot(
            snake=tuple(state.snake),
            food=state.food,
            score=state.score,
            game_over=state.game_over,
            reason=state.reason,
            interval_ms=state.interval_ms,
            direction=state.direction,
            grid_size=self.config.grid_size,
            ticks=state.ticks,
        )

    # Internal helpers.
    def _initial_state(self, food: Position | None) -> GameState:
        start_direction = self.config.start_direction
        return GameState(
            snake=deque([self.config.start]),
            food=food if food is not None else self._spawn_food(),
            directions=DirectionBuffer(committed=start_direction, pending=start_direction),
            interval_ms=self.config.initial_interval_ms,
        )

    def _finish(self, reason: str, event: StepEvent) -> StepResult:
        self._state.game_over = True
        self._state.reason = reason
        logger.info("Game over (%s) with score %d after %d ticks", reason, self._state.score, self._state.ticks)
        return StepResult(event, self.snapshot())

    def _spawn_food(self) -> Position:
        # Uniform over the whole grid; the snake body is not excluded.
        size = self.config.grid_size
        return (self.rng.randrange(size), self.rng.randrange(size))
