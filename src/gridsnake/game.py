# src/gridsnake/game.py
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union
import copy
import logging
import random
import time

from .clock import TickClock
from .config import Config, DIRECTIONS, RIGHT, SCORE_PER_FOOD

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
Direction = Tuple[int, int]

# ---------- Helpers ----------
def spawn_food(
    snake: List[Cell],
    grid_size: int,
    rng: random.Random,
    max_attempts: Optional[int] = None,
) -> Optional[Cell]:
    """
    Pick a uniformly random cell not covered by the snake.

    Draws at random first; once `max_attempts` draws have all landed on the
    snake, picks from the list of free cells instead. Returns None when the
    snake covers the whole grid.
    """
    occupied = set(snake)
    if max_attempts is None:
        max_attempts = 4 * grid_size * grid_size
    for _ in range(max_attempts):
        cell = (rng.randrange(grid_size), rng.randrange(grid_size))
        if cell not in occupied:
            return cell
    free = [
        (x, y)
        for y in range(grid_size)
        for x in range(grid_size)
        if (x, y) not in occupied
    ]
    if not free:
        return None
    return rng.choice(free)

def is_opposite(a: Direction, b: Direction) -> bool:
    return a[0] == -b[0] and a[1] == -b[1]

def is_direction(d) -> bool:
    """Axis-aligned unit vector with integer components."""
    if len(d) != 2 or not all(type(v) is int for v in d):
        return False
    return tuple(d) in DIRECTIONS

def in_bounds(cell: Cell, grid_size: int) -> bool:
    x, y = cell
    return 0 <= x < grid_size and 0 <= y < grid_size

def initial_snake(grid_size: int) -> List[Cell]:
    """Fixed 3-cell chain heading +x; [(8,10),(7,10),(6,10)] on a 20 grid."""
    c = grid_size // 2
    hx = max(c - 2, 2)
    return [(hx, c), (hx - 1, c), (hx - 2, c)]

def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)

# ---------- State ----------
class GameStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class EngineState:
    snake: List[Cell]              # head at index 0
    direction: Direction           # applied on the last tick
    pending: Direction             # latched at the next tick
    food: Cell
    score: int = 0
    status: GameStatus = GameStatus.IDLE
    high_score: int = 0            # best known score, never persisted here
    end_reason: Optional[str] = None


@dataclass(frozen=True)
class Snapshot:
    snake: Tuple[Cell, ...]
    food: Cell
    direction: Direction
    score: int
    high_score: int
    status: GameStatus
    grid_size: int
    end_reason: Optional[str] = None

    @property
    def head(self) -> Cell:
        return self.snake[0]

# ---------- Events ----------
@dataclass(frozen=True)
class StateChanged:
    snapshot: Snapshot

@dataclass(frozen=True)
class FoodEaten:
    cell: Cell
    score: int

@dataclass(frozen=True)
class HighScoreBeaten:
    score: int

@dataclass(frozen=True)
class GameOver:
    reason: str                    # "wall", "self" or "grid_full"
    score: int

Event = Union[StateChanged, FoodEaten, HighScoreBeaten, GameOver]
Observer = Callable[[Event], None]

# ---------- Engine ----------
class Engine:
    """
    Owns the game state and applies the rules, one grid step per tick.

    Everything outside (input, rendering, persistence) talks to the engine
    through its methods and reads it through `snapshot()` or events.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        high_score: int = 0,
        rng: Optional[random.Random] = None,
        time_source: Optional[Callable[[], int]] = None,
    ):
        self._config = config if config is not None else Config()
        self._rng = rng if rng is not None else random.Random(self._config.seed)
        self._now = time_source if time_source is not None else _monotonic_ms
        self._clock = TickClock(self._config.tick_period_ms)
        self._observers: List[Observer] = []
        self._state = self._fresh_state(GameStatus.IDLE, _check_score(high_score))

    # Observers ---------------------------------------------------------------
    def subscribe(self, observer: Observer) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _emit(self, event: Event) -> None:
        for observer in list(self._observers):
            observer(event)

    # Read-only view ----------------------------------------------------------
    @property
    def config(self) -> Config:
        return self._config

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def running(self) -> bool:
        return self._state.status is GameStatus.RUNNING

    @property
    def paused(self) -> bool:
        return self._state.status is GameStatus.PAUSED

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def high_score(self) -> int:
        return self._state.high_score

    @property
    def snake(self) -> Tuple[Cell, ...]:
        return tuple(self._state.snake)

    @property
    def food(self) -> Cell:
        return self._state.food

    @property
    def direction(self) -> Direction:
        return self._state.direction

    @property
    def pending(self) -> Direction:
        return self._state.pending

    def snapshot(self) -> Snapshot:
        s = self._state
        return Snapshot(
            snake=tuple(s.snake),
            food=s.food,
            direction=s.direction,
            score=s.score,
            high_score=s.high_score,
            status=s.status,
            grid_size=self._config.grid_size,
            end_reason=s.end_reason,
        )

    # Lifecycle ---------------------------------------------------------------
    def _fresh_state(self, status: GameStatus, high_score: int) -> EngineState:
        snake = initial_snake(self._config.grid_size)
        # MIN_GRID_SIZE leaves free cells around the starting chain
        food = spawn_food(snake, self._config.grid_size, self._rng)
        return EngineState(
            snake=snake,
            direction=RIGHT,
            pending=RIGHT,
            food=food,
            score=0,
            status=status,
            high_score=high_score,
        )

    def _begin(self) -> None:
        self._state = self._fresh_state(GameStatus.RUNNING, self._state.high_score)
        self._clock.start(self._now())
        logger.info("Game started (grid=%d, period=%dms)",
                    self._config.grid_size, self._clock.period_ms)
        self._emit(StateChanged(self.snapshot()))

    def start(self) -> None:
        """Idle/GameOver -> Running. No-op while a run is in progress."""
        if self._state.status in (GameStatus.RUNNING, GameStatus.PAUSED):
            logger.debug("start() ignored in state %s", self._state.status.value)
            return
        self._begin()

    def restart(self) -> None:
        """Throw away the current run, whatever its state, and begin a new one."""
        self._clock.stop()
        logger.info("Restarting (previous score %d)", self._state.score)
        self._begin()

    def pause(self) -> None:
        if self._state.status is not GameStatus.RUNNING:
            return
        self._state.status = GameStatus.PAUSED
        self._clock.stop()
        logger.info("Paused at score %d", self._state.score)
        self._emit(StateChanged(self.snapshot()))

    def resume(self) -> None:
        if self._state.status is not GameStatus.PAUSED:
            return
        self._state.status = GameStatus.RUNNING
        # fresh period: time spent paused is never made up
        self._clock.start(self._now())
        logger.info("Resumed")
        self._emit(StateChanged(self.snapshot()))

    def toggle_pause(self) -> None:
        if self._state.status is GameStatus.RUNNING:
            self.pause()
        elif self._state.status is GameStatus.PAUSED:
            self.resume()

    def load_state(self, state: EngineState) -> None:
        """
        Replace the whole game state with a copy of `state`.

        Raises ValueError for a state the rules could never produce. The best
        known score is never lowered by a load.
        """
        self._validate(state)
        best = max(self._state.high_score, state.high_score)
        self._state = copy.deepcopy(state)
        self._state.snake = list(self._state.snake)
        self._state.high_score = best
        if self._state.status is GameStatus.RUNNING:
            self._clock.start(self._now())
        else:
            self._clock.stop()
        self._emit(StateChanged(self.snapshot()))

    def _validate(self, state: EngineState) -> None:
        snake = list(state.snake)
        if not snake:
            raise ValueError("snake must have at least one cell")
        grid = self._config.grid_size
        for cell in snake + [state.food]:
            if not in_bounds(cell, grid):
                raise ValueError(f"cell {cell} is outside the {grid}x{grid} grid")
        for (ax, ay), (bx, by) in zip(snake, snake[1:]):
            if abs(ax - bx) + abs(ay - by) != 1:
                raise ValueError(f"cells {(ax, ay)} and {(bx, by)} are not neighbours")
        for name in ("direction", "pending"):
            if not is_direction(getattr(state, name)):
                raise ValueError(f"{name} {getattr(state, name)!r} is not a unit axis vector")
        if is_opposite(state.pending, state.direction):
            raise ValueError("pending direction reverses the applied one")
        _check_score(state.score)
        _check_score(state.high_score)
        # a finished board may legitimately overlap (self hit, full grid)
        if state.status is not GameStatus.GAME_OVER:
            if len(set(snake)) != len(snake):
                raise ValueError("snake cells overlap")
            if state.food in snake:
                raise ValueError(f"food {state.food} lies on the snake")

    # Commands ----------------------------------------------------------------
    def set_direction(self, dx: int, dy: int) -> None:
        """Queue a turn for the next tick; reversals and non-unit vectors are ignored."""
        cand = (dx, dy)
        if not is_direction(cand):
            logger.debug("Ignoring malformed direction %r", cand)
            return
        if is_opposite(cand, self._state.direction):
            logger.debug("Ignoring reversal %r", cand)
            return
        self._state.pending = cand

    def set_tick_period(self, period_ms: int) -> None:
        self._clock.set_period(period_ms, self._now())
        self._config = replace(self._config, tick_period_ms=period_ms)
        logger.info("Tick period set to %dms", period_ms)

    def set_high_score(self, value: int) -> None:
        self._state.high_score = _check_score(value)

    # Update ------------------------------------------------------------------
    def update(self, now_ms: Optional[int] = None) -> bool:
        """Run one tick if a period has elapsed. Returns True if it did."""
        if self._state.status is not GameStatus.RUNNING:
            return False
        now = self._now() if now_ms is None else now_ms
        if not self._clock.due(now):
            return False
        self.tick()
        return True

    def tick(self) -> None:
        """Advance the snake by exactly one cell. Does nothing unless Running."""
        s = self._state
        if s.status is not GameStatus.RUNNING:
            return

        # Commit direction once per tick
        s.direction = s.pending

        hx, hy = s.snake[0]
        dx, dy = s.direction
        new_head = (hx + dx, hy + dy)

        # Wall collision
        if not in_bounds(new_head, self._config.grid_size):
            self._end("wall")
            return

        # Self collision, tail included
        if new_head in s.snake:
            self._end("self")
            return

        # Move / grow
        s.snake.insert(0, new_head)
        if new_head == s.food:
            s.score += SCORE_PER_FOOD
            beaten = s.score > s.high_score
            if beaten:
                s.high_score = s.score
            food = spawn_food(s.snake, self._config.grid_size, self._rng)
            if food is not None:
                s.food = food
            # observers see the board with the new food already placed
            self._emit(FoodEaten(new_head, s.score))
            if beaten:
                self._emit(HighScoreBeaten(s.score))
            if food is None:
                self._end("grid_full")
                return
        else:
            s.snake.pop()

        logger.debug("tick head=%s len=%d score=%d", new_head, len(s.snake), s.score)
        self._emit(StateChanged(self.snapshot()))

    def _end(self, reason: str) -> None:
        s = self._state
        s.status = GameStatus.GAME_OVER
        s.end_reason = reason
        self._clock.stop()
        logger.info("Game over (%s) with score %d", reason, s.score)
        self._emit(GameOver(reason, s.score))
        self._emit(StateChanged(self.snapshot()))


def _check_score(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"high score must be a non-negative integer, got {value!r}")
    return value
