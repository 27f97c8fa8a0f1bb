import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402
import pytest  # noqa: E402

from gridsnake.config import RIGHT, Config  # noqa: E402
from gridsnake.game import Engine, EngineState, GameStatus  # noqa: E402


class FakeClock:
    """Millisecond time source the tests move by hand."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture(autouse=True)
def pygame_ready():
    # the app test calls pygame.quit(); bring modules back for every test
    pygame.init()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return Engine(Config(grid_size=20, tick_period_ms=100), rng=random.Random(7), time_source=clock)


@pytest.fixture
def events(engine):
    seen = []
    engine.subscribe(seen.append)
    return seen


def place(engine, snake, direction=RIGHT, food=(0, 0), status=GameStatus.RUNNING,
          score=0, high_score=0):
    """Put `engine` into a hand-built position."""
    engine.load_state(EngineState(
        snake=list(snake),
        direction=direction,
        pending=direction,
        food=food,
        score=score,
        status=status,
        high_score=high_score,
    ))
