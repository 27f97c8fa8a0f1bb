import pygame
import pytest

from gridsnake.config import DOWN, LEFT, RIGHT, UP
from gridsnake.game import GameStatus
from gridsnake.input import (
    Command, CommandKind, KeyboardInput, ScriptedInput, command_for_event, dispatch,
)


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k)


@pytest.mark.parametrize("k,direction", [
    (pygame.K_UP, UP), (pygame.K_w, UP),
    (pygame.K_DOWN, DOWN), (pygame.K_s, DOWN),
    (pygame.K_LEFT, LEFT), (pygame.K_a, LEFT),
    (pygame.K_RIGHT, RIGHT), (pygame.K_d, RIGHT),
])
def test_turn_keys(k, direction):
    assert command_for_event(key(k)) == Command(CommandKind.TURN, direction)


@pytest.mark.parametrize("k,kind", [
    (pygame.K_SPACE, CommandKind.START),
    (pygame.K_p, CommandKind.TOGGLE_PAUSE),
    (pygame.K_r, CommandKind.RESTART),
    (pygame.K_n, CommandKind.RESTART),
    (pygame.K_t, CommandKind.CYCLE_THEME),
    (pygame.K_EQUALS, CommandKind.FASTER),
    (pygame.K_MINUS, CommandKind.SLOWER),
    (pygame.K_h, CommandKind.RESET_HIGH_SCORE),
    (pygame.K_ESCAPE, CommandKind.QUIT),
])
def test_command_keys(k, kind):
    assert command_for_event(key(k)) == Command(kind)


def test_window_close_and_unmapped_events():
    assert command_for_event(pygame.event.Event(pygame.QUIT)) == Command(CommandKind.QUIT)
    assert command_for_event(key(pygame.K_z)) is None
    assert command_for_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_UP)) is None


def test_keyboard_poll_keeps_order():
    cmds = KeyboardInput().poll([key(pygame.K_UP), key(pygame.K_z), key(pygame.K_SPACE)])
    assert [c.kind for c in cmds] == [CommandKind.TURN, CommandKind.START]


def test_scripted_input_replays_batches():
    src = ScriptedInput([[Command(CommandKind.START)], [], [Command(CommandKind.QUIT)]])
    assert src.poll() == [Command(CommandKind.START)]
    assert src.poll() == []
    assert src.poll() == [Command(CommandKind.QUIT)]
    assert src.exhausted
    assert src.poll() == []


def test_space_starts_then_toggles_pause(engine):
    start = Command(CommandKind.START)
    assert dispatch(engine, start)
    assert engine.status is GameStatus.RUNNING
    dispatch(engine, start)
    assert engine.status is GameStatus.PAUSED
    dispatch(engine, start)
    assert engine.status is GameStatus.RUNNING


def test_space_after_game_over_starts_new_run(engine):
    engine.start()
    engine.set_direction(*UP)
    for _ in range(11):
        engine.tick()
    assert engine.status is GameStatus.GAME_OVER
    dispatch(engine, Command(CommandKind.START))
    assert engine.status is GameStatus.RUNNING
    assert engine.score == 0


def test_dispatch_turn_pause_restart(engine):
    engine.start()
    dispatch(engine, Command(CommandKind.TURN, DOWN))
    assert engine.pending == DOWN
    dispatch(engine, Command(CommandKind.TURN, LEFT))   # reversal of applied RIGHT
    assert engine.pending == DOWN
    dispatch(engine, Command(CommandKind.TOGGLE_PAUSE))
    assert engine.paused
    dispatch(engine, Command(CommandKind.RESTART))
    assert engine.running
    assert engine.pending == RIGHT


def test_app_commands_are_left_to_caller(engine):
    for kind in (CommandKind.QUIT, CommandKind.CYCLE_THEME, CommandKind.FASTER,
                 CommandKind.SLOWER, CommandKind.RESET_HIGH_SCORE):
        assert dispatch(engine, Command(kind)) is False
    assert engine.status is GameStatus.IDLE
