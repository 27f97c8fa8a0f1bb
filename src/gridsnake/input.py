# src/gridsnake/input.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple
import logging

import pygame  # type: ignore

from .config import UP, DOWN, LEFT, RIGHT
from .game import Engine, GameStatus

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    TURN = auto()
    START = auto()              # start a run, or pause/resume one in progress
    TOGGLE_PAUSE = auto()
    RESTART = auto()
    QUIT = auto()
    CYCLE_THEME = auto()
    FASTER = auto()
    SLOWER = auto()
    RESET_HIGH_SCORE = auto()


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    direction: Optional[Tuple[int, int]] = None


class InputSource(Protocol):
    def poll(self) -> List[Command]: ...


TURN_KEYS: Dict[int, Tuple[int, int]] = {
    pygame.K_UP: UP, pygame.K_w: UP,
    pygame.K_DOWN: DOWN, pygame.K_s: DOWN,
    pygame.K_LEFT: LEFT, pygame.K_a: LEFT,
    pygame.K_RIGHT: RIGHT, pygame.K_d: RIGHT,
}

COMMAND_KEYS: Dict[int, CommandKind] = {
    pygame.K_SPACE: CommandKind.START,
    pygame.K_p: CommandKind.TOGGLE_PAUSE,
    pygame.K_r: CommandKind.RESTART,
    pygame.K_n: CommandKind.RESTART,
    pygame.K_t: CommandKind.CYCLE_THEME,
    pygame.K_PLUS: CommandKind.FASTER,
    pygame.K_EQUALS: CommandKind.FASTER,
    pygame.K_KP_PLUS: CommandKind.FASTER,
    pygame.K_MINUS: CommandKind.SLOWER,
    pygame.K_KP_MINUS: CommandKind.SLOWER,
    pygame.K_h: CommandKind.RESET_HIGH_SCORE,
    pygame.K_ESCAPE: CommandKind.QUIT,
}


def command_for_event(event: pygame.event.Event) -> Optional[Command]:
    if event.type == pygame.QUIT:
        return Command(CommandKind.QUIT)
    if event.type != pygame.KEYDOWN:
        return None
    if event.key in TURN_KEYS:
        return Command(CommandKind.TURN, TURN_KEYS[event.key])
    kind = COMMAND_KEYS.get(event.key)
    return Command(kind) if kind is not None else None


class KeyboardInput:
    """Turns the pygame event queue into commands."""

    def poll(self, events: Optional[Iterable[pygame.event.Event]] = None) -> List[Command]:
        if events is None:
            events = pygame.event.get()
        commands = []
        for event in events:
            cmd = command_for_event(event)
            if cmd is not None:
                commands.append(cmd)
        return commands


class ScriptedInput:
    """Replays fixed batches of commands, one batch per poll, then nothing."""

    def __init__(self, batches: Sequence[Sequence[Command]]):
        self._batches = [list(b) for b in batches]

    @property
    def exhausted(self) -> bool:
        return not self._batches

    def poll(self) -> List[Command]:
        if not self._batches:
            return []
        return self._batches.pop(0)


def dispatch(engine: Engine, command: Command) -> bool:
    """
    Forward a command to the engine.
    Returns False for commands the engine does not handle (quit, theme,
    speed, high-score reset) so the caller can act on them.
    """
    kind = command.kind
    if kind is CommandKind.TURN:
        if command.direction is None:
            return True
        engine.set_direction(*command.direction)
    elif kind is CommandKind.START:
        if engine.status in (GameStatus.IDLE, GameStatus.GAME_OVER):
            engine.start()
        else:
            engine.toggle_pause()
    elif kind is CommandKind.TOGGLE_PAUSE:
        engine.toggle_pause()
    elif kind is CommandKind.RESTART:
        engine.restart()
    else:
        return False
    logger.debug("dispatched %s", kind.name)
    return True
