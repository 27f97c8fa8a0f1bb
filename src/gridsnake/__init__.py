"""Grid snake: tick-driven game engine, pygame renderer and app."""

from .config import Config, ConfigurationError, Settings, Theme
from .game import Engine, EngineState, GameStatus, Snapshot

__all__ = [
    "Config", "ConfigurationError", "Settings", "Theme",
    "Engine", "EngineState", "GameStatus", "Snapshot",
]
