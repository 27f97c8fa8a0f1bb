# src/gridsnake/config.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# ----- Grid & canvas -----
GRID_SIZE = 20
CANVAS_SIZE = 400
MIN_GRID_SIZE = 4   # starting chain (3 cells) + room for food

# ----- Directions (dx, dy) -----
UP, DOWN, LEFT, RIGHT = (0, -1), (0, 1), (-1, 0), (1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)

# ----- Scoring & speed -----
SCORE_PER_FOOD = 10
DEFAULT_TICK_MS = 120
SPEED_PRESETS = (160, 120, 80)   # slow, normal, fast
DEFAULT_NAME = "Player"

Color = Tuple[int, int, int]


def hex_color(value: str) -> Color:
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


class ConfigurationError(ValueError):
    """Raised when the game is set up with values it cannot run with."""


# ----- Themes -----
class Theme(str, Enum):
    SKY = "sky"
    NORMAL = "normal"

    @classmethod
    def parse(cls, value: Any) -> "Theme":
        """Unknown values fall back to the sky theme."""
        try:
            return cls(value)
        except ValueError:
            return cls.SKY

    def next(self) -> "Theme":
        members = list(Theme)
        return members[(members.index(self) + 1) % len(members)]


@dataclass(frozen=True)
class Palette:
    background: Color
    food: Color
    snake: Color
    grid: Color = hex_color("#9ca3af")
    grid_alpha: int = 38          # ~15% opacity
    eye: Color = (255, 255, 255)
    pupil: Color = hex_color("#0f172a")
    text: Color = (220, 220, 230)


PALETTES: Dict[Theme, Palette] = {
    Theme.SKY: Palette(
        background=hex_color("#e0f2fe"),
        food=hex_color("#ec4899"),
        snake=hex_color("#0f172a"),
        text=hex_color("#0f172a"),
    ),
    Theme.NORMAL: Palette(
        background=hex_color("#020617"),
        food=hex_color("#f97316"),
        snake=hex_color("#22c55e"),
    ),
}


def _require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {value}")


def validate_period(tick_period_ms: Any) -> int:
    _require_positive_int("tick_period_ms", tick_period_ms)
    return tick_period_ms


# ----- Tunables -----
@dataclass(frozen=True)
class Config:
    """Engine setup; checked on construction so a bad grid never runs."""
    grid_size: int = GRID_SIZE
    tick_period_ms: int = DEFAULT_TICK_MS
    seed: Optional[int] = None

    def __post_init__(self):
        _require_positive_int("grid_size", self.grid_size)
        if self.grid_size < MIN_GRID_SIZE:
            raise ConfigurationError(
                f"grid_size must be at least {MIN_GRID_SIZE}, got {self.grid_size}"
            )
        validate_period(self.tick_period_ms)


# ----- Persisted user settings -----
@dataclass
class Settings:
    name: str = DEFAULT_NAME
    theme: Theme = Theme.SKY
    speed_ms: int = DEFAULT_TICK_MS

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        if not isinstance(data, dict):
            return cls()
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            name = DEFAULT_NAME
        speed = data.get("speedMs", data.get("speed_ms"))
        if isinstance(speed, bool) or not isinstance(speed, int) or speed <= 0:
            speed = DEFAULT_TICK_MS
        return cls(name=name.strip(), theme=Theme.parse(data.get("theme")), speed_ms=speed)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {"name": data["name"], "theme": self.theme.value, "speedMs": data["speed_ms"]}


def step_speed(current_ms: int, faster: bool) -> int:
    """Next speed preset in the requested direction; stays put at either end."""
    if faster:
        quicker = [ms for ms in SPEED_PRESETS if ms < current_ms]
        return max(quicker) if quicker else current_ms
    slower = [ms for ms in SPEED_PRESETS if ms > current_ms]
    return min(slower) if slower else current_ms
