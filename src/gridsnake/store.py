# src/gridsnake/store.py
"""
JSON-file persistence for user settings and the best score.

Nothing here is called by the engine itself: the high-score keeper listens to
engine events, and the application reads/writes settings around the engine.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Optional, Union
import json
import logging

from .config import Settings
from .game import Engine, Event, HighScoreBeaten

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_DATA_DIR = Path.home() / ".gridsnake"
SETTINGS_FILE = "settings.json"
HIGH_SCORE_FILE = "highscore.json"


def _read_json(path: Path) -> Optional[Any]:
    """Parsed file content, or None when the file is missing or unreadable JSON."""
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (ValueError, OSError) as e:
        # ValueError covers both bad JSON and bad UTF-8
        logger.error("Failed to read %s: %s", path, e)
        return None

def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    tmp.replace(path)


class SettingsStore:
    def __init__(self, path: PathLike):
        self.path = Path(path)

    def has_saved(self) -> bool:
        return self.path.exists()

    def load(self) -> Settings:
        return Settings.from_dict(_read_json(self.path))

    def save(self, settings: Settings) -> None:
        _write_json(self.path, settings.to_dict())
        logger.debug("Saved settings to %s", self.path)


class HighScoreStore:
    def __init__(self, path: PathLike):
        self.path = Path(path)

    def load(self) -> int:
        data = _read_json(self.path)
        value = data.get("highScore") if isinstance(data, dict) else data
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return 0
        return value

    def save(self, value: int) -> None:
        _write_json(self.path, {"highScore": int(value)})

    def reset(self) -> None:
        self.save(0)


class HighScoreKeeper:
    """Engine observer that writes every new best score to its store."""

    def __init__(self, store: HighScoreStore):
        self.store = store

    def attach(self, engine: Engine) -> None:
        engine.set_high_score(self.store.load())
        engine.subscribe(self)

    def __call__(self, event: Event) -> None:
        if isinstance(event, HighScoreBeaten):
            self.store.save(event.score)
            logger.info("New high score %d", event.score)


def stores_in(data_dir: PathLike = DEFAULT_DATA_DIR):
    """(SettingsStore, HighScoreStore) for files inside `data_dir`."""
    base = Path(data_dir)
    return SettingsStore(base / SETTINGS_FILE), HighScoreStore(base / HIGH_SCORE_FILE)
