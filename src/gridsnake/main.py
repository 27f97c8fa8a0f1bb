# src/gridsnake/main.py
from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import List, Optional

import pygame # type: ignore

from .config import CANVAS_SIZE, GRID_SIZE, Config, ConfigurationError, Settings, Theme, step_speed
from .game import Engine, Event, StateChanged
from .input import Command, CommandKind, InputSource, KeyboardInput, dispatch
from .render import ScreenRenderer
from .store import DEFAULT_DATA_DIR, HighScoreKeeper, HighScoreStore, SettingsStore, stores_in

logger = logging.getLogger(__name__)


class SnakeApp:
    """Window, main loop and the app-level commands (theme, speed, reset)."""

    def __init__(
        self,
        config: Config,
        settings: Settings,
        settings_store: SettingsStore,
        score_store: HighScoreStore,
        canvas_px: int = CANVAS_SIZE,
        source: Optional[InputSource] = None,
    ):
        pygame.init()
        self.font = pygame.font.SysFont(None, 24)
        self.screen = pygame.display.set_mode((canvas_px, canvas_px))
        pygame.display.set_caption(f"Snake: {settings.name}")
        self.clock = pygame.time.Clock()

        self.settings = settings
        self.settings_store = settings_store
        self.score_store = score_store

        self.engine = Engine(config, time_source=pygame.time.get_ticks)
        HighScoreKeeper(score_store).attach(self.engine)
        self.renderer = ScreenRenderer(self.screen, settings.theme, self.font, settings.name)
        self.engine.subscribe(self._on_event)
        self.source = source if source is not None else KeyboardInput()
        self.running = True

    def _on_event(self, event: Event) -> None:
        if isinstance(event, StateChanged):
            self.renderer.render(event.snapshot)

    def redraw(self) -> None:
        self.renderer.render(self.engine.snapshot())

    def handle(self, command: Command) -> None:
        if dispatch(self.engine, command):
            return
        kind = command.kind
        if kind is CommandKind.QUIT:
            self.running = False
        elif kind is CommandKind.CYCLE_THEME:
            self.settings.theme = self.settings.theme.next()
            self.renderer.theme = self.settings.theme
            self.settings_store.save(self.settings)
            self.redraw()
        elif kind in (CommandKind.FASTER, CommandKind.SLOWER):
            speed = step_speed(self.settings.speed_ms, faster=kind is CommandKind.FASTER)
            if speed != self.settings.speed_ms:
                self.settings.speed_ms = speed
                self.engine.set_tick_period(speed)
                self.settings_store.save(self.settings)
                print(f"[GAME] Speed → {speed}ms per move")
        elif kind is CommandKind.RESET_HIGH_SCORE:
            self.score_store.reset()
            self.engine.set_high_score(0)
            self.redraw()

    def run(self, max_frames: Optional[int] = None) -> int:
        """Main loop; returns the score of the last run."""
        self.redraw()
        frames = 0
        while self.running:
            # 1) input
            for command in self.source.poll():
                self.handle(command)
                if not self.running:
                    break

            # 2) update (renders through the StateChanged observer)
            self.engine.update(pygame.time.get_ticks())

            self.clock.tick(60)  # high FPS; movement gated by the tick clock
            frames += 1
            if max_frames is not None and frames >= max_frames:
                break

        pygame.quit()
        return self.engine.score


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gridsnake", description="Grid snake game.")
    parser.add_argument("--name", type=str, default=None, help="player name (saved)")
    parser.add_argument("--theme", type=str, default=None,
                        choices=[t.value for t in Theme], help="colour theme (saved)")
    parser.add_argument("--speed", type=int, default=None,
                        help="milliseconds between moves (saved)")
    parser.add_argument("--grid-size", type=int, default=GRID_SIZE)
    parser.add_argument("--canvas", type=int, default=CANVAS_SIZE, help="window size in pixels")
    parser.add_argument("--seed", type=int, default=None, help="seed food placement")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR,
                        help="where settings and the high score are kept")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def resolve_settings(args: argparse.Namespace, store: SettingsStore) -> Settings:
    """Stored settings with command-line overrides applied; saved when changed."""
    settings = store.load()
    changed = not store.has_saved()
    if args.name is not None and args.name.strip():
        settings.name = args.name.strip()
        changed = True
    if args.theme is not None:
        settings.theme = Theme(args.theme)
        changed = True
    if args.speed is not None:
        settings.speed_ms = args.speed
        changed = True
    if changed:
        store.save(settings)
    return settings


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.speed is not None and args.speed <= 0:
        parser.error(f"--speed must be > 0, got {args.speed}")
    if args.canvas <= 0:
        parser.error(f"--canvas must be > 0, got {args.canvas}")

    settings_store, score_store = stores_in(args.data_dir)
    settings = resolve_settings(args, settings_store)
    try:
        config = Config(grid_size=args.grid_size, tick_period_ms=settings.speed_ms, seed=args.seed)
    except ConfigurationError as e:
        parser.error(str(e))

    print(f"[GAME] {settings.name}: {config.grid_size}x{config.grid_size} grid, "
          f"{config.tick_period_ms}ms per move, theme={settings.theme.value}")
    app = SnakeApp(config, settings, settings_store, score_store, canvas_px=args.canvas)
    score = app.run()
    print(f"[GAME] Last score: {score}, best: {score_store.load()}")


if __name__ == "__main__":
    main()
