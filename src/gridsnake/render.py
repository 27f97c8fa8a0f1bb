# src/gridsnake/render.py
from __future__ import annotations
from typing import Optional, Protocol, Tuple, Union

import numpy as np  # type: ignore
import pygame       # type: ignore

from .config import CANVAS_SIZE, DEFAULT_NAME, PALETTES, Palette, Theme
from .game import GameStatus, Snapshot

ThemeLike = Union[Theme, str]

# ---------- Geometry ----------
def cell_size(canvas_px: int, grid_size: int) -> float:
    """Pixel size of one grid cell: canvas dimension / grid size."""
    return canvas_px / grid_size

def cell_rect(gx: int, gy: int, tile: float, inset: int = 0) -> pygame.Rect:
    x = round(gx * tile) + inset
    y = round(gy * tile) + inset
    size = max(round(tile) - 2 * inset, 1)
    return pygame.Rect(x, y, size, size)

def eye_positions(gx: int, gy: int, tile: float,
                  direction: Tuple[int, int]) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Two eye centres on the leading half of the head cell."""
    dx, dy = direction
    px, py = -dy, dx                   # perpendicular to heading
    cx = gx * tile + tile / 2 + dx * tile * 0.2
    cy = gy * tile + tile / 2 + dy * tile * 0.2
    off = tile * 0.2
    return (
        (round(cx + px * off), round(cy + py * off)),
        (round(cx - px * off), round(cy - py * off)),
    )

# ---------- Drawing ----------
def draw_grid(surface: pygame.Surface, grid_size: int, tile: float, palette: Palette) -> None:
    w, h = surface.get_size()
    overlay = pygame.Surface((w, h), pygame.SRCALPHA)
    color = (*palette.grid, palette.grid_alpha)
    for i in range(grid_size + 1):
        pos = round(i * tile)
        pygame.draw.line(overlay, color, (pos, 0), (pos, h))
        pygame.draw.line(overlay, color, (0, pos), (w, pos))
    surface.blit(overlay, (0, 0))

def draw_head(surface: pygame.Surface, snap: Snapshot, tile: float, palette: Palette) -> None:
    hx, hy = snap.head
    pygame.draw.rect(surface, palette.snake, cell_rect(hx, hy, tile, inset=1))
    radius = max(round(tile * 0.15), 1)
    pupil = max(radius // 2, 1)
    for center in eye_positions(hx, hy, tile, snap.direction):
        pygame.draw.circle(surface, palette.eye, center, radius)
        pygame.draw.circle(surface, palette.pupil, center, pupil)

def draw_board(surface: pygame.Surface, snap: Snapshot, theme: ThemeLike = Theme.SKY) -> None:
    """
    Paint the playing field for `snap`: background, grid lines, food,
    body segments, then the head with its eyes.
    Reads the snapshot only; nothing about the game is changed.
    """
    palette = PALETTES[Theme.parse(theme)]
    tile = cell_size(surface.get_width(), snap.grid_size)

    surface.fill(palette.background)
    draw_grid(surface, snap.grid_size, tile, palette)

    fx, fy = snap.food
    pygame.draw.rect(surface, palette.food, cell_rect(fx, fy, tile, inset=2))

    for x, y in snap.snake[1:]:
        pygame.draw.rect(surface, palette.snake, cell_rect(x, y, tile, inset=1))
    draw_head(surface, snap, tile, palette)

def draw_hud(surface: pygame.Surface, font: pygame.font.Font, snap: Snapshot,
             name: str = DEFAULT_NAME, theme: ThemeLike = Theme.SKY) -> None:
    palette = PALETTES[Theme.parse(theme)]
    txt = font.render(f"{name}  Score: {snap.score}  Best: {snap.high_score}", True, palette.text)
    surface.blit(txt, (8, 6))

def overlay_lines(snap: Snapshot) -> Tuple[str, ...]:
    if snap.status is GameStatus.IDLE:
        return ("SNAKE", "Press SPACE to start")
    if snap.status is GameStatus.PAUSED:
        return ("PAUSED", "Press SPACE to resume")
    if snap.status is GameStatus.GAME_OVER:
        return ("GAME OVER", "Press R to restart", f"Score: {snap.score}")
    return ()

def draw_overlay(surface: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    lines = overlay_lines(snap)
    if not lines:
        return
    w, h = surface.get_size()

    # Dim with translucent overlay
    overlay = pygame.Surface((w, h), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 140))  # RGBA
    surface.blit(overlay, (0, 0))

    top = h // 2 - 16
    for i, line in enumerate(lines):
        color = (240, 240, 250) if i == 0 else (220, 220, 230)
        img = font.render(line, True, color)
        surface.blit(img, img.get_rect(center=(w // 2, top + i * 30)))

# ---------- Renderers ----------
class Renderer(Protocol):
    def render(self, snap: Snapshot) -> None: ...


class ScreenRenderer:
    """Draws to the display surface and flips it."""

    def __init__(self, screen: pygame.Surface, theme: ThemeLike = Theme.SKY,
                 font: Optional[pygame.font.Font] = None, name: str = DEFAULT_NAME):
        self.screen = screen
        self.theme = Theme.parse(theme)
        self.font = font
        self.name = name

    def render(self, snap: Snapshot) -> None:
        draw_board(self.screen, snap, self.theme)
        if self.font is not None:
            draw_hud(self.screen, self.font, snap, self.name, self.theme)
            draw_overlay(self.screen, self.font, snap)
        pygame.display.flip()


class FrameRenderer:
    """Off-screen renderer; keeps the last frame as an (H, W, 3) uint8 array."""

    def __init__(self, canvas_px: int = CANVAS_SIZE, theme: ThemeLike = Theme.SKY):
        self.surface = pygame.Surface((canvas_px, canvas_px), 0, 32)
        self.theme = Theme.parse(theme)
        self.frame: Optional[np.ndarray] = None
        self.frames_rendered = 0

    def render(self, snap: Snapshot) -> None:
        draw_board(self.surface, snap, self.theme)
        # surfarray is indexed [x, y]; store rows first like an image
        self.frame = np.transpose(pygame.surfarray.array3d(self.surface), (1, 0, 2)).copy()
        self.frames_rendered += 1

    def pixel(self, px: int, py: int) -> Tuple[int, int, int]:
        if self.frame is None:
            raise RuntimeError("Nothing rendered yet.")
        r, g, b = self.frame[py, px]
        return (int(r), int(g), int(b))
