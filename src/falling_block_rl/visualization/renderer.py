from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_block_rl.game import COLORS, GameSnapshot
from falling_block_rl.game.pieces import hex_to_rgb


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return (20, 20, 26)
    idx = abs(v) - 1
    if 0 <= idx < len(COLORS):
        return hex_to_rgb(COLORS[idx])
    return (200, 200, 200)


def compose(snapshot: GameSnapshot) -> np.ndarray:
    """Overlay the active piece onto the settled grid; rows above the board are skipped."""
    state = snapshot.grid.copy()
    piece = snapshot.active_piece
    if piece is not None and not snapshot.is_game_over:
        h, w = state.shape
        for x, y in piece.cells():
            if 0 <= y < h and 0 <= x < w:
                state[y, x] = piece.color
    return state


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_height: int = 40) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_height = panel_height
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, grid_shape: Tuple[int, int]) -> Tuple[int, int]:
        h, w = grid_shape
        return (w * self.cell_size + self.margin * 2,
                h * self.cell_size + self.margin * 2 + self.panel_height)

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        return surf

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(compose(snapshot)), (self.margin, self.margin + self.panel_height))

        score = self._font.render(f"Score: {snapshot.score}", True, (230, 230, 230))
        screen.blit(score, (self.margin, self.margin // 2))

        banner = None
        if snapshot.is_game_over:
            banner = ("Game Over - R to restart", (255, 100, 100))
        elif snapshot.is_paused:
            banner = ("Paused - P to resume", (255, 220, 120))
        if banner is not None:
            text = self._font.render(banner[0], True, banner[1])
            rect = text.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
            screen.blit(text, rect)
        pygame.display.flip()
