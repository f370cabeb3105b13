from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from .grid import GameGrid
from .gravity import GravityTimer
from .pieces import Piece, ShapeCatalog
from .rules import ScoringRules, ScoreTracker


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    DOWN = 2
    ROTATE = 3
    NONE = 4


class GameStatus(Enum):
    SPAWNING = "spawning"
    ACTIVE = "active"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    gravity_ms: int = 1000

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {self.width}x{self.height}")
        if self.gravity_ms <= 0:
            raise ValueError(f"gravity_ms must be positive, got {self.gravity_ms}")


@dataclass(frozen=True)
class GameSnapshot:
    grid: np.ndarray
    active_piece: Optional[Piece]
    score: int
    is_game_over: bool
    is_paused: bool


class FallingBlockGame:
    """Falling-block rules engine.

    Owns the settled grid, the active piece, the score and the status. All
    requests are total: a blocked move or rotation is silently ignored, and
    while paused or after game over requests are ignored entirely.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
        timer: Optional[GravityTimer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.random_seed)
        self.catalog = ShapeCatalog(self.rng)
        self.timer = timer or GravityTimer(self.config.gravity_ms)
        self.tracker = ScoreTracker(rules)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.current_piece: Optional[Piece] = None
        self.status = GameStatus.SPAWNING
        self.last_lines_cleared = 0
        self.reset()

    # ---------- Observable state ----------
    @property
    def score(self) -> int:
        return self.tracker.score

    @property
    def lines_cleared_total(self) -> int:
        return self.tracker.lines_cleared_total

    @property
    def pieces_placed(self) -> int:
        return self.tracker.pieces_placed

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    # ---------- Transitions ----------
    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.timer.stop()
        self.grid = GameGrid(self.config.width, self.config.height)
        self.tracker.reset()
        self.last_lines_cleared = 0
        self._spawn_piece()

    def _spawn_piece(self) -> None:
        self.status = GameStatus.SPAWNING
        piece = self.catalog.spawn(self.grid.width, self.config.spawn_y)
        self.current_piece = piece
        # Immediate collision check: if overlaps, game over
        if not self.grid.is_valid(piece.shape, piece.x, piece.y):
            self.status = GameStatus.GAME_OVER
            self.timer.stop()
            return
        self.status = GameStatus.ACTIVE
        if not self.timer.running:
            self.timer.start()

    def _lock_piece(self) -> int:
        assert self.current_piece is not None
        merged = self.grid.merged(self.current_piece)
        self.grid, lines = merged.cleared()
        self.tracker.add_lines(lines)
        self.last_lines_cleared = lines
        self._spawn_piece()
        return lines

    def request_move(self, dx: int, dy: int) -> None:
        if self.status is not GameStatus.ACTIVE:
            return
        piece = self.current_piece
        assert piece is not None
        new_x = piece.x + dx
        new_y = piece.y + dy
        if self.grid.is_valid(piece.shape, new_x, new_y):
            piece.x = new_x
            piece.y = new_y
        elif dy > 0:
            self._lock_piece()

    def request_rotate(self) -> None:
        if self.status is not GameStatus.ACTIVE:
            return
        piece = self.current_piece
        assert piece is not None
        rotated = piece.rotated_shape()
        if self.grid.is_valid(rotated, piece.x, piece.y):
            piece.shape = rotated

    def request_pause(self, paused: Optional[bool] = None) -> None:
        """Pause or resume; `None` toggles. Ignored once the game is over."""
        if self.status not in (GameStatus.ACTIVE, GameStatus.PAUSED):
            return
        if paused is None:
            paused = self.status is GameStatus.ACTIVE
        if paused and self.status is GameStatus.ACTIVE:
            self.status = GameStatus.PAUSED
            self.timer.stop()
        elif not paused and self.status is GameStatus.PAUSED:
            self.status = GameStatus.ACTIVE
            self.timer.start()

    def request_reset(self) -> None:
        self.reset()

    def gravity_tick(self, generation: Optional[int] = None) -> None:
        """Apply one gravity step; ticks stamped with a stale generation are dropped."""
        if generation is not None and not self.timer.is_current(generation):
            return
        self.request_move(0, 1)

    def advance(self, elapsed_ms: int) -> None:
        for generation in self.timer.advance(elapsed_ms):
            self.gravity_tick(generation)

    # ---------- Queries ----------
    def can_move(self, dx: int, dy: int) -> bool:
        if self.status is not GameStatus.ACTIVE or self.current_piece is None:
            return False
        piece = self.current_piece
        return self.grid.is_valid(piece.shape, piece.x + dx, piece.y + dy)

    def can_rotate(self) -> bool:
        if self.status is not GameStatus.ACTIVE or self.current_piece is None:
            return False
        piece = self.current_piece
        return self.grid.is_valid(piece.rotated_shape(), piece.x, piece.y)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            grid=self.grid.clone_state(),
            active_piece=self.current_piece.copy() if self.current_piece is not None else None,
            score=self.score,
            is_game_over=self.game_over,
            is_paused=self.paused,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.color
        return state

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.game_over:
            return self.get_state(), 0, True, {}

        self.last_lines_cleared = 0
        if action == Action.LEFT:
            self.request_move(-1, 0)
        elif action == Action.RIGHT:
            self.request_move(1, 0)
        elif action == Action.DOWN:
            self.request_move(0, 1)
        elif action == Action.ROTATE:
            self.request_rotate()
        elif action == Action.NONE:
            pass

        info = {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
            "pieces_placed": self.pieces_placed,
        }
        return self.get_state(), self.last_lines_cleared, self.game_over, info
