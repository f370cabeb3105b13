from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 0
    O = 1
    T = 2
    L = 3
    J = 4
    Z = 5
    S = 6


Shape = np.ndarray


def _frozen(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES = {
    TetrominoType.I: _frozen([[1, 1, 1, 1]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[1, 1, 1], [0, 1, 0]]),
    TetrominoType.L: _frozen([[1, 1, 1], [1, 0, 0]]),
    TetrominoType.J: _frozen([[1, 1, 1], [0, 0, 1]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
}

# Paired 1:1 with TetrominoType by index
COLORS: Tuple[str, ...] = (
    "#FF0000",
    "#00FF00",
    "#0000FF",
    "#FFFF00",
    "#FF00FF",
    "#00FFFF",
    "#FFA500",
)


def color_code(kind: TetrominoType) -> int:
    """Grid value for a settled block of `kind` (0 is reserved for empty)."""
    return int(kind) + 1


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def rotate_cw(shape: Shape) -> Shape:
    """Transpose then reverse each row. Always returns a new array."""
    return shape.T[:, ::-1].copy()


@dataclass
class Piece:
    kind: TetrominoType
    shape: Shape
    color: int
    x: int
    y: int

    def rotated_shape(self) -> Shape:
        return rotate_cw(self.shape)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        cells: List[Tuple[int, int]] = []
        for dy, dx in zip(*np.nonzero(self.shape)):
            cells.append((origin_x + int(dx), origin_y + int(dy)))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)

    def copy(self) -> "Piece":
        return Piece(self.kind, self.shape.copy(), self.color, self.x, self.y)


class ShapeCatalog:
    """Fixed ordered set of tetromino geometries and their colors.

    Pieces are spawned with a uniformly random kind, horizontally centered
    on a board of the given width. The random source is injectable so that
    callers can force a deterministic sequence.
    """

    KINDS: Tuple[TetrominoType, ...] = tuple(TetrominoType)

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    @staticmethod
    def shape(kind: TetrominoType) -> Shape:
        return BASE_SHAPES[kind]

    @staticmethod
    def spawn_x(board_width: int, shape: Shape) -> int:
        return board_width // 2 - shape.shape[1] // 2

    def make_piece(self, kind: TetrominoType, board_width: int, spawn_y: int = 0) -> Piece:
        shape = self.shape(kind)
        return Piece(
            kind=kind,
            shape=shape,
            color=color_code(kind),
            x=self.spawn_x(board_width, shape),
            y=spawn_y,
        )

    def spawn(self, board_width: int, spawn_y: int = 0) -> Piece:
        kind = self.KINDS[self.rng.randrange(len(self.KINDS))]
        return self.make_piece(kind, board_width, spawn_y)
