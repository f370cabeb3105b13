from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from .pieces import Piece, Shape


EMPTY = 0


class GameGrid:
    """Settled-block playfield.

    The grid uses 0 for empty cells and positive integers for settled blocks,
    holding the color code of the piece that produced them. Row 0 is the top.

    Landing a piece never edits a grid in place: `merged` and `cleared` return
    new grids, so a grid handed out to a caller stays a stable snapshot.
    """

    def __init__(self, width: int, height: int, cells: Optional[np.ndarray] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        if cells is None:
            cells = np.zeros((self.height, self.width), dtype=np.int8)
        if cells.shape != (self.height, self.width):
            raise ValueError(f"cells shape {cells.shape} does not match {self.height}x{self.width} grid")
        self.cells = cells

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid(self, shape: Shape, x: int, y: int) -> bool:
        """Check whether `shape` with its top-left corner at (x, y) fits.

        Occupied cells must lie within the columns and above the floor.
        Cells in rows above the board (negative rows) are always clear;
        the rest must sit over empty grid cells.
        """
        for dy, dx in zip(*np.nonzero(shape)):
            gx = x + int(dx)
            gy = y + int(dy)
            if gx < 0 or gx >= self.width or gy >= self.height:
                return False
            if gy >= 0 and self.cells[gy, gx] != EMPTY:
                return False
        return True

    def merged(self, piece: Piece) -> "GameGrid":
        """Return a copy of this grid with `piece` baked in as its color."""
        out = self.copy()
        for gx, gy in piece.cells():
            if gy >= 0:
                out.cells[gy, gx] = piece.color
        return out

    def complete_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.cells != EMPTY, axis=1))[0]]

    def cleared(self) -> Tuple["GameGrid", int]:
        """Remove complete rows and pad with empty rows at the top.

        Returns the new grid and the number of rows removed. Remaining rows
        keep their relative order and the height is unchanged.
        """
        full_rows = self.complete_rows()
        if not full_rows:
            return self.copy(), 0
        num = len(full_rows)
        kept = np.delete(self.cells, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=self.cells.dtype)
        return GameGrid(self.width, self.height, np.vstack((new_rows, kept))), num

    def column_heights(self) -> List[int]:
        heights: List[int] = []
        for x in range(self.width):
            filled = np.nonzero(self.cells[:, x])[0]
            heights.append(self.height - int(filled[0]) if filled.size else 0)
        return heights

    def get_max_height(self) -> int:
        return max(self.column_heights(), default=0)

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.cells[:, x]:
                if cell != EMPTY:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def copy(self) -> "GameGrid":
        return GameGrid(self.width, self.height, self.cells.copy())

    def clone_state(self) -> np.ndarray:
        return self.cells.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return self.cells.shape == other.cells.shape and bool(np.array_equal(self.cells, other.cells))
