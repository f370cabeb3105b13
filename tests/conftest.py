from __future__ import annotations

import itertools
from typing import Iterable, Optional

import numpy as np
import pytest

from falling_block_rl.game import FallingBlockGame, GameConfig, GameGrid


class SequenceRng:
    """Stand-in random source that replays a fixed cycle of catalog indices."""

    def __init__(self, indices: Iterable[int]) -> None:
        self._it = itertools.cycle(list(indices))

    def randrange(self, n: int) -> int:
        return next(self._it) % n

    def seed(self, seed: Optional[int] = None) -> None:
        pass


@pytest.fixture
def make_game():
    def factory(indices: Iterable[int] = (0,), config: Optional[GameConfig] = None) -> FallingBlockGame:
        return FallingBlockGame(config, rng=SequenceRng(indices))
    return factory


def grid_from_cells(cells: np.ndarray) -> GameGrid:
    h, w = cells.shape
    return GameGrid(w, h, cells.astype(np.int8))
