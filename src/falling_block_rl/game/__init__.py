"""Game module for Falling Block RL.

Exports the core game engine and supporting classes:
- GameGrid: Grid representation, collision checks and line clearing
- Piece: Active tetromino with shape, color and position
- ShapeCatalog: The seven tetromino geometries and their colors
- ScoringRules / ScoreTracker: Line-clear scoring
- GravityTimer: Cancellable periodic gravity source
- FallingBlockGame: Main game state machine
"""

from .grid import GameGrid
from .gravity import GravityTimer
from .pieces import COLORS, Piece, ShapeCatalog, TetrominoType, rotate_cw
from .rules import ScoringRules, ScoreTracker
from .core import Action, FallingBlockGame, GameConfig, GameSnapshot, GameStatus

__all__ = [
    "GameGrid",
    "GravityTimer",
    "COLORS",
    "Piece",
    "ShapeCatalog",
    "TetrominoType",
    "rotate_cw",
    "ScoringRules",
    "ScoreTracker",
    "Action",
    "FallingBlockGame",
    "GameConfig",
    "GameSnapshot",
    "GameStatus",
]
