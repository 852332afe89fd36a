"""Game module for Retro Arcade.

Exports the Block Stack engine and supporting classes:
- BlockGrid: Board collision, locking and line clearing
- Piece: Tetromino piece with clockwise rotation
- TetrominoType: Enum of available piece types
- ScoringRules: Score, level and drop speed derivation
- GameState / Action: Immutable snapshots and normalized input actions
- FrameScheduler / ManualClock: Host-driven frame scheduling
- BlockStackGame: Main game loop and state management
"""

from .grid import BlockGrid
from .pieces import Piece, TetrominoType, WALL_KICKS, rotate_matrix, color_for
from .rules import ScoringRules
from .state import Action, GameState, SurfaceError
from .scheduler import FrameScheduler, ManualClock
from .info import GameControl, GameInfo, TouchControl, BLOCK_STACK_INFO
from .core import BlockStackGame, GameConfig

__all__ = [
    "BlockGrid",
    "Piece",
    "TetrominoType",
    "WALL_KICKS",
    "rotate_matrix",
    "color_for",
    "ScoringRules",
    "Action",
    "GameState",
    "SurfaceError",
    "FrameScheduler",
    "ManualClock",
    "GameControl",
    "GameInfo",
    "TouchControl",
    "BLOCK_STACK_INFO",
    "BlockStackGame",
    "GameConfig",
]
