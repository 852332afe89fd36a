from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from .pieces import Piece, color_for


class SurfaceError(RuntimeError):
    """The host handed over something that cannot be drawn on."""


class Action(str, Enum):
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"
    SOFT_DROP = "softDrop"
    ROTATE = "rotate"
    HARD_DROP = "hardDrop"
    PAUSE = "pause"

    @classmethod
    def parse(cls, value: Any) -> Optional["Action"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True, eq=False)
class GameState:
    """Immutable snapshot handed to hosts after every change.

    ``board`` is a read-only array; a new snapshot is built for every
    mutation, so a host may keep older snapshots around.
    """

    board: np.ndarray
    score: int = 0
    level: int = 1
    lives: int = 1
    is_playing: bool = False
    is_paused: bool = False
    game_over: bool = False
    time_elapsed: float = 0.0
    current_piece: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    lines_cleared: int = 0
    drop_speed: int = 1000

    def board_colors(self) -> List[List[Optional[str]]]:
        return [[color_for(int(v)) for v in row] for row in self.board]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "lives": self.lives,
            "isPlaying": self.is_playing,
            "isPaused": self.is_paused,
            "gameOver": self.game_over,
            "timeElapsed": self.time_elapsed,
            "board": self.board_colors(),
            "currentPiece": _piece_dict(self.current_piece),
            "nextPiece": _piece_dict(self.next_piece),
            "linesCleared": self.lines_cleared,
            "dropSpeed": self.drop_speed,
        }


def _piece_dict(piece: Optional[Piece]) -> Optional[Dict[str, Any]]:
    if piece is None:
        return None
    return {
        "shape": piece.shape.tolist(),
        "color": piece.color,
        "x": piece.x,
        "y": piece.y,
    }
