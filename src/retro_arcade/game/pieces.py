from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _frozen(shape) -> Shape:
    arr = np.array(shape, dtype=np.int8, copy=True)
    arr.flags.writeable = False
    return arr


BASE_SHAPES = {
    TetrominoType.I: _frozen([[1, 1, 1, 1]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.J: _frozen([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.L: _frozen([[0, 0, 1], [1, 1, 1]]),
}

COLORS = {
    TetrominoType.I: "#00FFFF",
    TetrominoType.O: "#FFFF00",
    TetrominoType.T: "#800080",
    TetrominoType.S: "#00FF00",
    TetrominoType.Z: "#FF0000",
    TetrominoType.J: "#FF7F00",
    TetrominoType.L: "#0000FF",
}

# Tried in order; the first collision-free offset wins.
WALL_KICKS: Tuple[Tuple[int, int], ...] = (
    (0, 0),
    (-1, 0),
    (1, 0),
    (-2, 0),
    (2, 0),
    (0, -1),
    (-1, -1),
    (1, -1),
)


def color_for(value: int) -> str | None:
    """Color tag of a board cell value, ``None`` for empty cells."""
    if value == 0:
        return None
    return COLORS[TetrominoType(abs(int(value)))]


def rotate_matrix(shape: Shape) -> Shape:
    """Rotate clockwise: ``rotated[j][rows - 1 - i] == shape[i][j]``."""
    return _frozen(np.rot90(shape, 1, axes=(1, 0)))


@dataclass(frozen=True, eq=False)
class Piece:
    kind: TetrominoType
    shape: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def create(cls, kind: TetrominoType) -> "Piece":
        return cls(kind=kind, shape=_frozen(BASE_SHAPES[kind]), x=0, y=0)

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def width(self) -> int:
        return int(self.shape.shape[1]) if self.shape.ndim == 2 else 0

    @property
    def height(self) -> int:
        return int(self.shape.shape[0]) if self.shape.ndim == 2 else 0

    @property
    def is_empty(self) -> bool:
        return not bool(np.any(self.shape))

    def copy(self) -> "Piece":
        return Piece(self.kind, _frozen(self.shape), self.x, self.y)

    def at(self, x: int, y: int) -> "Piece":
        return Piece(self.kind, self.shape, x, y)

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.shape, self.x + dx, self.y + dy)

    def rotated(self) -> "Piece":
        return Piece(self.kind, rotate_matrix(self.shape), self.x, self.y)

    def cells(self) -> List[Tuple[int, int]]:
        """Board coordinates of the occupied cells."""
        ys, xs = np.nonzero(self.shape)
        return [(self.x + int(dx), self.y + int(dy)) for dy, dx in zip(ys, xs)]
