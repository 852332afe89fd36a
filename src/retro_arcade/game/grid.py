from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .pieces import Piece, Shape


@dataclass
class PlacementResult:
    cells_written: int
    cells_skipped: int


class BlockGrid:
    """Fixed-size playfield of locked cells.

    The grid uses 0 for empty cells and tetromino values for filled cells,
    so a cell value doubles as the color tag of the piece that filled it.
    Row 0 is the top of the board. Operations never mutate the array they
    were given: ``place`` and ``clear_lines`` return fresh arrays.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)

    def empty(self) -> np.ndarray:
        return self.freeze(np.zeros((self.height, self.width), dtype=np.int8))

    @staticmethod
    def freeze(board: np.ndarray) -> np.ndarray:
        board.flags.writeable = False
        return board

    def collides(self, board: np.ndarray, shape: Shape, x: int, y: int) -> bool:
        ys, xs = np.nonzero(shape)
        if ys.size == 0:
            return False
        bx = xs + x
        by = ys + y
        if np.any((bx < 0) | (bx >= self.width) | (by >= self.height)):
            return True
        # Cells above the board only collide with the walls.
        visible = by >= 0
        return bool(np.any(board[by[visible], bx[visible]] != 0))

    def drop_distance(self, board: np.ndarray, piece: Piece) -> int:
        distance = 0
        while not self.collides(board, piece.shape, piece.x, piece.y + distance + 1):
            distance += 1
        return distance

    def place(self, board: np.ndarray, piece: Piece) -> tuple[np.ndarray, PlacementResult]:
        new_board = board.copy()
        written = 0
        skipped = 0
        for x, y in piece.cells():
            if y < 0:
                skipped += 1
                continue
            new_board[y, x] = int(piece.kind)
            written += 1
        return self.freeze(new_board), PlacementResult(written, skipped)

    def clear_lines(self, board: np.ndarray) -> tuple[np.ndarray, int]:
        """Collapse full rows, scanning bottom to top.

        After a removal the same row index is examined again since the rows
        above have shifted down into it.
        """
        new_board = board.copy()
        cleared = 0
        y = self.height - 1
        while y >= 0:
            if np.all(new_board[y] != 0):
                new_board = np.vstack(
                    (np.zeros((1, self.width), dtype=np.int8), np.delete(new_board, y, axis=0))
                )
                cleared += 1
            else:
                y -= 1
        return self.freeze(new_board), cleared
