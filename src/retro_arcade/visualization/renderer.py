from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from retro_arcade.game.pieces import Piece, color_for
from retro_arcade.game.state import GameState, SurfaceError

BACKGROUND = (0, 0, 17)
GRID_LINE = (51, 51, 51)
PIECE_BORDER = (0, 0, 0)


def _rgb(color: str) -> Tuple[int, int, int]:
    c = pygame.Color(color)
    return c.r, c.g, c.b


def _dim(rgb: Tuple[int, int, int], factor: float = 0.3) -> Tuple[int, int, int]:
    return tuple(int(v * factor) for v in rgb)  # type: ignore[return-value]


class BoardRenderer:
    def __init__(self, surface: pygame.Surface, width: int, height: int,
                 board_width: int = 10, board_height: int = 20) -> None:
        if not isinstance(surface, pygame.Surface):
            raise SurfaceError("Failed to get 2D drawing context from surface")
        if width <= 0 or height <= 0:
            raise SurfaceError(f"Invalid surface size {width}x{height}")
        self.surface = surface
        self.width = int(width)
        self.height = int(height)
        self.board_width = board_width
        self.board_height = board_height
        self.cell_size = min(self.width / board_width, self.height / board_height)

    def _rect(self, x: int, y: int, inset: int = 0) -> pygame.Rect:
        cs = self.cell_size
        return pygame.Rect(
            int(x * cs) + inset,
            int(y * cs) + inset,
            max(1, int(cs) - 2 * inset),
            max(1, int(cs) - 2 * inset),
        )

    def draw(self, state: GameState, ghost_y: Optional[int] = None) -> None:
        self.surface.fill(BACKGROUND, pygame.Rect(0, 0, self.width, self.height))
        self._draw_board(state.board)
        piece = state.current_piece
        if piece is not None:
            if ghost_y is not None:
                self._draw_ghost(piece.at(piece.x, ghost_y))
            self._draw_piece(piece)

    def _draw_board(self, board: np.ndarray) -> None:
        h, w = board.shape
        for y in range(h):
            for x in range(w):
                rect = self._rect(x, y)
                pygame.draw.rect(self.surface, GRID_LINE, rect, 1)
                color = color_for(int(board[y, x]))
                if color is not None:
                    pygame.draw.rect(self.surface, _rgb(color), rect)

    def _draw_piece(self, piece: Piece) -> None:
        rgb = _rgb(piece.color)
        for x, y in piece.cells():
            if y < 0:
                continue
            rect = self._rect(x, y)
            pygame.draw.rect(self.surface, rgb, rect)
            pygame.draw.rect(self.surface, PIECE_BORDER, rect, 1)

    def _draw_ghost(self, ghost: Piece) -> None:
        rgb = _dim(_rgb(ghost.color))
        for x, y in ghost.cells():
            if y < 0:
                continue
            pygame.draw.rect(self.surface, rgb, self._rect(x, y, inset=1), 2)

    def to_rgb_array(self) -> np.ndarray:
        # surfarray is (width, height, 3)
        return np.transpose(pygame.surfarray.array3d(self.surface), (1, 0, 2))


def draw_piece_preview(surface: pygame.Surface, piece: Optional[Piece], width: int, height: int) -> None:
    """Draw ``piece`` centered in a ``width`` x ``height`` area."""
    if not isinstance(surface, pygame.Surface):
        raise SurfaceError("Failed to get 2D drawing context from surface")
    surface.fill(BACKGROUND, pygame.Rect(0, 0, width, height))
    if piece is None or piece.is_empty:
        return
    max_dim = max(piece.height, piece.width)
    cell = min(width, height) / (max_dim + 1)
    x_off = (width - piece.width * cell) / 2
    y_off = (height - piece.height * cell) / 2
    rgb = _rgb(piece.color)
    ys, xs = np.nonzero(piece.shape)
    for py, px in zip(ys, xs):
        rect = pygame.Rect(
            int(x_off + px * cell),
            int(y_off + py * cell),
            max(1, int(cell) - 1),
            max(1, int(cell) - 1),
        )
        pygame.draw.rect(surface, rgb, rect)
