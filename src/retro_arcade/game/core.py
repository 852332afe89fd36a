from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, List, Optional

import numpy as np

from .grid import BlockGrid
from .info import BLOCK_STACK_INFO, GameInfo
from .pieces import WALL_KICKS, Piece, TetrominoType
from .rules import ScoringRules
from .scheduler import FrameScheduler
from .state import Action, GameState, SurfaceError

if TYPE_CHECKING:
    from retro_arcade.visualization.renderer import BoardRenderer

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState], None]


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0


class BlockStackGame:
    """Falling-block game driven by a host-supplied frame scheduler.

    The engine never draws on its own initiative nor touches storage: the host
    binds a pygame surface with ``initialize_surface``, pumps the scheduler,
    feeds normalized actions through ``handle_action`` and observes immutable
    ``GameState`` snapshots through ``subscribe`` or the ``state`` property.
    """

    info: GameInfo = BLOCK_STACK_INFO

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[FrameScheduler] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler = scheduler or FrameScheduler()
        self.rng = random.Random(self.config.random_seed)
        self.grid = BlockGrid(self.config.width, self.config.height)
        self.surface: Any = None
        self.renderer: Optional[BoardRenderer] = None
        self._listeners: List[StateListener] = []
        self._state = self._initial_state()
        self._last_time = 0.0
        self._drop_time = 0.0
        self._frame_handle: Optional[int] = None
        self._destroyed = False

    def _initial_state(self) -> GameState:
        return GameState(board=self.grid.empty(), drop_speed=self.rules.base_drop_speed)

    # Observation

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, state: GameState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _set_state(self, **changes: Any) -> None:
        self._emit(replace(self._state, **changes))

    # Lifecycle

    def initialize_surface(self, surface: Any, width: int, height: int) -> None:
        if self._destroyed:
            raise SurfaceError("Cannot bind a surface to a destroyed game")
        from retro_arcade.visualization.renderer import BoardRenderer

        self.renderer = None
        self.surface = None
        self.renderer = BoardRenderer(surface, width, height, self.grid.width, self.grid.height)
        self.surface = surface
        logger.debug("Surface initialized (%dx%d, cell=%.1f)", width, height, self.renderer.cell_size)

    def start(self) -> bool:
        if self._destroyed:
            logger.warning("Cannot start game: engine destroyed")
            return False
        if self.renderer is None:
            logger.error("Cannot start game: surface not initialized")
            return False

        self.scheduler.cancel_frame(self._frame_handle)
        self._frame_handle = None
        self._drop_time = 0.0
        self._last_time = self.scheduler.now()
        self._emit(replace(self._initial_state(), is_playing=True))
        self.spawn_piece()
        logger.debug("Game started")
        self._game_loop(self._last_time)
        return True

    def pause(self) -> None:
        if self._destroyed:
            return
        self._set_state(is_paused=not self._state.is_paused)

    def stop(self) -> None:
        if self._destroyed:
            return
        self._set_state(is_playing=False, game_over=True)
        self.scheduler.cancel_frame(self._frame_handle)
        self._frame_handle = None
        logger.info("Game stopped (score=%d, lines=%d)", self._state.score, self._state.lines_cleared)

    def destroy(self) -> None:
        if self._destroyed:
            return
        self.stop()
        self._listeners.clear()
        self.renderer = None
        self.surface = None
        self._destroyed = True

    # Frame loop

    def _game_loop(self, now: float) -> None:
        if not self._state.is_playing:
            self._frame_handle = None
            return

        delta = now - self._last_time
        self._last_time = now

        if not self._state.is_paused:
            self._update(delta)
            self._render()

        if self._state.is_playing:
            self._frame_handle = self.scheduler.request_frame(self._game_loop)
        else:
            self._frame_handle = None

    def _update(self, delta: float) -> None:
        self._set_state(time_elapsed=self._state.time_elapsed + delta)
        self._drop_time += delta
        if self._drop_time > self._state.drop_speed:
            self.move_piece(0, 1)
            self._drop_time = 0.0

    def _render(self) -> None:
        if self.renderer is None:
            return
        self.renderer.draw(self._state, self.ghost_y())

    def draw_next_piece(self, surface: Any, width: int, height: int) -> None:
        from retro_arcade.visualization.renderer import draw_piece_preview

        draw_piece_preview(surface, self._state.next_piece, width, height)

    # Input

    def handle_action(self, action: Action | str) -> None:
        parsed = Action.parse(action)
        if parsed is None:
            logger.debug("Ignoring unknown action %r", action)
            return
        if self._destroyed:
            return

        if not self._state.is_playing or self._state.is_paused:
            if parsed is Action.PAUSE:
                self.pause()
            return

        if parsed is Action.MOVE_LEFT:
            self.move_piece(-1, 0)
        elif parsed is Action.MOVE_RIGHT:
            self.move_piece(1, 0)
        elif parsed is Action.SOFT_DROP:
            self.move_piece(0, 1)
        elif parsed is Action.ROTATE:
            self.rotate_piece()
        elif parsed is Action.HARD_DROP:
            self.hard_drop()
        elif parsed is Action.PAUSE:
            self.pause()

    # Pieces

    def create_random_piece(self) -> Piece:
        return Piece.create(self.rng.choice(list(TetrominoType)))

    def spawn_piece(self) -> None:
        upcoming = self._state.next_piece
        current = upcoming.copy() if upcoming is not None else self.create_random_piece()
        next_piece = self.create_random_piece()
        current = current.at((self.grid.width - current.width) // 2, self.config.spawn_y)

        self._set_state(current_piece=current, next_piece=next_piece)

        if self.check_collision(current, 0, 0):
            logger.info("Block out: game over with score %d", self._state.score)
            self._set_state(game_over=True, is_playing=False)

    def check_collision(self, piece: Piece, dx: int, dy: int) -> bool:
        return self.grid.collides(self._state.board, piece.shape, piece.x + dx, piece.y + dy)

    def ghost_y(self, piece: Optional[Piece] = None) -> Optional[int]:
        piece = piece or self._state.current_piece
        if piece is None or piece.is_empty:
            return None
        return piece.y + self.grid.drop_distance(self._state.board, piece)

    def move_piece(self, dx: int, dy: int) -> bool:
        piece = self._state.current_piece
        if piece is None or piece.is_empty:
            return False

        if not self.check_collision(piece, dx, dy):
            self._set_state(current_piece=piece.moved(dx, dy))
            return True

        if dy > 0:
            self.place_piece()
        return False

    def rotate_piece(self) -> bool:
        piece = self._state.current_piece
        if piece is None or piece.is_empty:
            return False

        rotated = piece.rotated()
        for kick_x, kick_y in WALL_KICKS:
            if not self.check_collision(rotated, kick_x, kick_y):
                self._set_state(current_piece=rotated.moved(kick_x, kick_y))
                return True
        return False

    def hard_drop(self) -> int:
        piece = self._state.current_piece
        if piece is None or piece.is_empty:
            return 0

        distance = 0
        while self.move_piece(0, 1):
            distance += 1
        self._set_state(score=self._state.score + self.rules.hard_drop_score(distance))
        return distance

    # Board

    def place_piece(self) -> None:
        piece = self._state.current_piece
        if piece is None:
            return

        board, result = self.grid.place(self._state.board, piece)
        if result.cells_skipped:
            logger.debug("Locked piece with %d cells above the board", result.cells_skipped)
        self._set_state(
            board=board,
            score=self._state.score + self.rules.placement_score(self._state.level),
        )
        self.clear_lines()
        self.spawn_piece()

    def clear_lines(self) -> int:
        board, cleared = self.grid.clear_lines(self._state.board)
        if cleared > 0:
            total = self._state.lines_cleared + cleared
            level = self.rules.level_for_lines(total)
            self._set_state(
                board=board,
                score=self._state.score + self.rules.score_for_lines(cleared, self._state.level),
                lines_cleared=total,
                level=level,
                drop_speed=self.rules.drop_speed_for_level(level),
            )
        return cleared

    def load_board(self, board: Any) -> None:
        """Replace the locked cells with a preset layout (puzzles, replays)."""
        arr = np.array(board, dtype=np.int8, copy=True)
        if arr.shape != (self.grid.height, self.grid.width):
            raise ValueError(
                f"Board must be {self.grid.height}x{self.grid.width}, got {arr.shape}"
            )
        if np.any((arr < 0) | (arr > max(TetrominoType))):
            raise ValueError("Board cells must be 0 or a tetromino value")
        self._set_state(board=BlockGrid.freeze(arr))
