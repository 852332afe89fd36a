from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
import pygame
from gymnasium import spaces

from retro_arcade.game import (
    Action,
    BlockStackGame,
    FrameScheduler,
    GameConfig,
    ManualClock,
    ScoringRules,
    TetrominoType,
)

# Index 0 lets the piece fall under gravity without input.
ACTIONS: Tuple[Optional[Action], ...] = (
    None,
    Action.MOVE_LEFT,
    Action.MOVE_RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.HARD_DROP,
)


class BlockStackEnv(gym.Env):
    """Headless Block Stack driven by a manual clock.

    Each step applies one action, advances the clock by ``frame_ms`` and
    pumps the engine's frame scheduler once. The observation is the board
    with the falling piece overlaid as negative tetromino values.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None, frame_ms: float = 1000.0 / 30,
                 cell_size: int = 12) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.rules = rules
        self.render_mode = render_mode
        self.frame_ms = float(frame_ms)
        self.cell_size = int(cell_size)

        self.clock = ManualClock()
        self.game = self._make_game(self.config.random_seed)

        h, w = self.config.height, self.config.width
        kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-kinds, high=kinds, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(ACTIONS))

    def _make_game(self, seed: Optional[int]) -> BlockStackGame:
        config = GameConfig(
            width=self.config.width,
            height=self.config.height,
            random_seed=seed,
            spawn_y=self.config.spawn_y,
        )
        game = BlockStackGame(config, self.rules, FrameScheduler(self.clock))
        surface = pygame.Surface((config.width * self.cell_size, config.height * self.cell_size))
        game.initialize_surface(surface, surface.get_width(), surface.get_height())
        return game

    def _get_obs(self) -> Dict[str, Any]:
        state = self.game.state
        board = np.array(state.board, dtype=np.int8, copy=True)
        piece = state.current_piece
        if piece is not None and not state.game_over:
            for x, y in piece.cells():
                if 0 <= y < self.config.height and 0 <= x < self.config.width:
                    board[y, x] = -int(piece.kind)
        next_kind = int(state.next_piece.kind) if state.next_piece is not None else 0
        return {"board": board, "next_piece": next_kind}

    def _get_info(self) -> Dict[str, Any]:
        state = self.game.state
        return {
            "score": state.score,
            "level": state.level,
            "lines_cleared": state.lines_cleared,
            "time_elapsed": state.time_elapsed,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        if seed is not None:
            self.game.destroy()
            self.game = self._make_game(seed)
        self.game.start()
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        before = self.game.state.score
        chosen = ACTIONS[int(action)]
        if chosen is not None:
            self.game.handle_action(chosen)

        self.clock.advance(self.frame_ms)
        self.game.scheduler.run_pending()

        state = self.game.state
        reward = float(state.score - before)
        terminated = bool(state.game_over)
        return self._get_obs(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array" and self.game.renderer is not None:
            # Draw explicitly so the frame is current even when paused or over.
            self.game.renderer.draw(self.game.state, self.game.ghost_y())
            return self.game.renderer.to_rgb_array()
        return None

    def close(self) -> None:
        self.game.destroy()
