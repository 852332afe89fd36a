from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from retro_arcade.game import BlockStackGame, FrameScheduler, GameConfig, GameInfo, GameState
from retro_arcade.registry import get_game

logger = logging.getLogger(__name__)

# Escape belongs to the registry's pause control.
QUIT_KEY_NAMES = ("q",)


def build_key_map(info: GameInfo) -> Dict[int, str]:
    """Translate the registry's key names into pygame key codes."""
    key_map: Dict[int, str] = {}
    for control in info.controls:
        for name in control.keys:
            try:
                key_map[pygame.key.key_code(name)] = control.action
            except ValueError:
                logger.warning("Unknown key name %r for action %s", name, control.action)
    return key_map


class HighScoreTracker:
    """Reads the score on the game-over transition and keeps the session best."""

    def __init__(self, best: int = 0) -> None:
        self.best = best
        self._was_over = False

    def __call__(self, state: GameState) -> None:
        if state.game_over and not self._was_over and state.score > self.best:
            self.best = state.score
            logger.info("New high score: %d", self.best)
        self._was_over = state.game_over


def run(game_id: str = "block-stack", cell_size: int = 32, seed: Optional[int] = None) -> None:
    game_cls = get_game(game_id)
    if game_cls is None:
        raise SystemExit(f"Unknown game: {game_id}")

    pygame.init()
    try:
        config = GameConfig(random_seed=seed)
        margin = 20
        board_w = config.width * cell_size
        board_h = config.height * cell_size
        side_w = 6 * cell_size
        screen = pygame.display.set_mode((margin * 3 + board_w + side_w, margin * 2 + board_h))
        pygame.display.set_caption(game_cls.info.name)
        board_surface = pygame.Surface((board_w, board_h))
        preview_surface = pygame.Surface((side_w, 4 * cell_size))
        font = pygame.font.SysFont(None, 28)
        clock = pygame.time.Clock()

        game: BlockStackGame = game_cls(config, scheduler=FrameScheduler(pygame.time.get_ticks))
        tracker = HighScoreTracker()
        game.subscribe(tracker)
        game.initialize_surface(board_surface, board_w, board_h)
        key_map = build_key_map(game_cls.info)
        quit_keys = {pygame.key.key_code(name) for name in QUIT_KEY_NAMES}

        if not game.start():
            raise SystemExit("Game failed to start")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key in quit_keys:
                        running = False
                    elif event.key == pygame.K_r and game.state.game_over:
                        game.start()
                    else:
                        action = key_map.get(event.key)
                        if action is not None:
                            game.handle_action(action)

            game.scheduler.run_pending()

            state = game.state
            screen.fill((10, 10, 14))
            screen.blit(board_surface, (margin, margin))
            side_x = margin * 2 + board_w
            game.draw_next_piece(preview_surface, side_w, preview_surface.get_height())
            screen.blit(preview_surface, (side_x, margin))
            lines = [
                f"Score: {state.score}",
                f"Level: {state.level}",
                f"Lines: {state.lines_cleared}",
                f"Best: {tracker.best}",
            ]
            if state.is_paused:
                lines.append("Paused")
            if state.game_over:
                lines.append("Game Over - R to restart")
            for i, text in enumerate(lines):
                img = font.render(text, True, (255, 255, 255))
                screen.blit(img, (side_x, margin * 2 + preview_surface.get_height() + i * 30))
            pygame.display.flip()

            clock.tick(60)
        game.destroy()
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--game", type=str, default="block-stack")
    p.add_argument("--cell-size", type=int, default=32)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    logging.basicConfig(level=logging.INFO)
    run(args.game, args.cell_size, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
