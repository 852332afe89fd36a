from __future__ import annotations

import os
from collections.abc import Iterable
from typing import Any, Sequence

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame
import pytest

from retro_arcade.game import BlockStackGame, FrameScheduler, GameConfig, ManualClock, TetrominoType


class SequenceRng:
    """Stands in for ``random.Random`` and deals tetrominoes in a fixed cycle."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self.kinds = list(kinds)
        self.index = 0

    def choice(self, seq: Sequence[Any]) -> Any:
        kind = self.kinds[self.index % len(self.kinds)]
        self.index += 1
        assert kind in seq
        return kind


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def surface() -> pygame.Surface:
    return pygame.Surface((200, 400))


@pytest.fixture()
def engine(clock: ManualClock, surface: pygame.Surface) -> BlockStackGame:
    game = BlockStackGame(GameConfig(random_seed=7), scheduler=FrameScheduler(clock))
    game.initialize_surface(surface, 200, 400)
    return game


@pytest.fixture()
def make_engine(clock: ManualClock):
    """Build an engine that deals the given tetrominoes in order."""

    def _make(*kinds: TetrominoType) -> BlockStackGame:
        game = BlockStackGame(GameConfig(), scheduler=FrameScheduler(clock))
        game.rng = SequenceRng(kinds)  # type: ignore[assignment]
        game.initialize_surface(pygame.Surface((200, 400)), 200, 400)
        return game

    return _make
