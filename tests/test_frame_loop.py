from __future__ import annotations

import numpy as np
import pygame
import pytest

from retro_arcade.game import BlockStackGame, FrameScheduler, GameConfig, GameState, ManualClock, TetrominoType
from retro_arcade.visualization.renderer import SurfaceError


def _tick(game: BlockStackGame, clock: ManualClock, ms: float) -> None:
    clock.advance(ms)
    game.scheduler.run_pending()


def test_start_refuses_without_surface(clock: ManualClock) -> None:
    game = BlockStackGame(scheduler=FrameScheduler(clock))
    assert game.start() is False
    assert game.scheduler.pending == 0
    state = game.state
    assert not state.is_playing
    assert not state.game_over
    assert state.current_piece is None


def test_invalid_surface_fails_loudly(clock: ManualClock) -> None:
    game = BlockStackGame(scheduler=FrameScheduler(clock))
    with pytest.raises(SurfaceError):
        game.initialize_surface(object(), 200, 400)
    with pytest.raises(SurfaceError):
        game.initialize_surface(pygame.Surface((10, 10)), 0, 400)
    assert game.start() is False


def test_failed_rebind_drops_previous_surface(engine: BlockStackGame) -> None:
    with pytest.raises(SurfaceError):
        engine.initialize_surface("canvas", 200, 400)
    assert engine.renderer is None
    assert engine.start() is False


def test_gravity_steps_after_drop_speed(make_engine, clock: ManualClock) -> None:
    game = make_engine(TetrominoType.O)
    assert game.start()
    assert game.scheduler.pending == 1

    _tick(game, clock, 600)
    assert game.state.time_elapsed == 600
    assert game.state.current_piece.y == 0

    # Strictly greater than drop_speed is required.
    _tick(game, clock, 400)
    assert game.state.current_piece.y == 0
    _tick(game, clock, 1)
    assert game.state.current_piece.y == 1
    assert game.state.time_elapsed == 1001

    _tick(game, clock, 1000)
    assert game.state.current_piece.y == 1
    _tick(game, clock, 1)
    assert game.state.current_piece.y == 2


def test_pause_freezes_timers_without_catch_up(make_engine, clock: ManualClock) -> None:
    game = make_engine(TetrominoType.O)
    game.start()
    _tick(game, clock, 900)
    game.pause()

    _tick(game, clock, 5000)
    state = game.state
    assert state.is_paused
    assert state.time_elapsed == 900
    assert state.current_piece.y == 0
    assert game.scheduler.pending == 1

    game.pause()
    _tick(game, clock, 16)
    assert game.state.time_elapsed == 916
    assert game.state.current_piece.y == 0
    _tick(game, clock, 100)
    assert game.state.current_piece.y == 1


def test_stop_cancels_frame_and_is_idempotent(engine: BlockStackGame, clock: ManualClock) -> None:
    engine.start()
    engine.stop()
    assert engine.scheduler.pending == 0
    assert engine.state.game_over
    assert not engine.state.is_playing
    engine.stop()
    _tick(engine, clock, 2000)
    assert engine.scheduler.pending == 0


def test_gravity_alone_ends_the_game(make_engine, clock: ManualClock) -> None:
    game = make_engine(TetrominoType.O)
    overs = []
    game.subscribe(lambda s: overs.append(s) if s.game_over else None)
    game.start()
    for _ in range(500):
        if game.state.game_over:
            break
        _tick(game, clock, 1001)
    state = game.state
    assert state.game_over and not state.is_playing
    assert state.score == 10 * 10
    assert state.board[:, 4:6].all()
    assert game.scheduler.pending <= 1
    _tick(game, clock, 16)
    assert game.scheduler.pending == 0
    assert overs


def test_restart_resets_state(make_engine, clock: ManualClock) -> None:
    game = make_engine(TetrominoType.I)
    game.start()
    game.hard_drop()
    _tick(game, clock, 300)
    assert game.state.score > 0
    assert game.start()
    state = game.state
    assert state.score == 0
    assert state.time_elapsed == 0
    assert not state.board.any()
    assert game.scheduler.pending == 1


def test_destroy_is_terminal(engine: BlockStackGame, clock: ManualClock) -> None:
    seen = []
    engine.subscribe(seen.append)
    engine.start()
    engine.destroy()
    assert engine.destroyed
    assert engine.surface is None and engine.renderer is None
    assert engine.scheduler.pending == 0
    count = len(seen)
    engine.pause()
    engine.handle_action("pause")
    assert engine.start() is False
    assert len(seen) == count
    with pytest.raises(SurfaceError):
        engine.initialize_surface(pygame.Surface((10, 10)), 10, 10)


def test_listeners_receive_new_snapshots(engine: BlockStackGame) -> None:
    seen: list[GameState] = []
    unsubscribe = engine.subscribe(seen.append)
    engine.start()
    assert seen
    assert seen[-1] is engine.state
    assert len({id(s) for s in seen}) == len(seen)

    unsubscribe()
    count = len(seen)
    engine.handle_action("moveLeft")
    assert len(seen) == count
    engine.unsubscribe(seen.append)


def test_old_snapshots_do_not_change(make_engine) -> None:
    game = make_engine(TetrominoType.I)
    game.start()
    before = game.state
    board_before = np.array(before.board, copy=True)
    game.hard_drop()
    after = game.state
    assert after is not before
    assert np.array_equal(before.board, board_before)
    assert before.current_piece.y == 0
    assert after.board[19].any()
    with pytest.raises(ValueError):
        after.board[0, 0] = 1


def test_snapshot_to_dict(make_engine) -> None:
    game = make_engine(TetrominoType.I, TetrominoType.T)
    game.start()
    game.hard_drop()
    data = game.state.to_dict()
    assert data["score"] == 48
    assert data["isPlaying"] is True
    assert data["board"][19][3] == "#00FFFF"
    assert data["board"][0][0] is None
    assert data["currentPiece"]["color"] == "#800080"
    assert data["nextPiece"]["shape"] == [[1, 1, 1, 1]]
    assert data["dropSpeed"] == 1000


def test_default_scheduler_uses_monotonic_clock() -> None:
    game = BlockStackGame(GameConfig(random_seed=1))
    game.initialize_surface(pygame.Surface((100, 200)), 100, 200)
    assert game.start()
    assert game.scheduler.pending == 1
    game.stop()
    assert game.scheduler.pending == 0
