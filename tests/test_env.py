from __future__ import annotations

import gymnasium as gym
import numpy as np

import retro_arcade.env  # noqa: F401  ensure registration
from retro_arcade.env.block_stack_env import ACTIONS, BlockStackEnv
from retro_arcade.game import Action


def test_reset_overlays_falling_piece() -> None:
    env = BlockStackEnv()
    obs, info = env.reset(seed=3)
    board = obs["board"]
    assert board.shape == (20, 10)
    assert (board < 0).sum() == 4
    assert (board > 0).sum() == 0
    assert 1 <= obs["next_piece"] <= 7
    assert info["score"] == 0
    env.close()


def test_hard_drop_reward_is_score_delta() -> None:
    env = BlockStackEnv()
    env.reset(seed=5)
    obs, reward, terminated, truncated, info = env.step(ACTIONS.index(Action.HARD_DROP))
    assert reward == info["score"]
    assert reward >= 10
    assert not terminated and not truncated
    assert (obs["board"] > 0).sum() == 4
    env.close()


def test_repeated_hard_drops_terminate() -> None:
    env = gym.make("BlockStack-v0")
    env.reset(seed=11)
    terminated = False
    for _ in range(200):
        _, _, terminated, _, _ = env.step(ACTIONS.index(Action.HARD_DROP))
        if terminated:
            break
    assert terminated
    obs, info = env.reset()
    assert info["score"] == 0
    env.close()


def test_noop_steps_advance_time() -> None:
    env = BlockStackEnv(frame_ms=100)
    env.reset(seed=2)
    for _ in range(11):
        _, _, _, _, info = env.step(0)
    assert info["time_elapsed"] == 1100
    piece = env.game.state.current_piece
    assert piece.y == 1
    env.close()


def test_rgb_array_render() -> None:
    env = BlockStackEnv(render_mode="rgb_array", cell_size=10)
    env.reset(seed=1)
    img = env.render()
    assert img.shape == (200, 100, 3)
    assert img.dtype == np.uint8
    assert img.any()
    env.close()
