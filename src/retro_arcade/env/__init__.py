"""Gymnasium environments for Retro Arcade."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="BlockStack-v0",
    entry_point="retro_arcade.env.block_stack_env:BlockStackEnv",
)

__all__ = ["BlockStack-v0"]
