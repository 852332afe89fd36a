"""Lookup from a game id to its class and static configuration."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from retro_arcade.game import BlockStackGame, GameInfo

GAMES: Dict[str, Type[BlockStackGame]] = {
    BlockStackGame.info.id: BlockStackGame,
}


def get_game(game_id: str) -> Optional[Type[BlockStackGame]]:
    return GAMES.get(game_id)


def list_games() -> List[GameInfo]:
    return [game.info for game in GAMES.values()]
