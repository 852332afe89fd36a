from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

Category = Literal["puzzle", "action", "arcade"]
Difficulty = Literal["easy", "medium", "hard"]


@dataclass(frozen=True)
class TouchControl:
    type: Literal["tap", "swipe", "hold"]
    area: Literal["left", "right", "center", "full"]


@dataclass(frozen=True)
class GameControl:
    """An action plus the pygame key names and touch gesture bound to it."""

    action: str
    keys: Tuple[str, ...]
    touch: Optional[TouchControl] = None


@dataclass(frozen=True)
class GameInfo:
    id: str
    name: str
    description: str
    thumbnail: str
    category: Category
    difficulty: Difficulty
    controls: Tuple[GameControl, ...] = field(default_factory=tuple)

    def control_for(self, action: str) -> Optional[GameControl]:
        for control in self.controls:
            if control.action == action:
                return control
        return None


BLOCK_STACK_INFO = GameInfo(
    id="block-stack",
    name="Block Stack",
    description="Classic falling blocks puzzle game",
    thumbnail="/images/block-stack.png",
    category="puzzle",
    difficulty="medium",
    controls=(
        GameControl("moveLeft", ("left", "a"), TouchControl("tap", "left")),
        GameControl("moveRight", ("right", "d"), TouchControl("tap", "right")),
        GameControl("rotate", ("up", "w"), TouchControl("tap", "center")),
        GameControl("softDrop", ("down", "s"), TouchControl("swipe", "center")),
        GameControl("hardDrop", ("space",), TouchControl("hold", "center")),
        GameControl("pause", ("escape", "p"), TouchControl("tap", "full")),
    ),
)
