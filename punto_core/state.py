from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Tuple, Union

from .tokens import Coord, Token

if TYPE_CHECKING:
    from .player import Player


class Outcome(str, Enum):
    UNDECIDED = "None"
    WIN = "Win"
    DRAW = "Draw"
    DROP = "Drop"


class PlayResult(str, Enum):
    PLACED = "The token was successfully placed."
    NO_TOKEN_IN_HAND = "The player does not have the token in hand."
    ILLEGAL_PLACEMENT = "The token could not be placed."


class GameOverError(RuntimeError):
    """Raised when a turn is requested on a game that is already decided."""


class _Auto:
    """Sentinel a coordinate provider returns to let the engine pick the cell."""

    _instance: Optional["_Auto"] = None

    def __new__(cls) -> "_Auto":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "AUTO"


AUTO = _Auto()


@dataclass(frozen=True)
class PromptContext:
    """What a human coordinate provider is told when asked for a cell."""
    player: "Player"
    token: Token
    first_attempt: bool
    available: Tuple[Coord, ...]


# None means the player refuses to go on (the game is dropped).
ProviderAnswer = Union[Coord, _Auto, None]
CoordinateProvider = Callable[[PromptContext], Awaitable[ProviderAnswer]]


@dataclass(frozen=True)
class Verdict:
    """Result of a victory check."""
    outcome: Outcome
    winners: List["Player"] = field(default_factory=list)
    losers: List["Player"] = field(default_factory=list)

    @property
    def decided(self) -> bool:
        return self.outcome is not Outcome.UNDECIDED
