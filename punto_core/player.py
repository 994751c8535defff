from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .identity import Identified
from .tokens import Color, Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerSpec:
    """What a caller supplies to seat a player: a name and optionally the opening turn."""
    name: str
    starts: bool = False


class Player(Identified):
    """A seated player: draw pile, hand, score and first-player bookkeeping."""

    def __init__(self, name: str, score: int = 0) -> None:
        super().__init__()
        self.name = name
        self._draw_pile: List[Token] = []
        self._hand: Optional[Token] = None
        self._score = int(score)
        self.has_turn = False
        self.colors: List[Color] = []
        # Survives reset(); drives the opening-player rotation across games.
        self.first_player_count = 0

    @property
    def draw_pile(self) -> List[Token]:
        return self._draw_pile

    @property
    def hand(self) -> Optional[Token]:
        return self._hand

    @property
    def score(self) -> int:
        return self._score

    def fill_pile(self, tokens: Iterable[Token], rng: random.Random) -> None:
        """Adds tokens to the draw pile and reshuffles it."""
        self._draw_pile.extend(tokens)
        rng.shuffle(self._draw_pile)

    def draw(self, token: Optional[Token] = None) -> Optional[Token]:
        """Moves the top of the pile (or the given pile token) into the hand.

        Returns None when the pile is empty.
        """
        if self._hand is not None:
            raise RuntimeError(f"{self.name} already holds {self._hand!r}")
        if not self._draw_pile:
            return None
        if token is None:
            drawn = self._draw_pile.pop()
        else:
            self._draw_pile.remove(token)
            drawn = token
        self._hand = drawn
        logger.debug("%s draws %r (%d left)", self.name, drawn, len(self._draw_pile))
        return drawn

    def release_hand(self) -> Optional[Token]:
        token, self._hand = self._hand, None
        return token

    def add_points(self, points: int = 1) -> None:
        self._score += points

    def reset(self) -> None:
        """Clears per-game state; first_player_count is kept."""
        self._draw_pile = []
        self._hand = None
        self._score = 0
        self.has_turn = False
        self.colors = []

    def __repr__(self) -> str:
        return f"Player({self.name!r}, score={self._score})"
