from __future__ import annotations

import random
from typing import Dict, List, Sequence

from .player import Player
from .tokens import Color, MAX_VALUE, MIN_VALUE, Token

COPIES_PER_TOKEN = 2
POOL_SIZE = len(Color) * (MAX_VALUE - MIN_VALUE + 1) * COPIES_PER_TOKEN  # 72
SHARED_COLOR_SHARE = 6  # tokens of the leftover color each player gets in a 3-player game


def build_pool() -> Dict[Color, List[Token]]:
    """Creates the full 72-token pool, grouped by color."""
    pool: Dict[Color, List[Token]] = {}
    for color in Color:
        pool[color] = [
            Token(color, value)
            for value in range(MIN_VALUE, MAX_VALUE + 1)
            for _ in range(COPIES_PER_TOKEN)
        ]
    return pool


def distribute(players: Sequence[Player], rng: random.Random) -> None:
    """Assigns colors and fills (and shuffles) each player's draw pile.

    2 players get two colors each, 4 players one color each. With 3 players each
    gets one color plus 6 random tokens of the color nobody owns.
    """
    count = len(players)
    if count < 2 or count > 4:
        raise ValueError("The number of players must be between 2 and 4.")
    pool = build_pool()
    colors: List[Color] = list(Color)
    rng.shuffle(colors)

    per_player = 2 if count == 2 else 1
    for player in players:
        player.colors = [colors.pop() for _ in range(per_player)]

    leftover: List[Token] = []
    if count == 3:
        leftover = list(pool[colors.pop()])
        rng.shuffle(leftover)

    for player in players:
        tokens: List[Token] = []
        for color in player.colors:
            tokens.extend(pool[color])
        if leftover:
            tokens.extend(leftover[:SHARED_COLOR_SHARE])
            del leftover[:SHARED_COLOR_SHARE]
        player.fill_pile(tokens, rng)
