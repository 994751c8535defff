from collections import Counter
from typing import List, Optional

from punto_core.board import Board
from punto_core.player import Player
from punto_core.state import PlayResult
from punto_core.tokens import Color, Token


def take(player: Player, color: Color, value: int) -> Token:
    """Draws a specific token from the player's pile into the hand."""
    token = next(t for t in player.draw_pile if t.color == color and t.value == value)
    player.draw(token)
    return token


def place(board: Board, player: Player, color: Color, value: int, x: int, y: int) -> PlayResult:
    token = take(player, color, value)
    return board.play_token(player, 0, token, x, y)


def loose(color: Color, value: int, x: int, y: int, owner: Optional[Player] = None, order: int = 0) -> Token:
    token = Token(color, value)
    token.place(x, y, 0, order, owner)
    return token


def all_tokens(board: Board) -> List[Token]:
    out: List[Token] = list(board.placed_tokens)
    for p in board.players:
        out.extend(p.draw_pile)
        if p.hand is not None:
            out.append(p.hand)
    return out


def pair_counts(board: Board) -> Counter:
    return Counter((t.color, t.value) for t in all_tokens(board))


def fill_box(board: Board, player: Player) -> None:
    """Covers the 6x6 box (0..5, 0..5) with the player's 36 tokens.

    Each row holds three tokens of one color then three of the other, flipping
    every row: runs of three along rows, nothing longer in any direction.
    """
    first, second = player.colors
    by_color = {c: [t for t in player.draw_pile if t.color == c] for c in (first, second)}
    for y in range(6):
        for x in range(6):
            color = (first, second)[(x // 3 + y) % 2]
            token = by_color[color].pop()
            player.draw(token)
            result = board.play_token(player, 0, token, x, y)
            if result is not PlayResult.PLACED:
                raise AssertionError(f"could not place {token!r} at {(x, y)}: {result.value}")


def put_on_top(player: Player, value: int) -> Token:
    """Moves a pile token of the given value to the top, so it is drawn next."""
    token = next(t for t in player.draw_pile if t.value == value)
    player.draw_pile.remove(token)
    player.draw_pile.append(token)
    return token
