from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .board import Board
from .player import Player
from .tokens import Color, Token


def player_status(board: Board, player: Player) -> str:
    if any(player is w for w in board.winners):
        return "win"
    if any(player is l for l in board.losers):
        return "lose"
    return "none"


def token_to_json(t: Token) -> Dict[str, Any]:
    return {
        "id": t.id,
        "color": t.color.value,
        "value": int(t.value),
        "x": t.x,
        "y": t.y,
        "turn": t.placed_turn,
        "order": t.placed_order,
        "owner": t.owner.id if t.owner is not None else None,
    }


def player_to_json(board: Board, p: Player) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "score": int(p.score),
        "colors": [c.value for c in p.colors],
        "firstPlayerCount": int(p.first_player_count),
        "pile": len(p.draw_pile),
        "hand": token_to_json(p.hand) if p.hand is not None else None,
        "status": player_status(board, p),
    }


def board_to_json(board: Board) -> Dict[str, Any]:
    """JSON-ready snapshot of a board: what a repository stores and the API returns."""
    return {
        "id": board.id,
        "outcome": board.outcome.value,
        "turn": int(board.turn_counter),
        "requiredLength": board.required_length,
        "players": [player_to_json(board, p) for p in board.players],
        "tokens": [token_to_json(t) for t in board.placed_tokens],
        "winners": [p.id for p in board.winners],
        "losers": [p.id for p in board.losers],
    }


def tokens_from_json(items: Iterable[Dict[str, Any]]) -> List[Token]:
    """Builds placed tokens (without owners) from ``{"color", "value", "x", "y"}`` items."""
    out: List[Token] = []
    for i, obj in enumerate(items):
        token = Token(Color(str(obj["color"])), int(obj["value"]))
        token.place(int(obj["x"]), int(obj["y"]), int(obj.get("turn", 0)), int(obj.get("order", i)), None)
        out.append(token)
    return out
