from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from punto_core.config import DEFAULT_DB
from punto_core.db import SQLiteGameRepository
from punto_core.moves import available_coordinates
from punto_core.player import PlayerSpec
from punto_core.session import Punto
from punto_core.snapshot import board_to_json, tokens_from_json
from punto_core.tokens import MAX_VALUE, MIN_VALUE

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.setdefault("PUNTO_DB", DEFAULT_DB)


def _repository() -> SQLiteGameRepository:
    return SQLiteGameRepository(app.config["PUNTO_DB"])


def _error(message: str, status: int = 400) -> Tuple[Any, int]:
    logger.warning("%s %s -> %d: %s", request.method, request.path, status, message)
    return jsonify({"ok": False, "error": message}), status


def _player_specs(body: Dict[str, Any]) -> List[PlayerSpec]:
    names = body.get("names")
    if names:
        if not isinstance(names, list):
            raise ValueError("names must be a list")
        return [PlayerSpec(str(n)) for n in names]
    count = int(body.get("players", 2))
    return [PlayerSpec(f"Player {i + 1}") for i in range(count)]


@app.post("/api/simulate")
def api_simulate() -> Any:
    """Plays one automatic game and returns its final snapshot."""
    body = request.get_json(force=True, silent=True) or {}
    seed: Optional[int] = body.get("seed", None)
    try:
        specs = _player_specs(body)
        max_turns = int(body.get("maxTurns", 0))
        punto = Punto(
            specs,
            auto=True,
            repository=_repository() if body.get("save", True) else None,
            rng=random.Random(seed),
        )
    except (TypeError, ValueError) as e:
        return _error(str(e))
    result = punto.play_sync(max_turns=max_turns)
    return jsonify({
        "ok": True,
        "result": {
            "outcome": result.outcome,
            "winners": result.winners,
            "losers": result.losers,
            "turns": result.turns,
            "placed": result.placed,
            "storedId": result.stored_id,
        },
        "state": board_to_json(punto.board),
    })


@app.post("/api/available")
def api_available() -> Any:
    """Legal cells for a token value, given the tokens already on the board."""
    body = request.get_json(force=True, silent=True) or {}
    try:
        value = int(body["value"])
        if not MIN_VALUE <= value <= MAX_VALUE:
            raise ValueError(f"value must be in [{MIN_VALUE}, {MAX_VALUE}]")
        placed = tokens_from_json(body.get("tokens", []))
    except (KeyError, TypeError, ValueError) as e:
        return _error(f"invalid request: {e}")
    if not placed:
        return jsonify({"ok": True, "available": [[0, 0]], "empty": True})
    cells = available_coordinates(placed, value)
    return jsonify({"ok": True, "available": [[x, y] for (x, y) in cells], "empty": False})


@app.get("/api/games")
def api_games() -> Any:
    try:
        limit = int(request.args.get("limit", 50))
        offset = int(request.args.get("offset", 0))
    except ValueError:
        return _error("limit and offset must be integers")
    return jsonify({"ok": True, "games": _repository().list_games(limit=limit, offset=offset)})


@app.get("/api/games/<game_id>")
def api_game(game_id: str) -> Any:
    snapshot = _repository().load(game_id)
    if snapshot is None:
        return _error(f"unknown game {game_id}", 404)
    return jsonify({"ok": True, "state": snapshot})


@app.get("/api/stats")
def api_stats() -> Any:
    return jsonify({"ok": True, "players": _repository().player_stats()})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=False)
