from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .config import DB_DIR_ENV

logger = logging.getLogger(__name__)


def _fallback_dirs() -> List[str]:
    return [d for d in (os.getenv(DB_DIR_ENV), os.path.join(os.getcwd(), 'data'), tempfile.gettempdir()) if d]


def _connect(db_path: str) -> sqlite3.Connection:
    """Opens the game DB with its tables in place.

    The parent directory is created on first use. If that fails, the same file
    name is opened in the first usable fallback directory instead.
    """
    path = db_path
    parent = os.path.dirname(db_path)
    try:
        if parent:
            os.makedirs(parent, exist_ok=True)
    except OSError as e:
        name = os.path.basename(db_path) or 'punto.db'
        path = name
        for directory in _fallback_dirs():
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError:
                continue
            path = os.path.join(directory, name)
            break
        logger.warning("Cannot use %s (%s); storing games in %s", db_path, e, path)
    conn = sqlite3.connect(path)
    _ensure_db(conn)
    return conn


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the tables for finished games exist."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS games (
            id TEXT PRIMARY KEY,
            outcome TEXT NOT NULL,
            turns INTEGER NOT NULL,
            player_count INTEGER NOT NULL,
            finished_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS games_outcome ON games (outcome);
        CREATE TABLE IF NOT EXISTS game_players (
            game_id TEXT NOT NULL,
            seat INTEGER NOT NULL,
            player_id TEXT NOT NULL,
            name TEXT NOT NULL,
            score INTEGER NOT NULL,
            status TEXT NOT NULL,
            colors TEXT NOT NULL,
            first_player_count INTEGER NOT NULL,
            PRIMARY KEY (game_id, seat)
        );
        CREATE INDEX IF NOT EXISTS game_players_name ON game_players (name);
        CREATE TABLE IF NOT EXISTS tokens (
            game_id TEXT NOT NULL,
            seq INTEGER NOT NULL,
            color TEXT NOT NULL,
            value INTEGER NOT NULL,
            x INTEGER NOT NULL,
            y INTEGER NOT NULL,
            turn INTEGER NOT NULL,
            play_order INTEGER NOT NULL,
            owner_id TEXT,
            PRIMARY KEY (game_id, seq)
        );
        """
    )
    conn.commit()


def db_store_game(db_path: str, snapshot: Dict[str, Any]) -> str:
    """Stores a finished game snapshot (see snapshot.board_to_json). Returns the game id."""
    game_id = str(snapshot["id"])
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO games (id, outcome, turns, player_count, finished_at) VALUES (?, ?, ?, ?, ?)",
                (
                    game_id,
                    snapshot["outcome"],
                    int(snapshot["turn"]),
                    len(snapshot["players"]),
                    datetime.now(timezone.utc).isoformat(timespec='seconds'),
                ),
            )
            conn.execute("DELETE FROM game_players WHERE game_id = ?", (game_id,))
            conn.execute("DELETE FROM tokens WHERE game_id = ?", (game_id,))
            conn.executemany(
                """
                INSERT INTO game_players
                (game_id, seat, player_id, name, score, status, colors, first_player_count)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        game_id,
                        seat,
                        p["id"],
                        p["name"],
                        int(p["score"]),
                        p["status"],
                        json.dumps(p["colors"]),
                        int(p["firstPlayerCount"]),
                    )
                    for seat, p in enumerate(snapshot["players"])
                ],
            )
            conn.executemany(
                """
                INSERT INTO tokens (game_id, seq, color, value, x, y, turn, play_order, owner_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (game_id, seq, t["color"], t["value"], t["x"], t["y"], t["turn"], t["order"], t["owner"])
                    for seq, t in enumerate(snapshot["tokens"])
                ],
            )
    finally:
        conn.close()
    return game_id


def db_load_game(db_path: str, game_id: str) -> Optional[Dict[str, Any]]:
    """Loads a stored game back into snapshot form, or None if unknown."""
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT outcome, turns, finished_at FROM games WHERE id = ?", (game_id,)).fetchone()
        if not row:
            return None
        outcome, turns, finished_at = row
        players = [
            {
                "id": pid,
                "name": name,
                "score": score,
                "status": status,
                "colors": json.loads(colors),
                "firstPlayerCount": fpc,
            }
            for pid, name, score, status, colors, fpc in conn.execute(
                """
                SELECT player_id, name, score, status, colors, first_player_count
                FROM game_players WHERE game_id = ? ORDER BY seat
                """,
                (game_id,),
            )
        ]
        tokens = [
            {"color": c, "value": v, "x": x, "y": y, "turn": t, "order": o, "owner": owner}
            for c, v, x, y, t, o, owner in conn.execute(
                """
                SELECT color, value, x, y, turn, play_order, owner_id
                FROM tokens WHERE game_id = ? ORDER BY seq
                """,
                (game_id,),
            )
        ]
        return {
            "id": game_id,
            "outcome": outcome,
            "turn": turns,
            "finishedAt": finished_at,
            "players": players,
            "tokens": tokens,
            "winners": [p["id"] for p in players if p["status"] == "win"],
            "losers": [p["id"] for p in players if p["status"] == "lose"],
        }
    finally:
        conn.close()


def db_list_games(db_path: str, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    """Most recent games first."""
    conn = _connect(db_path)
    try:
        cur = conn.execute(
            """
            SELECT id, outcome, turns, player_count, finished_at FROM games
            ORDER BY finished_at DESC, rowid DESC LIMIT ? OFFSET ?
            """,
            (int(limit), int(offset)),
        )
        return [
            {"id": gid, "outcome": outcome, "turn": turns, "playerCount": count, "finishedAt": at}
            for gid, outcome, turns, count, at in cur.fetchall()
        ]
    finally:
        conn.close()


def db_player_stats(db_path: str) -> List[Dict[str, Any]]:
    """Games played, games won and points per player name."""
    conn = _connect(db_path)
    try:
        cur = conn.execute(
            """
            SELECT name, COUNT(*), SUM(CASE WHEN status = 'win' THEN 1 ELSE 0 END), SUM(score)
            FROM game_players GROUP BY name ORDER BY name
            """
        )
        return [
            {"name": name, "games": int(games), "wins": int(wins or 0), "points": int(points or 0)}
            for name, games, wins, points in cur.fetchall()
        ]
    finally:
        conn.close()


class SQLiteGameRepository:
    """Game repository backed by a single SQLite file."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def save(self, snapshot: Dict[str, Any]) -> str:
        return db_store_game(self.db_path, snapshot)

    def load(self, game_id: str) -> Optional[Dict[str, Any]]:
        return db_load_game(self.db_path, game_id)

    def list_games(self, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
        return db_list_games(self.db_path, limit=limit, offset=offset)

    def player_stats(self) -> List[Dict[str, Any]]:
        return db_player_stats(self.db_path)
