from __future__ import annotations

import argparse
import random
import sys
from typing import List, Optional

from .config import DEFAULT_DB, DEFAULT_LOG_LEVEL, configure_logging
from .db import SQLiteGameRepository
from .player import PlayerSpec
from .session import DisplayMode, Punto


def _player_specs(count: int, names: Optional[str]) -> List[PlayerSpec]:
    given = [n.strip() for n in (names or '').split(',') if n.strip()]
    if len(set(given)) != len(given):
        raise ValueError('Player names must be distinct')
    if given and len(given) != count:
        raise ValueError(f'Expected {count} names, got {len(given)}')
    return [PlayerSpec(given[i] if given else f'Player {i + 1}') for i in range(count)]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Punto: play automatic games and store the results')
    parser.add_argument('--players', type=int, choices=[2, 3, 4], default=2, help='Number of players')
    parser.add_argument('--names', default=None, help='Comma separated player names')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for dealing and moves')
    parser.add_argument('--games', type=int, default=1, help='Number of games to play in a row')
    parser.add_argument('--max-turns', type=int, default=0, help='Stop each game after N rounds (0 = until decided)')
    parser.add_argument('--db', default=DEFAULT_DB, help='SQLite DB file path')
    parser.add_argument('--no-save', action='store_true', help='Do not store finished games')
    parser.add_argument('--show', choices=[m.value for m in DisplayMode], default=DisplayMode.END.value,
                        help='When to print the board')
    parser.add_argument('--log-level', default=DEFAULT_LOG_LEVEL, help='Logging level')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        specs = _player_specs(args.players, args.names)
    except ValueError as e:
        print(f'error: {e}', file=sys.stderr)
        return 2

    repository = None if args.no_save else SQLiteGameRepository(args.db)
    punto = Punto(
        specs,
        auto=True,
        display=DisplayMode(args.show),
        repository=repository,
        rng=random.Random(args.seed),
    )
    wins = {spec.name: 0 for spec in specs}
    for n in range(args.games):
        if n > 0:
            punto.reset()
        result = punto.play_sync(max_turns=args.max_turns)
        for name in result.winners:
            wins[name] += 1
        print(f'Game {n + 1}/{args.games} ({result.board_id}): {result.outcome}')
        for line in result.lines():
            print(line)
        if result.stored_id is not None:
            print(f'Stored as {result.stored_id} in {args.db}')
        print()

    if args.games > 1:
        print('Wins:')
        for player in punto.board.players:
            print(f'  {player.name}: {wins[player.name]} (opened {player.first_player_count} games)')
    return 0


if __name__ == '__main__':
    sys.exit(main())
