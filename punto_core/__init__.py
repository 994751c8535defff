"""
Punto core Python package.

This package contains the rule engine for Punto and the small amount of glue
needed to drive and store games.
Modules:
- tokens.py: Token, Color, Coord
- player.py: Player, PlayerSpec
- deal.py: token pool and distribution
- series.py: run detection and the blocked-game tie-break
- board.py: Board (legality, turns, victory)
- session.py: Punto game orchestrator
- snapshot.py, db.py: JSON snapshots and SQLite persistence
- cli.py: command line driver
"""
