from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from .board import Board, Reporter
from .identity import Identified
from .player import PlayerSpec
from .snapshot import board_to_json
from .state import CoordinateProvider

logger = logging.getLogger(__name__)


class GameRepository(Protocol):
    def save(self, snapshot: Dict[str, Any]) -> str:
        ...


class DisplayMode(str, Enum):
    NONE = "none"
    END = "end"
    START_AND_END = "start-end"
    EACH_TURN = "turn"
    EACH_MOVE = "move"


@dataclass(frozen=True)
class GameResult:
    board_id: str
    outcome: str
    winners: List[str]
    losers: List[str]
    turns: int
    placed: int
    stored_id: Optional[str] = None

    def lines(self) -> List[str]:
        out: List[str] = []
        if len(self.winners) == 1:
            out.append(f"The winner is {self.winners[0]}.")
        elif self.winners:
            out.append(f"The winners are {', '.join(self.winners)}.")
        else:
            out.append(f"No winner ({self.outcome}).")
        if len(self.losers) == 1:
            out.append(f"The loser is {self.losers[0]}.")
        elif self.losers:
            out.append(f"The losers are {', '.join(self.losers)}.")
        out.append(f"The game lasted {self.turns} turns.")
        return out


class Punto(Identified):
    """Drives one Board through turns until it is decided or a turn limit runs out,
    then hands the final snapshot to the repository, if any."""

    def __init__(
        self,
        player_specs: Sequence[Union[PlayerSpec, str]],
        auto: bool = True,
        display: DisplayMode = DisplayMode.NONE,
        repository: Optional[GameRepository] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        coordinate_provider: Optional[CoordinateProvider] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        super().__init__()
        self.auto = auto
        self.display = DisplayMode(display)
        self.repository = repository
        self._board = Board(
            player_specs,
            rng=rng,
            seed=seed,
            coordinate_provider=coordinate_provider,
            reporter=reporter,
        )

    @property
    def board(self) -> Board:
        return self._board

    async def play(self, max_turns: Optional[int] = None) -> GameResult:
        """Plays until the game is over, or for at most `max_turns` rounds when given."""
        board = self._board
        if self.display is DisplayMode.START_AND_END:
            board.reporter(board)
        played = 0
        while not board.is_over and (max_turns is None or max_turns <= 0 or played < max_turns):
            await board.run_turn(auto=self.auto, report_each_move=self.display is DisplayMode.EACH_MOVE)
            played += 1
            if self.display is DisplayMode.EACH_TURN:
                board.reporter(board)
        if self.display in (DisplayMode.END, DisplayMode.START_AND_END):
            board.reporter(board)

        stored_id = self._store() if board.is_over else None
        return GameResult(
            board_id=board.id,
            outcome=board.outcome.value,
            winners=[p.name for p in board.winners],
            losers=[p.name for p in board.losers],
            turns=board.turn_counter,
            placed=len(board.placed_tokens),
            stored_id=stored_id,
        )

    def play_sync(self, max_turns: Optional[int] = None) -> GameResult:
        return asyncio.run(self.play(max_turns))

    def _store(self) -> Optional[str]:
        if self.repository is None:
            return None
        try:
            return self.repository.save(board_to_json(self._board))
        except Exception:
            # Storage problems never change the result of a finished game.
            logger.exception("Failed to store game %s", self._board.id)
            return None

    def reset(self) -> None:
        self.regenerate_id()
        self._board.reset()
