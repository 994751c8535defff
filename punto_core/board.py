from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence, Union

from . import moves
from .deal import POOL_SIZE, distribute
from .identity import Identified
from .player import Player, PlayerSpec
from .series import find_series, resolve_blocked_winners, series_owners, top_tokens
from .state import (
    AUTO,
    CoordinateProvider,
    GameOverError,
    Outcome,
    PlayResult,
    PromptContext,
    Verdict,
)
from .tokens import Coord, Token

logger = logging.getLogger(__name__)

BLOCKED_SERIES_LENGTH = 3
ORIGIN: Coord = (0, 0)

Reporter = Callable[["Board"], None]


class _Refused:
    pass


_REFUSED = _Refused()


def print_board(board: "Board") -> None:
    print(board.pretty())
    print()


class Board(Identified):
    """The Punto rule engine: grid state, legality, turns and victory.

    Players are seated in the order given. The opening player is the first PlayerSpec
    with ``starts=True``, otherwise one drawn from ``rng``. Every round starts
    with the opening player and runs through the seats in order.
    """

    def __init__(
        self,
        player_specs: Sequence[Union[PlayerSpec, str]],
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        coordinate_provider: Optional[CoordinateProvider] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        super().__init__()
        if len(player_specs) < 2 or len(player_specs) > 4:
            raise ValueError("The number of players must be between 2 and 4.")
        self._rng = rng if rng is not None else random.Random(seed)
        self.coordinate_provider = coordinate_provider
        self.reporter: Reporter = reporter or print_board

        specs = [PlayerSpec(s) if isinstance(s, str) else s for s in player_specs]
        self._players: List[Player] = [Player(spec.name) for spec in specs]
        self._placed: List[Token] = []
        self._turn_counter = 0
        self._outcome = Outcome.UNDECIDED
        self._winners: List[Player] = []
        self._losers: List[Player] = []

        opener_index = next((i for i, s in enumerate(specs) if s.starts), None)
        if opener_index is None:
            opener_index = self._rng.randrange(len(self._players))
        self._set_opener(self._players[opener_index])
        distribute(self._players, self._rng)

    # ---------- accessors ----------

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def placed_tokens(self) -> List[Token]:
        return list(self._placed)

    @property
    def turn_counter(self) -> int:
        return self._turn_counter

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def winners(self) -> List[Player]:
        return list(self._winners)

    @property
    def losers(self) -> List[Player]:
        return list(self._losers)

    @property
    def opener(self) -> Player:
        return self._players[self._opener_index]

    @property
    def current_player(self) -> Optional[Player]:
        return next((p for p in self._players if p.has_turn), None)

    @property
    def is_over(self) -> bool:
        return self._outcome is not Outcome.UNDECIDED

    @property
    def is_empty(self) -> bool:
        return not self._placed

    @property
    def is_full(self) -> bool:
        return len(self._placed) == POOL_SIZE

    @property
    def required_length(self) -> int:
        return 5 if len(self._players) == 2 else 4

    @property
    def rng(self) -> random.Random:
        return self._rng

    # ---------- placement ----------

    def can_place(self, token: Token, x: int, y: int) -> bool:
        return moves.can_place(self._placed, token.value, int(x), int(y))

    def available_coordinates(self, value: int) -> List[Coord]:
        return moves.available_coordinates(self._placed, value)

    def pick_coordinates(self, value: int) -> Optional[Coord]:
        """Uniform random choice among the available cells, or None if there are none."""
        if self.is_empty:
            return ORIGIN
        available = self.available_coordinates(value)
        if not available:
            return None
        return self._rng.choice(available)

    def play_token(self, player: Player, order_index: int, token: Token, x: int, y: int) -> PlayResult:
        """Places the token the player holds. Failures are reported, not raised,
        and leave the board untouched."""
        if self.is_over:
            raise GameOverError("The game is already over.")
        if player.hand is None or player.hand is not token:
            return PlayResult.NO_TOKEN_IN_HAND
        if not self.can_place(token, x, y):
            return PlayResult.ILLEGAL_PLACEMENT
        token.place(x, y, self._turn_counter, order_index, player)
        self._placed.append(token)
        player.release_hand()
        logger.debug("turn %d: %s places %r", self._turn_counter, player.name, token)
        return PlayResult.PLACED

    # ---------- victory ----------

    def check_victory(self, blocked: bool = False) -> Verdict:
        """Evaluates the board.

        A run of the required length owned by exactly one player wins. Otherwise,
        if the board is full, the current player is stuck with a token, or
        ``blocked`` is set, the game is settled on runs of three.
        """
        series = find_series(self._placed, self.required_length)
        owners = series_owners(series)
        if len(owners) == 1:
            return self._verdict(Outcome.WIN, owners)
        if len(owners) > 1:
            logger.warning(
                "Board %s: %d players completed a run at once; no winner declared",
                self.id, len(owners),
            )

        current = self.current_player
        stuck = current is not None and current.hand is not None
        if not (blocked or stuck or self.is_full):
            return Verdict(Outcome.UNDECIDED)

        winners = resolve_blocked_winners(find_series(self._placed, BLOCKED_SERIES_LENGTH))
        if not winners:
            return Verdict(Outcome.DRAW, [], list(self._players))
        return self._verdict(Outcome.WIN, winners)

    def _verdict(self, outcome: Outcome, winners: List[Player]) -> Verdict:
        losers = [p for p in self._players if all(p is not w for w in winners)]
        return Verdict(outcome, list(winners), losers)

    def end_game(self, verdict: Verdict) -> None:
        if not verdict.decided:
            raise ValueError("Cannot end a game on an undecided verdict")
        self._outcome = verdict.outcome
        self._winners = list(verdict.winners)
        self._losers = list(verdict.losers)
        if verdict.outcome is Outcome.WIN:
            for player in self._winners:
                player.add_points(1)
        logger.info(
            "Board %s ended after %d turns: %s (winners: %s)",
            self.id, self._turn_counter, self._outcome.value,
            ", ".join(p.name for p in self._winners) or "none",
        )

    # ---------- turns ----------

    def seat_order(self) -> List[Player]:
        """Players in playing order for a round, starting with the opener."""
        i = self._opener_index
        return self._players[i:] + self._players[:i]

    def _give_turn(self, player: Player) -> None:
        for p in self._players:
            p.has_turn = p is player

    async def run_turn(self, auto: bool = False, report_each_move: bool = False) -> None:
        """Plays one round: every player draws and places one token.

        Returns early as soon as the game is decided.
        """
        if self.is_over:
            raise GameOverError("The game is already over.")
        for order_index, player in enumerate(self.seat_order()):
            self._give_turn(player)
            if player.hand is not None:
                raise RuntimeError(f"{player.name} already has a token in hand.")
            token = player.draw()
            if token is None:
                self.end_game(self.check_victory(blocked=True))
                return

            if self.is_empty:
                cell: Union[Coord, _Refused, None] = ORIGIN
            else:
                cell = await self._ask_for_cell(player, token, auto)
            if cell is _REFUSED:
                logger.info("%s refused to play", player.name)
                self.end_game(Verdict(Outcome.DROP, [], list(self._players)))
                return
            if cell is None:
                # The token stays in hand, which marks the board as blocked.
                self.end_game(self.check_victory())
                return

            x, y = cell  # type: ignore[misc]
            result = self.play_token(player, order_index, token, x, y)
            if result is not PlayResult.PLACED:
                raise RuntimeError(f"Validated placement was rejected: {result.value}")
            if report_each_move:
                self.reporter(self)
            verdict = self.check_victory()
            if verdict.decided:
                self.end_game(verdict)
                return
        self._turn_counter += 1
        self._give_turn(self.opener)

    async def _ask_for_cell(self, player: Player, token: Token, auto: bool) -> Union[Coord, _Refused, None]:
        if auto:
            return self.pick_coordinates(token.value)
        if self.coordinate_provider is None:
            raise RuntimeError("Manual play needs a coordinate provider")
        available = tuple(self.available_coordinates(token.value))
        if not available:
            # Stuck with the token: the caller settles the game as blocked.
            logger.info("%s has no cell for %r", player.name, token)
            return None
        first_attempt = True
        while True:
            context = PromptContext(
                player=player,
                token=token,
                first_attempt=first_attempt,
                available=available,
            )
            answer = await self.coordinate_provider(context)
            if answer is None:
                return _REFUSED
            if answer is AUTO:
                return self.pick_coordinates(token.value)
            x, y = answer  # type: ignore[misc]
            if self.can_place(token, x, y):
                return (int(x), int(y))
            logger.debug("%s asked for illegal cell (%s, %s)", player.name, x, y)
            first_attempt = False

    # ---------- lifecycle ----------

    def _set_opener(self, player: Player) -> None:
        self._opener_index = self._players.index(player)
        player.first_player_count += 1
        self._give_turn(player)

    def reset(self) -> None:
        """Starts a fresh game with the same players.

        The player who has opened the fewest games opens this one.
        """
        self.regenerate_id()
        self._placed = []
        for player in self._players:
            player.reset()
        self._turn_counter = 0
        self._outcome = Outcome.UNDECIDED
        self._winners = []
        self._losers = []
        self._set_opener(min(self._players, key=lambda p: p.first_player_count))
        distribute(self._players, self._rng)

    def token_count(self) -> int:
        """Tokens across all piles, hands and the board; always 72."""
        in_play = sum(len(p.draw_pile) + (1 if p.hand is not None else 0) for p in self._players)
        return in_play + len(self._placed)

    def pretty(self) -> str:
        """Text rendering of the 11x11 window: top token per cell, '..' for empty
        cells next to a token."""
        top = top_tokens(self._placed)
        limit = moves.BOARD_LIMIT
        header = "   " + " ".join(f"{x:>2}" for x in range(-limit, limit + 1))
        lines: List[str] = [header]
        for y in range(-limit, limit + 1):
            row: List[str] = []
            for x in range(-limit, limit + 1):
                token = top.get((x, y))
                if token is not None:
                    row.append(token.label())
                elif any(n in top for n in moves.neighbors((x, y))):
                    row.append("..")
                else:
                    row.append("  ")
            lines.append(f"{y:>2} " + " ".join(row))
        lines.append(f"Placed tokens: {len(self._placed)}  Remaining: {POOL_SIZE - len(self._placed)}")
        return "\n".join(lines)
