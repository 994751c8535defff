from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence

from .player import Player
from .tokens import Coord, Token

Series = List[Token]


@dataclass(frozen=True)
class LineKind:
    """One family of lines: tokens sharing `key` lie on the same line, ordered by `order`."""
    name: str
    key: Callable[[Coord], int]
    order: Callable[[Coord], int]
    step: Coord


LINE_KINDS = (
    LineKind("row", key=lambda c: c[1], order=lambda c: c[0], step=(1, 0)),
    LineKind("column", key=lambda c: c[0], order=lambda c: c[1], step=(0, 1)),
    LineKind("diagonal", key=lambda c: c[0] - c[1], order=lambda c: c[0], step=(1, 1)),
    LineKind("anti-diagonal", key=lambda c: c[0] + c[1], order=lambda c: c[0], step=(1, -1)),
)


def top_tokens(placed: Iterable[Token]) -> Dict[Coord, Token]:
    """Maps each occupied cell to its visible token (the highest value on the stack)."""
    top: Dict[Coord, Token] = {}
    for token in placed:
        coord = token.coord
        if coord is None:
            continue
        current = top.get(coord)
        if current is None or token.value > current.value:
            top[coord] = token
    return top


def _continues(prev: Token, nxt: Token, step: Coord) -> bool:
    px, py = prev.coord  # type: ignore[misc]
    nx, ny = nxt.coord  # type: ignore[misc]
    return (
        nx == px + step[0]
        and ny == py + step[1]
        and nxt.color == prev.color
        and nxt.owner is prev.owner
    )


def _runs_on_line(line: Sequence[Token], step: Coord, min_length: int) -> List[Series]:
    runs: List[Series] = []
    current: Series = []
    for token in line:
        if current and _continues(current[-1], token, step):
            current.append(token)
            continue
        if len(current) >= min_length:
            runs.append(current)
        current = [token]
    if len(current) >= min_length:
        runs.append(current)
    return runs


def find_series(placed: Iterable[Token], min_length: int) -> List[Series]:
    """Finds every maximal run of at least `min_length` same-color, same-owner
    tokens along rows, columns and both diagonals."""
    top = top_tokens(placed)
    found: List[Series] = []
    for kind in LINE_KINDS:
        lines: Dict[int, List[Token]] = defaultdict(list)
        for coord, token in top.items():
            lines[kind.key(coord)].append(token)
        for key in sorted(lines):
            line = sorted(lines[key], key=lambda t: kind.order(t.coord))  # type: ignore[arg-type]
            found.extend(_runs_on_line(line, kind.step, min_length))
    return found


def series_owners(series: Iterable[Series]) -> List[Player]:
    """Distinct owners of the given runs, in first-seen order."""
    owners: List[Player] = []
    for run in series:
        owner = run[0].owner
        if owner is not None and all(owner is not o for o in owners):
            owners.append(owner)
    return owners


def resolve_blocked_winners(series: Sequence[Series]) -> List[Player]:
    """Tie-break for a blocked game, given the runs of length >= 3.

    Most runs wins; then the lowest total face value over those runs; players
    still tied all win. No runs means no winner.
    """
    owners = series_owners(series)
    if len(owners) <= 1:
        return owners

    def runs_of(player: Player) -> List[Series]:
        return [run for run in series if run[0].owner is player]

    counts = {id(p): len(runs_of(p)) for p in owners}
    best_count = max(counts.values())
    contenders = [p for p in owners if counts[id(p)] == best_count]
    if len(contenders) == 1:
        return contenders

    sums = {id(p): sum(t.value for run in runs_of(p) for t in run) for p in contenders}
    best_sum = min(sums.values())
    return [p for p in contenders if sums[id(p)] == best_sum]
