from __future__ import annotations

from typing import Iterable, List, Sequence, Set

from .tokens import Coord, Token

BOARD_LIMIT = 5  # cells run from -5 to 5 on both axes
MAX_SPAN = 6  # placed tokens may not spread over more than 6 cells on an axis

NEIGHBOR_OFFSETS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


def in_window(coord: Coord) -> bool:
    x, y = coord
    return -BOARD_LIMIT <= x <= BOARD_LIMIT and -BOARD_LIMIT <= y <= BOARD_LIMIT


def exceeds_span(placed: Sequence[Token], coord: Coord) -> bool:
    """True when adding `coord` would stretch the bounding box of the placed
    tokens to a distance of MAX_SPAN or more on either axis.

    The cap applies to the whole board, not to each line.
    """
    xs = [t.coord[0] for t in placed if t.coord is not None] + [coord[0]]
    ys = [t.coord[1] for t in placed if t.coord is not None] + [coord[1]]
    return max(xs) - min(xs) >= MAX_SPAN or max(ys) - min(ys) >= MAX_SPAN


def neighbors(coord: Coord) -> List[Coord]:
    """The in-window cells around `coord` (8-neighborhood)."""
    x, y = coord
    out: List[Coord] = []
    for dx, dy in NEIGHBOR_OFFSETS:
        nxt = (x + dx, y + dy)
        if in_window(nxt):
            out.append(nxt)
    return out


def _blocked_cells(placed: Iterable[Token], value: int) -> Set[Coord]:
    return {t.coord for t in placed if t.coord is not None and t.value >= value}


def available_coordinates(placed: Sequence[Token], value: int) -> List[Coord]:
    """Cells where a token of `value` may go on a non-empty board.

    A candidate is a placed token's cell or one of its neighbors, not holding a
    token of equal or higher value, and not breaking the span cap.
    """
    blocked = _blocked_cells(placed, value)
    candidates: Set[Coord] = set()
    for token in placed:
        if token.coord is None:
            continue
        for cell in [token.coord] + neighbors(token.coord):
            if cell not in blocked:
                candidates.add(cell)
    return sorted(c for c in candidates if not exceeds_span(placed, c))


def can_place(placed: Sequence[Token], value: int, x: int, y: int) -> bool:
    coord = (x, y)
    if not in_window(coord):
        return False
    if exceeds_span(placed, coord):
        return False
    if not placed:
        return True
    return coord in set(available_coordinates(placed, value))
