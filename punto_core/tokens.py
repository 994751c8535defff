from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from .identity import Identified

if TYPE_CHECKING:
    from .player import Player

Coord = Tuple[int, int]

MIN_VALUE = 1
MAX_VALUE = 9


class Color(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"

    @property
    def letter(self) -> str:
        return self.value[0].upper()


class Token(Identified):
    """A numbered, colored token.

    Color and value are fixed at creation. The placement fields (coordinates,
    turn, order within the turn and owner) are unset until the board commits the
    token, and are written exactly once.
    """

    def __init__(self, color: Color, value: int) -> None:
        super().__init__()
        color = Color(color)
        if not MIN_VALUE <= int(value) <= MAX_VALUE:
            raise ValueError(f"Token value must be in [{MIN_VALUE}, {MAX_VALUE}], got {value}")
        self._color = color
        self._value = int(value)
        self._coord: Optional[Coord] = None
        self._placed_turn: Optional[int] = None
        self._placed_order: Optional[int] = None
        self._owner: Optional["Player"] = None

    @property
    def color(self) -> Color:
        return self._color

    @property
    def value(self) -> int:
        return self._value

    @property
    def coord(self) -> Optional[Coord]:
        return self._coord

    @property
    def x(self) -> Optional[int]:
        return self._coord[0] if self._coord is not None else None

    @property
    def y(self) -> Optional[int]:
        return self._coord[1] if self._coord is not None else None

    @property
    def placed_turn(self) -> Optional[int]:
        return self._placed_turn

    @property
    def placed_order(self) -> Optional[int]:
        return self._placed_order

    @property
    def owner(self) -> Optional["Player"]:
        return self._owner

    @property
    def is_placed(self) -> bool:
        return self._coord is not None

    def place(self, x: int, y: int, turn: int, order: int, owner: Optional["Player"]) -> None:
        """Records where, when and by whom the token was placed."""
        if self._coord is not None:
            raise RuntimeError(f"Token {self!r} is already placed at {self._coord}")
        self._coord = (int(x), int(y))
        self._placed_turn = int(turn)
        self._placed_order = int(order)
        self._owner = owner

    def label(self) -> str:
        return f"{self._color.letter}{self._value}"

    def __repr__(self) -> str:
        where = f" at {self._coord}" if self._coord is not None else ""
        return f"Token({self._color.value} {self._value}{where})"
