"""Defines what can occupy a cell on the board"""

from enum import Enum, auto

from src.core.shared_types import Color


class Occupant(Enum):
    EMPTY = auto()
    BLACK = auto()
    WHITE = auto()

    @property
    def opponent(self) -> "Occupant":
        if self == Occupant.BLACK:
            return Occupant.WHITE
        if self == Occupant.WHITE:
            return Occupant.BLACK
        raise ValueError("An empty cell has no opponent.")

    def is_player(self) -> bool:
        return self != Occupant.EMPTY


PLAYERS: tuple[Occupant, ...] = (Occupant.BLACK, Occupant.WHITE)

# Every player starts with 14 marbles
PIECES_PER_PLAYER = 14

LAYOUT_TO_OCCUPANT: dict[str, Occupant] = {
    "b": Occupant.BLACK,
    "w": Occupant.WHITE,
}

OCCUPANT_TO_LAYOUT: dict[Occupant, str] = {
    value: key for key, value in LAYOUT_TO_OCCUPANT.items()
}


def to_color(occupant: Occupant) -> Color:
    """Domain -> boundary type"""
    return Color(occupant.name.lower())


def from_color(color: Color | str) -> Occupant:
    """Boundary -> domain type"""
    name = str(color).upper()
    if name not in {player.name for player in PLAYERS}:
        raise ValueError(f"Unknown player color: {color!r}")
    return Occupant[name]
