"""
Representation of the full game state as a single string (the Abalone counterpart of a chess FEN).
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.abalone.board import STARTING_LAYOUT, HexBoard
from src.abalone.pieces import LAYOUT_TO_OCCUPANT, OCCUPANT_TO_LAYOUT, PIECES_PER_PLAYER, Occupant
from src.core.exceptions import InvalidPositionError

STARTING_POSITION = f"{STARTING_LAYOUT} b 0 0 0"

# Standard rules: the first player to push 6 opposing marbles off the board wins
WIN_THRESHOLD = 6


def is_valid_position(position: str) -> bool:
    """Check if the given string follows the position notation."""
    parts = position.split(" ")
    if len(parts) != 5:
        return False

    layout, color, captured_black, captured_white, num_moves = parts
    if not is_valid_layout(layout):
        return False

    if not is_valid_color_code(color):
        return False

    if not (is_valid_counter(captured_black) and is_valid_counter(captured_white)):
        return False

    if not num_moves.isdecimal():
        return False

    # every marble is either still on the board or has been captured
    board = HexBoard.from_layout(layout)
    return (
        board.count(Occupant.BLACK) + int(captured_black) == PIECES_PER_PLAYER
        and board.count(Occupant.WHITE) + int(captured_white) == PIECES_PER_PLAYER
    )


def is_valid_layout(layout: str) -> bool:
    try:
        HexBoard.from_layout(layout)
    except InvalidPositionError:
        return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in LAYOUT_TO_OCCUPANT


def is_valid_counter(counter: str) -> bool:
    return counter.isdecimal() and int(counter) <= PIECES_PER_PLAYER


@dataclass
class PositionState:
    """
    Data that can be constructed from a position string.
    ----

    <board layout> <player to move> <captured black marbles> <captured white marbles> <moves played>

    * The layout string is described in the HexBoard class
    * The player to move is either "b" or "w"
    * The captured counters count marbles OF THAT COLOR that were pushed off the board
    * The number of moves played starts at 0 and increments after every move (either color). Serves as turn token.

    ex) The standard starting position
    3ww/4ww/b4ww/bb4ww/bbb3www/bb4ww/bb4w/bb4/bb3 b 0 0 0
    i.e. black to move, nothing captured yet, no moves played.
    """

    layout: str
    color_to_move: Occupant
    captured_black: int
    captured_white: int
    num_moves: int = 0

    @classmethod
    def from_text(cls, position: str) -> Self:
        if not is_valid_position(position):
            raise InvalidPositionError(f"Cannot interpret supplied string as position: {position!r}")

        layout, color, captured_black, captured_white, num_moves = position.split(" ")
        return cls(
            layout=layout,
            color_to_move=LAYOUT_TO_OCCUPANT[color],
            captured_black=int(captured_black),
            captured_white=int(captured_white),
            num_moves=int(num_moves),
        )

    def to_text(self) -> str:
        return f"{self.layout} {OCCUPANT_TO_LAYOUT[self.color_to_move]} {self.captured_black} {self.captured_white} {self.num_moves}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_text(STARTING_POSITION)

    def captured(self, color: Occupant) -> int:
        return self.captured_black if color == Occupant.BLACK else self.captured_white

    @property
    def winner(self) -> Optional[Occupant]:
        """The side that pushed 6 opposing marbles off wins. The winner is derived, not stored."""
        if self.captured_white >= WIN_THRESHOLD:
            return Occupant.BLACK
        if self.captured_black >= WIN_THRESHOLD:
            return Occupant.WHITE
        return None
