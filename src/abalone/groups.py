"""
Turn the cells a player selected into a group of marbles that can move together.

A group is 1 to 3 marbles of the same color on consecutive cells of one straight line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from src.abalone.hexagon import DIRECTIONS, Hex, projection
from src.abalone.pieces import Occupant
from src.core.exceptions import InvalidSelectionError

MAX_GROUP_SIZE = 3


class Board(Protocol):
    """Just the parts the resolver needs"""

    def exists(self, cell: Hex) -> bool: ...
    def get(self, cell: Hex) -> Occupant: ...


@dataclass(frozen=True)
class PieceGroup:
    """Marbles ordered back to front along `direction` (None for a single marble)."""

    pieces: tuple[Hex, ...]
    direction: Optional[Hex]
    color: Occupant

    @property
    def size(self) -> int:
        return len(self.pieces)

    @property
    def back(self) -> Hex:
        return self.pieces[0]

    @property
    def front(self) -> Hex:
        return self.pieces[-1]

    def reversed(self) -> PieceGroup:
        """Same marbles, looking the other way along the line."""
        if self.direction is None:
            return self
        return PieceGroup(tuple(reversed(self.pieces)), -self.direction, self.color)

    def shifted(self, step: Hex) -> tuple[Hex, ...]:
        return tuple(piece + step for piece in self.pieces)


def resolve_group(
    board: Board, selection: Iterable[Hex], player: Occupant
) -> PieceGroup:
    """
    Validate a selection and order it into a PieceGroup
    ----

    1. 1 to 3 distinct cells, all on the board, all holding the player's marbles
    2. one cell: nothing more to check
    3. two cells: they must be neighbours
    4. three cells: exactly p, p+d, p+2d for one of the six directions d
    """
    cells = list(selection)

    if not 1 <= len(cells) <= MAX_GROUP_SIZE:
        raise InvalidSelectionError(
            f"A group has 1 to {MAX_GROUP_SIZE} marbles, got {len(cells)}."
        )

    if len(set(cells)) != len(cells):
        raise InvalidSelectionError(f"Selection contains duplicates: {cells}")

    for cell in cells:
        if not board.exists(cell):
            raise InvalidSelectionError(f"{cell} is not on the board.")
        if board.get(cell) != player:
            raise InvalidSelectionError(
                f"{cell} does not hold a {player.name.lower()} marble."
            )

    if len(cells) == 1:
        return PieceGroup((cells[0],), None, player)

    line = _find_line(cells)
    if line is None:
        raise InvalidSelectionError(
            f"Marbles {cells} are not on consecutive cells of a straight line."
        )
    direction, ordered = line
    return PieceGroup(ordered, direction, player)


def _find_line(cells: list[Hex]) -> Optional[tuple[Hex, tuple[Hex, ...]]]:
    """Find the first direction along which the cells are consecutive, back cell first."""
    wanted = set(cells)
    for direction in DIRECTIONS:
        back = min(cells, key=lambda cell: projection(cell, direction))
        line = tuple(back + direction.scaled(step) for step in range(len(cells)))
        if set(line) == wanted:
            return direction, line
    return None
