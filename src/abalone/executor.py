"""
Apply a classified move to the board and record what happened.

NOTE: the classification must have been computed against the very board passed in here. The executor trusts it.
"""

import logging
from dataclasses import dataclass, field
from typing import Self

from src.abalone.board import HexBoard
from src.abalone.hexagon import Hex
from src.abalone.moves import Classification
from src.abalone.pieces import LAYOUT_TO_OCCUPANT, OCCUPANT_TO_LAYOUT, Occupant
from src.core.exceptions import InvalidMoveError, InvalidPositionError
from src.core.shared_types import MoveKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedPiece:
    color: Occupant
    coordinate: Hex


@dataclass(frozen=True)
class MoveRecord:
    """What a move did, kept in the game history. `group` holds the coordinates before the move."""

    player: Occupant
    kind: MoveKind
    group: tuple[Hex, ...]
    direction: Hex
    captured: tuple[CapturedPiece, ...] = field(default_factory=tuple)

    def to_text(self) -> str:
        """
        Compact text form, fields separated by colons:
        <player>:<kind>:<group cells>:<direction>:<captured cells or ->

        ex) "b:inline push:-1,0;0,0:1,0:-" (black pushes without capturing)
        Captured marbles always belong to the opponent of the player, so only their cells are written.
        """
        group = ";".join(cell.to_text() for cell in self.group)
        captured = ";".join(piece.coordinate.to_text() for piece in self.captured) or "-"
        return f"{OCCUPANT_TO_LAYOUT[self.player]}:{self.kind.value}:{group}:{self.direction.to_text()}:{captured}"

    @classmethod
    def from_text(cls, text: str) -> Self:
        """Parse the compact text form back into a record. Raises InvalidPositionError for text that does not follow it."""
        try:
            player_char, kind, group, direction, captured = text.split(":")
            player = LAYOUT_TO_OCCUPANT[player_char]
            captured_pieces = (
                tuple(
                    CapturedPiece(player.opponent, Hex.from_text(cell))
                    for cell in captured.split(";")
                )
                if captured != "-"
                else ()
            )
            return cls(
                player=player,
                kind=MoveKind(kind),
                group=tuple(Hex.from_text(cell) for cell in group.split(";")),
                direction=Hex.from_text(direction),
                captured=captured_pieces,
            )
        except (ValueError, KeyError) as err:
            raise InvalidPositionError(
                f"Cannot interpret supplied string as move record: {text!r}"
            ) from err


def apply_move(board: HexBoard, move: Classification) -> MoveRecord:
    """Update the board according to the move kind"""
    if not move.is_legal:
        raise InvalidMoveError(f"Cannot apply an illegal move: {move.reason}")

    # for the type checker: legal moves always have a direction
    assert move.direction is not None

    if move.kind == MoveKind.INLINE_PUSH:
        captured = _push(board, move)
    else:
        _shift(board, move.group.pieces, move.direction)
        captured = ()

    if captured:
        logger.info(
            "%s pushed %d marble(s) off the board",
            move.group.color.name.lower(),
            len(captured),
        )

    return MoveRecord(
        player=move.group.color,
        kind=move.kind,
        group=move.group.pieces,
        direction=move.direction,
        captured=captured,
    )


def _shift(board: HexBoard, cells: tuple[Hex, ...], direction: Hex) -> None:
    """Single step and sidestep: clear ALL sources first, then fill the targets (so no marble overwrites another)."""
    moving = [(cell, board.get(cell)) for cell in cells]
    for cell, _ in moving:
        board.set(cell, Occupant.EMPTY)
    for cell, occupant in moving:
        board.set(cell + direction, occupant)


def _push(board: HexBoard, move: Classification) -> tuple[CapturedPiece, ...]:
    """
    Inline move
    ---

    1. opposing marbles, farthest first: step forward, or fall off the board (captured)
    2. own marbles, front first: step forward into the freed cells
    """
    assert move.direction is not None
    captured: list[CapturedPiece] = []

    for cell in reversed(move.pushed):
        opponent = board.get(cell)
        target = cell + move.direction
        if board.exists(target):
            board.set(target, opponent)
        else:
            captured.append(CapturedPiece(opponent, cell))
        board.set(cell, Occupant.EMPTY)

    for cell in reversed(move.group.pieces):
        board.set(cell + move.direction, board.get(cell))
        board.set(cell, Occupant.EMPTY)

    return tuple(captured)
