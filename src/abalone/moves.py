"""
Geometry of a move: what kind of move a group makes towards a destination and whether it is allowed.

Key idea: the move kind is derived purely from the group's shape, the destination, and the occupancy of the board.
Nothing here changes the board, so the UI can classify any number of candidate destinations.

Execution is done later by src/abalone/executor.py
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from src.abalone.groups import PieceGroup
from src.abalone.hexagon import Hex, are_perpendicular, unit_direction
from src.abalone.pieces import Occupant
from src.core.shared_types import MoveKind


class Board(Protocol):
    """Just the parts the classifier needs"""

    def exists(self, cell: Hex) -> bool: ...
    def get(self, cell: Hex) -> Occupant: ...


# Push ratio: how many opposing marbles a group of a given size may push (always strictly fewer)
MAX_PUSHABLE: dict[int, int] = {
    1: 0,
    2: 1,
    3: 2,
}


@dataclass(frozen=True)
class Classification:
    """
    Outcome of classifying a move attempt.

    `group` is oriented so that for inline moves the direction of travel is 'forward'.
    `pushed` lists the opposing marbles in front of the group, nearest first.
    """

    kind: MoveKind
    group: PieceGroup
    destination: Hex
    direction: Optional[Hex] = None
    pushed: tuple[Hex, ...] = field(default_factory=tuple)
    reason: str = ""

    @property
    def is_legal(self) -> bool:
        return self.kind != MoveKind.ILLEGAL


def classify_move(board: Board, group: PieceGroup, destination: Hex) -> Classification:
    """
    Decide which move the group makes by going to `destination`
    ----

    * single marble: a step onto a neighbouring empty cell
    * inline: the destination is right in front of the front marble (may push) or right behind the back marble (only onto an empty cell)
    * sidestep: anything else, the whole group shifts sideways onto empty cells
    """
    if not board.exists(destination):
        return _illegal(group, destination, "destination is not on the board")

    if group.size == 1:
        return _classify_single(board, group, destination)

    # for the type checker: groups of 2 or 3 always have a line direction
    assert group.direction is not None

    if destination == group.front + group.direction:
        return _classify_inline(board, group, destination)

    if destination == group.back - group.direction:
        return _classify_backward(board, group.reversed(), destination)

    return _classify_sidestep(board, group, destination)


def legal_destinations(board: Board, group: PieceGroup) -> dict[Hex, MoveKind]:
    """All cells the group could move to, with the kind of move it would be. Used to highlight options in a UI."""
    candidates = {
        neighbour
        for piece in group.pieces
        for neighbour in piece.neighbours()
        if neighbour not in group.pieces and board.exists(neighbour)
    }
    destinations: dict[Hex, MoveKind] = {}
    for candidate in sorted(candidates):
        classification = classify_move(board, group, candidate)
        if classification.is_legal:
            destinations[candidate] = classification.kind
    return destinations


def opponent_run(
    board: Board, front: Hex, direction: Hex, player: Occupant
) -> Optional[tuple[Hex, ...]]:
    """
    Raycast from the front marble along `direction`, collecting the consecutive opposing marbles.
    ---

    Stops at the first empty cell or when stepping off the board.
    Returns None if the run is blocked by one of the player's own marbles (nothing can be pushed then).
    """
    run: list[Hex] = []
    cell = front + direction
    while board.exists(cell):
        occupant = board.get(cell)
        if occupant == Occupant.EMPTY:
            break
        if occupant == player:
            return None
        run.append(cell)
        cell = cell + direction
    return tuple(run)


def _classify_single(board: Board, group: PieceGroup, destination: Hex) -> Classification:
    """A single marble steps onto a neighbouring empty cell. It never pushes."""
    direction = unit_direction(group.back, destination)
    if direction is None:
        return _illegal(group, destination, "destination is not adjacent")
    if board.get(destination) != Occupant.EMPTY:
        return _illegal(group, destination, "a single marble cannot push")
    return Classification(MoveKind.SINGLE, group, destination, direction)


def _classify_inline(board: Board, group: PieceGroup, destination: Hex) -> Classification:
    """Group moves along its own line. Any opposing marbles in front must be outnumbered."""
    assert group.direction is not None
    run = opponent_run(board, group.front, group.direction, group.color)
    if run is None:
        return _illegal(group, destination, "blocked by own marble")

    if len(run) > MAX_PUSHABLE[group.size]:
        return _illegal(
            group,
            destination,
            f"{group.size} marbles cannot push {len(run)} opposing marbles",
        )
    return Classification(
        MoveKind.INLINE_PUSH, group, destination, group.direction, pushed=run
    )


def _classify_backward(board: Board, group: PieceGroup, destination: Hex) -> Classification:
    """Group backs up along its own line (`group` already faces the direction of travel). Never pushes."""
    assert group.direction is not None
    if board.get(destination) != Occupant.EMPTY:
        return _illegal(group, destination, "cannot push when moving backwards")
    return Classification(MoveKind.INLINE_PUSH, group, destination, group.direction)


def _classify_sidestep(board: Board, group: PieceGroup, destination: Hex) -> Classification:
    """
    Group shifts sideways (broadside move)
    ---

    The step is measured from the back marble to the destination. It has to leave the group's line,
    and every marble must land on an empty cell on the board. Sidesteps never push.
    """
    assert group.direction is not None
    step = destination - group.back
    if not are_perpendicular(step, group.direction):
        return _illegal(group, destination, "not a sideways step of the group")

    for target in group.shifted(step):
        if not board.exists(target):
            return _illegal(group, destination, f"{target} is not on the board")
        if board.get(target) != Occupant.EMPTY:
            return _illegal(group, destination, f"{target} is occupied")
    return Classification(MoveKind.SIDESTEP, group, destination, step)


def _illegal(group: PieceGroup, destination: Hex, reason: str) -> Classification:
    return Classification(MoveKind.ILLEGAL, group, destination, reason=reason)
