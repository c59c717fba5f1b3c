"""Unit tests for /src/abalone/moves.py"""

from typing import Callable

import pytest

from src.abalone.board import HexBoard
from src.abalone.groups import resolve_group
from src.abalone.hexagon import Hex
from src.abalone.moves import (
    MAX_PUSHABLE,
    MoveKind,
    classify_move,
    legal_destinations,
    opponent_run,
)
from src.abalone.pieces import Occupant

B = Occupant.BLACK
W = Occupant.WHITE
BoardFactory = Callable[..., HexBoard]


def classify(board: HexBoard, selection: list[tuple[int, int]], destination: tuple[int, int]):
    group = resolve_group(board, [Hex(q, r) for q, r in selection], B)
    return classify_move(board, group, Hex(*destination))


def test_push_ratio() -> None:
    assert MAX_PUSHABLE == {1: 0, 2: 1, 3: 2}


# -- SINGLE MARBLE ---
def test_single_step_from_start() -> None:
    """Black marble at (-2,0) steps onto the empty (-1,0)"""
    board = HexBoard.starting_position()
    move = classify(board, [(-2, 0)], (-1, 0))
    assert move.kind == MoveKind.SINGLE
    assert move.is_legal
    assert move.direction == Hex(1, 0)


@pytest.mark.parametrize(
    "destination",
    [
        (-3, 0),  # own marble
        (0, 0),  # not adjacent
        (-2, 0),  # its own cell
    ],
)
def test_single_step_illegal(destination: tuple[int, int]) -> None:
    board = HexBoard.starting_position()
    move = classify(board, [(-2, 0)], destination)
    assert move.kind == MoveKind.ILLEGAL
    assert not move.is_legal


def test_single_marble_never_pushes(board_with: BoardFactory) -> None:
    board = board_with({(0, 0): B, (1, 0): W})
    assert classify(board, [(0, 0)], (1, 0)).kind == MoveKind.ILLEGAL


def test_single_marble_cannot_leave_the_board(board_with: BoardFactory) -> None:
    board = board_with({(4, 0): B})
    move = classify(board, [(4, 0)], (5, 0))
    assert move.kind == MoveKind.ILLEGAL
    assert "not on the board" in move.reason


# -- INLINE ---
def test_inline_advance_into_empty(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B})
    move = classify(board, [(-1, 0), (0, 0)], (1, 0))
    assert move.kind == MoveKind.INLINE_PUSH
    assert move.pushed == ()
    assert move.direction == Hex(1, 0)


def test_inline_backward_into_empty(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B})
    move = classify(board, [(-1, 0), (0, 0)], (-2, 0))
    assert move.kind == MoveKind.INLINE_PUSH
    assert move.direction == Hex(-1, 0)
    # the group now faces the direction of travel
    assert move.group.front == Hex(-1, 0)
    assert move.group.back == Hex(0, 0)


def test_two_push_one() -> None:
    """Black [(-1,0),(0,0)] pushes the white marble on (1,0) onto the empty (2,0)"""
    board = HexBoard.empty()
    board.set(Hex(-1, 0), B)
    board.set(Hex(0, 0), B)
    board.set(Hex(1, 0), W)
    move = classify(board, [(-1, 0), (0, 0)], (1, 0))
    assert move.kind == MoveKind.INLINE_PUSH
    assert move.pushed == (Hex(1, 0),)


def test_two_push_one_over_the_edge(board_with: BoardFactory) -> None:
    """Nothing behind the white marble but the edge: still legal (the marble gets captured)"""
    board = board_with({(2, 0): B, (3, 0): B, (4, 0): W})
    move = classify(board, [(2, 0), (3, 0)], (4, 0))
    assert move.kind == MoveKind.INLINE_PUSH
    assert move.pushed == (Hex(4, 0),)


def test_two_cannot_push_two(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B, (1, 0): W, (2, 0): W})
    move = classify(board, [(-1, 0), (0, 0)], (1, 0))
    assert move.kind == MoveKind.ILLEGAL


def test_three_push_two(board_with: BoardFactory) -> None:
    board = board_with({(-2, 0): B, (-1, 0): B, (0, 0): B, (1, 0): W, (2, 0): W})
    move = classify(board, [(-2, 0), (-1, 0), (0, 0)], (1, 0))
    assert move.kind == MoveKind.INLINE_PUSH
    assert move.pushed == (Hex(1, 0), Hex(2, 0))


def test_three_cannot_push_three(board_with: BoardFactory) -> None:
    board = board_with(
        {(-3, 0): B, (-2, 0): B, (-1, 0): B, (0, 0): W, (1, 0): W, (2, 0): W}
    )
    move = classify(board, [(-3, 0), (-2, 0), (-1, 0)], (0, 0))
    assert move.kind == MoveKind.ILLEGAL


def test_push_blocked_by_own_marble(board_with: BoardFactory) -> None:
    """W sandwiched between the group and another black marble cannot be pushed"""
    board = board_with({(-2, 0): B, (-1, 0): B, (0, 0): B, (1, 0): W, (2, 0): B})
    move = classify(board, [(-2, 0), (-1, 0), (0, 0)], (1, 0))
    assert move.kind == MoveKind.ILLEGAL
    assert "own marble" in move.reason


def test_own_marble_in_front_blocks(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B, (1, 0): B})
    move = classify(board, [(-1, 0), (0, 0)], (1, 0))
    assert move.kind == MoveKind.ILLEGAL


def test_no_push_backwards(board_with: BoardFactory) -> None:
    """Only the front of the line pushes: backing into an opposing marble is illegal"""
    board = board_with({(0, 0): B, (1, 0): B, (-1, 0): W})
    move = classify(board, [(0, 0), (1, 0)], (-1, 0))
    assert move.kind == MoveKind.ILLEGAL
    assert move.pushed == ()
    assert "backwards" in move.reason


@pytest.mark.parametrize("behind", [B, W])
def test_three_cannot_back_into_a_marble(board_with: BoardFactory, behind: Occupant) -> None:
    board = board_with({(-1, 0): B, (0, 0): B, (1, 0): B, (-2, 0): behind})
    assert classify(board, [(-1, 0), (0, 0), (1, 0)], (-2, 0)).kind == MoveKind.ILLEGAL


def test_group_cannot_step_off_the_board(board_with: BoardFactory) -> None:
    board = board_with({(3, 0): B, (4, 0): B})
    assert classify(board, [(3, 0), (4, 0)], (5, 0)).kind == MoveKind.ILLEGAL


def test_opponent_run(board_with: BoardFactory) -> None:
    board = board_with({(0, 0): B, (1, 0): W, (2, 0): W, (4, 0): W})
    assert opponent_run(board, Hex(0, 0), Hex(1, 0), B) == (Hex(1, 0), Hex(2, 0))
    # runs until the edge
    assert opponent_run(board, Hex(3, 0), Hex(1, 0), B) == (Hex(4, 0),)
    assert opponent_run(board, Hex(0, 0), Hex(-1, 0), B) == ()


# -- SIDESTEP ---
def test_sidestep_onto_empty_cells(board_with: BoardFactory) -> None:
    """Black [(-3,0),(-3,1)] shifts to (-2,0),(-2,1)"""
    board = board_with({(-3, 0): B, (-3, 1): B})
    move = classify(board, [(-3, 0), (-3, 1)], (-2, 0))
    assert move.kind == MoveKind.SIDESTEP
    assert move.direction == Hex(1, 0)


@pytest.mark.parametrize("blocked", [(-2, 0), (-2, 1)])
def test_sidestep_needs_every_target_empty(
    board_with: BoardFactory, blocked: tuple[int, int]
) -> None:
    board = board_with({(-3, 0): B, (-3, 1): B, blocked: W})
    move = classify(board, [(-3, 0), (-3, 1)], (-2, 0))
    assert move.kind == MoveKind.ILLEGAL


def test_sidestep_cannot_push_own_marble(board_with: BoardFactory) -> None:
    board = board_with({(-3, 0): B, (-3, 1): B, (-2, 1): B})
    assert classify(board, [(-3, 0), (-3, 1)], (-2, 0)).kind == MoveKind.ILLEGAL


def test_sidestep_off_the_board(board_with: BoardFactory) -> None:
    """Near the corner the back marble can step to (3,1), but the front marble would land on (4,1): off the board"""
    board = board_with({(3, 0): B, (4, 0): B})
    move = classify(board, [(3, 0), (4, 0)], (3, 1))
    assert move.kind == MoveKind.ILLEGAL
    assert "not on the board" in move.reason


def test_sidestep_measured_from_back_marble(board_with: BoardFactory) -> None:
    """The step is destination - back marble, so (-2,1) is two cells away from (-3,0): not a sidestep"""
    board = board_with({(-3, 0): B, (-3, 1): B})
    assert classify(board, [(-3, 0), (-3, 1)], (-2, 1)).kind == MoveKind.ILLEGAL


def test_three_marble_sidestep(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B, (1, 0): B})
    move = classify(board, [(-1, 0), (0, 0), (1, 0)], (-1, 1))
    assert move.kind == MoveKind.SIDESTEP
    assert move.direction == Hex(0, 1)


def test_far_destination_is_illegal(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B})
    assert classify(board, [(-1, 0), (0, 0)], (3, -3)).kind == MoveKind.ILLEGAL


# -- PROPERTIES ---
def test_classification_is_idempotent_and_pure() -> None:
    board = HexBoard.starting_position()
    layout_before = board.to_layout()
    group = resolve_group(board, [Hex(-2, 0), Hex(-3, 0), Hex(-4, 0)], B)
    first = classify_move(board, group, Hex(-1, 0))
    second = classify_move(board, group, Hex(-1, 0))
    assert first == second
    assert board.to_layout() == layout_before


def test_legal_destinations_single_marble() -> None:
    board = HexBoard.starting_position()
    group = resolve_group(board, [Hex(-2, 0)], B)
    assert legal_destinations(board, group) == {
        Hex(-1, -1): MoveKind.SINGLE,
        Hex(-1, 0): MoveKind.SINGLE,
        Hex(-2, 1): MoveKind.SINGLE,
    }


def test_legal_destinations_pair(board_with: BoardFactory) -> None:
    board = board_with({(-1, 0): B, (0, 0): B, (1, 0): W, (2, 0): W})
    group = resolve_group(board, [Hex(-1, 0), Hex(0, 0)], B)
    destinations = legal_destinations(board, group)

    # 2 cannot push 2, but backing up is fine
    assert Hex(1, 0) not in destinations
    assert destinations[Hex(-2, 0)] == MoveKind.INLINE_PUSH
    # sidesteps are keyed on the cell next to the back marble
    assert destinations[Hex(-1, 1)] == MoveKind.SIDESTEP
    assert destinations[Hex(0, -1)] == MoveKind.SIDESTEP
    assert all(kind != MoveKind.ILLEGAL for kind in destinations.values())
