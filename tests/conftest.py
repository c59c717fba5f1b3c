"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest

from src.abalone.board import HexBoard
from src.abalone.game import Game
from src.abalone.hexagon import Hex
from src.abalone.pieces import PIECES_PER_PLAYER, Occupant
from src.abalone.position import PositionState
from src.db.memory_repository import InMemoryGameRepository

Placement = dict[tuple[int, int], Occupant]


@pytest.fixture
def board_with() -> Callable[[Placement], HexBoard]:
    """Call the inner function with {(q, r): occupant} to get an otherwise empty board."""

    def _create_board(placement: Placement) -> HexBoard:
        board = HexBoard.empty()
        for (q, r), occupant in placement.items():
            board.set(Hex(q, r), occupant)
        return board

    return _create_board


@pytest.fixture
def game_with(
    board_with: Callable[[Placement], HexBoard],
) -> Callable[..., Game]:
    """
    Call the inner function with a placement to get a Game in that position.
    The captured counters are chosen so that every marble not on the board counts as captured (keeps the position valid).
    """

    def _create_game(placement: Placement, to_move: Occupant = Occupant.BLACK) -> Game:
        board = board_with(placement)
        state = PositionState(
            layout=board.to_layout(),
            color_to_move=to_move,
            captured_black=PIECES_PER_PLAYER - board.count(Occupant.BLACK),
            captured_white=PIECES_PER_PLAYER - board.count(Occupant.WHITE),
        )
        return Game.new_game(starting_state=state.to_text())

    return _create_game


@pytest.fixture
def memory_repository() -> Generator[InMemoryGameRepository, None, None]:
    """Fresh repository per test."""
    repo = InMemoryGameRepository()
    yield repo
