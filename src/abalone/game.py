"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of Abalone -->
passes this information to the service layer, which can then pass it onwards to the API layer.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Self

from src.abalone.board import HexBoard
from src.abalone.executor import MoveRecord, apply_move
from src.abalone.groups import PieceGroup, resolve_group
from src.abalone.hexagon import Hex
from src.abalone.moves import Classification, classify_move, legal_destinations
from src.abalone.pieces import OCCUPANT_TO_LAYOUT, PLAYERS, Occupant
from src.abalone.position import PositionState
from src.core.exceptions import (
    GameOverError,
    GameStateError,
    InvalidMoveError,
    InvalidPositionError,
    InvalidSelectionError,
    InvalidSnapshotError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import MoveKind, Status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of everything needed to draw the game, or to resynchronise a peer."""

    layout: str
    current_player: Occupant
    captured_black: int
    captured_white: int
    ended: bool
    winner: Optional[Occupant]
    last_move: Optional[MoveRecord] = None
    num_moves: int = 0


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: HexBoard
    current_player: Occupant
    captured: dict[Occupant, int]  # marbles OF THAT COLOR pushed off the board
    history: list[MoveRecord]
    undo_states: list[str]  # position strings, each one taken right before a move
    status: Status
    num_moves: int = 0  # turn token: moves played so far

    @classmethod
    def new_game(cls, starting_state: Optional[str] = None) -> Self:
        """Start from the standard layout, or from any valid position string."""
        state = (
            PositionState.from_text(starting_state)
            if starting_state
            else PositionState.starting_position()
        )
        game = cls(
            board=HexBoard.starting_position(),
            current_player=Occupant.BLACK,
            captured={player: 0 for player in PLAYERS},
            history=[],
            undo_states=[],
            status=Status.IN_PROGRESS,
        )
        game._load_position(state)
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        state = PositionState.from_text(model.current_state)
        if (model.status == Status.ENDED) != (state.winner is not None):
            raise GameStateError(
                f"Status {model.status!r} does not match the captured counters in {model.current_state!r}"
            )

        game = cls(
            board=HexBoard.from_layout(state.layout),
            current_player=state.color_to_move,
            captured={player: state.captured(player) for player in PLAYERS},
            history=[MoveRecord.from_text(move) for move in model.moves],
            undo_states=list(model.history_states),
            status=Status(model.status),
            num_moves=state.num_moves,
        )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_state=self.position().to_text(),
            history_states=list(self.undo_states),
            moves=[move.to_text() for move in self.history],
            status=self.status.value,
        )

    # --- STATE ---
    @property
    def ended(self) -> bool:
        return self.status == Status.ENDED

    @property
    def winner(self) -> Optional[Occupant]:
        if not self.ended:
            return None
        return self.position().winner

    @property
    def captured_black(self) -> int:
        return self.captured[Occupant.BLACK]

    @property
    def captured_white(self) -> int:
        return self.captured[Occupant.WHITE]

    @property
    def last_move(self) -> Optional[MoveRecord]:
        return self.history[-1] if self.history else None

    def remaining(self, color: Occupant) -> int:
        return self.board.count(color)

    def position(self) -> PositionState:
        return PositionState(
            layout=self.board.to_layout(),
            color_to_move=self.current_player,
            captured_black=self.captured_black,
            captured_white=self.captured_white,
            num_moves=self.num_moves,
        )

    # --- MOVES ---
    def classify(self, selection: Iterable[Hex], destination: Hex) -> Classification:
        """Speculative: what would happen if the current player moved the selection to the destination. Never mutates."""
        group = self._resolve(selection)
        return classify_move(self.board, group, destination)

    def legal_destinations(self, selection: Iterable[Hex]) -> dict[Hex, MoveKind]:
        group = self._resolve(selection)
        return legal_destinations(self.board, group)

    def attempt_move(
        self,
        selection: Iterable[Hex],
        destination: Hex,
        player: Optional[Occupant] = None,
    ) -> MoveRecord:
        """
        Attempt to make a move
        -----

        1. the game must still be in progress, and (if a player is given) it must be their turn
        2. resolve the selection into a group
        3. classify the move. Nothing is written to the board before the move is known to be legal.
        4. store the position before the move (for undo)
        5. update the board and the history
        6. update the captured counter and check for the end of the game
        """
        if self.ended:
            raise GameOverError("The game has ended. Reset to play again.")

        if player is not None and player != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player.name.lower()} to make a move first."
            )

        group = self._resolve(selection)
        move = classify_move(self.board, group, destination)
        if not move.is_legal:
            logger.debug("Rejected move to %s: %s", destination, move.reason)
            raise InvalidMoveError(
                f"Move to {destination.to_text()} not allowed: {move.reason}"
            )

        self.undo_states.append(self.position().to_text())
        record = apply_move(self.board, move)
        self.history.append(record)
        self.num_moves += 1
        self.captured[record.player.opponent] += len(record.captured)
        self._update_game_status(record.player)
        return record

    def reset(self) -> None:
        """Back to the standard starting position. Always allowed, also mid-game or after it ended."""
        self.history = []
        self.undo_states = []
        self._load_position(PositionState.starting_position())

    def undo(self) -> MoveRecord:
        """Restore the exact position stored before the last move."""
        if self.ended:
            raise GameOverError("The game has ended. Reset to play again.")
        if not self.undo_states:
            raise GameStateError("There is no move to undo.")

        previous_state = self.undo_states.pop()
        undone = self.history.pop()
        self._load_position(PositionState.from_text(previous_state))
        return undone

    # --- SNAPSHOTS ---
    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            layout=self.board.to_layout(),
            current_player=self.current_player,
            captured_black=self.captured_black,
            captured_white=self.captured_white,
            ended=self.ended,
            winner=self.winner,
            last_move=self.last_move,
            num_moves=self.num_moves,
        )

    def restore(self, snapshot: GameSnapshot) -> None:
        """
        Replace the entire state with the snapshot (ex. a peer joining a running game).
        ---

        Everything is validated before the first field is overwritten, so a bad snapshot leaves the game untouched.
        NOTE the move history before the snapshot is unknown: only the last move is kept, and there is nothing to undo.
        """
        state = self._validate_snapshot(snapshot)

        self.history = [snapshot.last_move] if snapshot.last_move else []
        self.undo_states = []
        self._load_position(state)

    # -- PRIVATE HELPERS ---
    def _resolve(self, selection: Iterable[Hex]) -> PieceGroup:
        try:
            return resolve_group(self.board, selection, self.current_player)
        except InvalidSelectionError as err:
            logger.debug("Rejected selection: %s", err)
            raise

    def _load_position(self, state: PositionState) -> None:
        self.board = HexBoard.from_layout(state.layout)
        self.current_player = state.color_to_move
        self.captured = {player: state.captured(player) for player in PLAYERS}
        self.status = Status.ENDED if state.winner is not None else Status.IN_PROGRESS
        self.num_moves = state.num_moves

    def _update_game_status(self, mover: Occupant) -> None:
        """Either the mover just won, or it is the opponent's turn."""
        winner = self.position().winner
        if winner is not None:
            self.status = Status.ENDED
            logger.info(
                "Game over: %s captured %d marbles",
                winner.name.lower(),
                self.captured[winner.opponent],
            )
            return
        self.current_player = mover.opponent

    def _validate_snapshot(self, snapshot: GameSnapshot) -> PositionState:
        if not snapshot.current_player.is_player():
            raise InvalidSnapshotError(
                f"Invalid player to move: {snapshot.current_player}"
            )

        try:
            state = PositionState.from_text(
                f"{snapshot.layout} {OCCUPANT_TO_LAYOUT[snapshot.current_player]} "
                f"{snapshot.captured_black} {snapshot.captured_white} {snapshot.num_moves}"
            )
        except InvalidPositionError as err:
            raise InvalidSnapshotError(f"Snapshot does not describe a valid position: {err}") from err

        if snapshot.ended != (state.winner is not None) or snapshot.winner != state.winner:
            raise InvalidSnapshotError(
                f"Snapshot end state (ended={snapshot.ended}, winner={snapshot.winner}) does not match the captured counters."
            )
        return state
