"""Orchestration of communication from API router / peer connection to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.abalone.executor import MoveRecord
from src.abalone.game import Game, GameSnapshot
from src.abalone.hexagon import Hex
from src.abalone.pieces import from_color, to_color
from src.api.models import (
    Coordinate,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalDestination,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRecordResponse,
    MoveRequest,
    RemoteMoveRequest,
    ResetGameRequest,
    StateSnapshotMessage,
    SyncGameRequest,
    UndoMoveRequest,
)
from src.core.config import Settings, settings as default_settings
from src.core.exceptions import GameStateError, OutOfSyncError, RepositoryError
from src.core.log_config import configure_logging
from src.core.models import GameModel
from src.db.memory_repository import InMemoryGameRepository
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class AbaloneService:
    """Orchestration of layers for an Abalone game."""

    def __init__(
        self, repository: GameRepository, config: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.config = config or default_settings

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard layout unless a starting position was supplied."""

        new_game = Game.new_game(starting_state=request.starting_state)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Where can the selected marbles go? (for highlighting in the UI; the game is not changed)"""
        game = Game.from_model(self._fetch_game(request.game_id))
        destinations = game.legal_destinations(_to_hexes(request.selection))
        return LegalMovesResponse(
            game_id=request.game_id,
            player=to_color(game.current_player),
            selection=request.selection,
            destinations=[
                LegalDestination(destination=(cell.q, cell.r), kind=kind)
                for cell, kind in destinations.items()
            ],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """A local player attempts a move."""
        game = Game.from_model(self._fetch_game(request.game_id))
        self._check_move_number(game, request.move_number)

        game.attempt_move(
            selection=_to_hexes(request.selection),
            destination=Hex(*request.destination),
            player=from_color(request.player),
        )
        return self._store(request.game_id, game)

    def apply_remote_move(self, request: RemoteMoveRequest) -> GameResponse:
        """A peer sent a move: replay it under exactly the same rules as a local one."""
        game = Game.from_model(self._fetch_game(request.game_id))
        self._check_move_number(game, request.move.move_number)

        game.attempt_move(
            selection=_to_hexes(request.move.group),
            destination=Hex(*request.move.destination),
        )
        return self._store(request.game_id, game)

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.reset()
        logger.info("Reset game %s", request.game_id)
        return self._store(request.game_id, game)

    def undo_move(self, request: UndoMoveRequest) -> GameResponse:
        if not self.config.undo_enabled:
            raise GameStateError("Undo is disabled for this server.")

        game = Game.from_model(self._fetch_game(request.game_id))
        undone = game.undo()
        logger.info("Undid move %s in game %s", undone.to_text(), request.game_id)
        return self._store(request.game_id, game)

    def export_snapshot(self, request: GetGameRequest) -> StateSnapshotMessage:
        """Full state, to send to a peer that joins the game."""
        game = Game.from_model(self._fetch_game(request.game_id))
        snapshot = game.snapshot()
        return StateSnapshotMessage(
            board=snapshot.layout,
            current_player=to_color(snapshot.current_player),
            captured_black=snapshot.captured_black,
            captured_white=snapshot.captured_white,
            ended=snapshot.ended,
            winner=to_color(snapshot.winner) if snapshot.winner else None,
            num_moves=snapshot.num_moves,
        )

    def sync_game(self, request: SyncGameRequest) -> GameResponse:
        """Overwrite the whole game with a snapshot received from a peer."""
        game = Game.from_model(self._fetch_game(request.game_id))
        message = request.snapshot
        game.restore(
            GameSnapshot(
                layout=message.board,
                current_player=from_color(message.current_player),
                captured_black=message.captured_black,
                captured_white=message.captured_white,
                ended=message.ended,
                winner=from_color(message.winner) if message.winner else None,
                num_moves=message.num_moves,
            )
        )
        logger.info("Game %s resynchronised at move %d", request.game_id, game.num_moves)
        return self._store(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _store(self, game_id: UUID, game: Game) -> GameResponse:
        """Capture updated state in GameModel, store it, and build the response."""
        model = game.to_model()
        self.repo.update_game(game_id, model)
        return self._create_game_response(game_id, model, game)

    def _check_move_number(self, game: Game, move_number: Optional[int]) -> None:
        """The turn token must match the number of moves already played on this side."""
        if move_number is None:
            if self.config.enforce_move_numbers:
                raise OutOfSyncError("Move requests must carry a move number.")
            return

        if move_number != game.num_moves:
            raise OutOfSyncError(
                f"Move number {move_number} does not match the game (at move {game.num_moves})."
            )

    def _create_game_response(
        self, game_id: UUID, model: GameModel, game: Optional[Game] = None
    ) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        game = game or Game.from_model(model)
        snapshot = game.snapshot()
        return GameResponse(
            game_id=game_id,
            state=model.current_state,
            board=snapshot.layout,
            current_player=to_color(snapshot.current_player),
            captured_black=snapshot.captured_black,
            captured_white=snapshot.captured_white,
            ended=snapshot.ended,
            winner=to_color(snapshot.winner) if snapshot.winner else None,
            last_move=_to_record_response(snapshot.last_move),
            move_history=model.moves,
            num_moves=snapshot.num_moves,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def create_service(config: Optional[Settings] = None) -> AbaloneService:
    """Wire up a service with an in-memory repository and logging configured from the settings."""
    config = config or default_settings
    configure_logging(config)
    return AbaloneService(InMemoryGameRepository(), config)


def _to_hexes(cells: list[Coordinate]) -> list[Hex]:
    return [Hex(q, r) for q, r in cells]


def _to_record_response(record: Optional[MoveRecord]) -> Optional[MoveRecordResponse]:
    if record is None:
        return None
    return MoveRecordResponse(
        player=to_color(record.player),
        kind=record.kind,
        group=[(cell.q, cell.r) for cell in record.group],
        direction=(record.direction.q, record.direction.r),
        captured=[
            (piece.coordinate.q, piece.coordinate.r) for piece in record.captured
        ],
    )
