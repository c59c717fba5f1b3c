"""Requests and Response models (and the two messages exchanged with a peer)"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.abalone.board import NUM_ROWS
from src.abalone.groups import MAX_GROUP_SIZE
from src.abalone.pieces import LAYOUT_TO_OCCUPANT, PIECES_PER_PLAYER
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, MoveKind

# Axial coordinate (q, r) as it travels over the wire: a JSON array of two integers
Coordinate = tuple[int, int]

# marbles plus runs of 1 to 9 empty cells
LAYOUT_CHARACTERS = set(LAYOUT_TO_OCCUPANT) | set("123456789")


def check_selection(value: list[Coordinate]) -> list[Coordinate]:
    """A group is 1 to 3 distinct cells. Shape and ownership are checked by the game."""
    if not 1 <= len(value) <= MAX_GROUP_SIZE:
        raise InvalidRequestError(
            f"Select 1 to {MAX_GROUP_SIZE} marbles, got {len(value)}: {value!r}"
        )
    if len(set(value)) != len(value):
        raise InvalidRequestError(f"Selection contains duplicate cells: {value!r}")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_state: Optional[str] = None

    @field_validator("starting_state")
    @classmethod
    def validate_starting_state(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 5:
            raise InvalidRequestError(
                "Position string must contain 5 space-separated parts."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class ResetGameRequest(BaseModel):
    game_id: UUID


class UndoMoveRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    selection: list[Coordinate]

    @field_validator("selection")
    @classmethod
    def validate_selection(cls, value: list[Coordinate]) -> list[Coordinate]:
        return check_selection(value)


class MoveRequest(BaseModel):
    game_id: UUID
    player: Color
    selection: list[Coordinate]
    destination: Coordinate
    move_number: Optional[int] = None

    @field_validator("selection")
    @classmethod
    def validate_selection(cls, value: list[Coordinate]) -> list[Coordinate]:
        return check_selection(value)


# --- PEER MESSAGES ---
class MoveMessage(BaseModel):
    """A move made on the other side, to be replayed here with the same rules."""

    group: list[Coordinate]
    destination: Coordinate
    move_number: Optional[int] = None

    @field_validator("group")
    @classmethod
    def validate_group(cls, value: list[Coordinate]) -> list[Coordinate]:
        return check_selection(value)


class StateSnapshotMessage(BaseModel):
    """Full state overwrite, used to resynchronise a joining peer."""

    board: str
    current_player: Color
    captured_black: int = Field(ge=0, le=PIECES_PER_PLAYER)
    captured_white: int = Field(ge=0, le=PIECES_PER_PLAYER)
    ended: bool
    winner: Optional[Color] = None
    num_moves: int = Field(default=0, ge=0)

    @field_validator("board")
    @classmethod
    def validate_board(cls, value: str) -> str:
        """Structural check only: 9 rows of known characters. The game checks the row lengths and piece counts."""
        rows = value.split("/")
        if len(rows) != NUM_ROWS:
            raise InvalidRequestError(
                f"Board layout must contain {NUM_ROWS} rows, got {len(rows)}."
            )
        if not set(value.replace("/", "")) <= LAYOUT_CHARACTERS:
            raise InvalidRequestError(f"Cannot interpret board layout: {value!r}")
        return value


class RemoteMoveRequest(BaseModel):
    game_id: UUID
    move: MoveMessage


class SyncGameRequest(BaseModel):
    game_id: UUID
    snapshot: StateSnapshotMessage


# --- RESPONSE MODELS ---
class MoveRecordResponse(BaseModel):
    player: Color
    kind: MoveKind
    group: list[Coordinate]
    direction: Coordinate
    captured: list[Coordinate]


class GameResponse(BaseModel):
    game_id: UUID
    state: str
    board: str
    current_player: Color
    captured_black: int
    captured_white: int
    ended: bool
    winner: Optional[Color]
    last_move: Optional[MoveRecordResponse]
    move_history: list[str]
    num_moves: int


class LegalDestination(BaseModel):
    destination: Coordinate
    kind: MoveKind


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player: Color
    selection: list[Coordinate]
    destinations: list[LegalDestination]
