"""
Custom exceptions shared across layers.

Everything derives from GameError so the service/API layers can catch a single type.
NOTE: deliberately NOT subclasses of ValueError, so pydantic validators let them through unchanged.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while playing a game."""


class InvalidRequestError(GameError):
    """Request model could not be validated."""


class RepositoryError(GameError):
    """Persistence layer could not find / store a game."""


class InvalidSelectionError(GameError):
    """Selected cells do not form a group the player may move."""


class InvalidMoveError(GameError):
    """The group cannot move to the requested destination."""


class NotYourTurnError(GameError):
    """Player attempted to move while it is the opponent's turn."""


class GameStateError(GameError):
    """The game is not in a state that allows the request."""


class GameOverError(GameStateError):
    """Move attempted after the game ended. Only a reset is accepted."""


class InvalidPositionError(GameStateError):
    """Cannot interpret a string as a position / board layout."""


class InvalidSnapshotError(GameStateError):
    """A state snapshot is inconsistent and cannot be restored."""


class OutOfSyncError(GameStateError):
    """Move was submitted against a different turn than the one on record."""
