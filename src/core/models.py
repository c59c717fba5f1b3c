"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, the API layer (higher) and domain/repository layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the repository, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass

# Type aliases to make GameModel easier to read
PositionString = str
MoveText = str


@dataclass
class GameModel:
    """Transport-safe representation of an Abalone game used between API, Service, repository, and Game layers."""

    current_state: PositionString
    history_states: list[PositionString]
    moves: list[MoveText]
    status: str
