"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    ENDED = "ended"


# --- NOTE: the domain layer works with Occupant (src/abalone/pieces.py), which also has an EMPTY option.
# --- Color is what crosses the boundary: only the two players.
class Color(StrEnum):
    BLACK = "black"
    WHITE = "white"


class MoveKind(StrEnum):
    SINGLE = "single"
    INLINE_PUSH = "inline push"
    SIDESTEP = "sidestep"
    ILLEGAL = "illegal"
