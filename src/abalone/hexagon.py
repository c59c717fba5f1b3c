"""
A cell (hex) on the board and the six directions to step between cells.

(placed in its own module as multiple other modules need to import it)

Axial coordinates: every cell is a (q, r) pair. The third cube coordinate is implied (x=q, y=-q-r, z=r),
which makes distances and adjacency easy to compute.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Standard Abalone board: a hexagon with 5 cells along every edge.
BOARD_RADIUS = 4


@dataclass(frozen=True, order=True)
class Hex:
    q: int
    r: int

    @classmethod
    def from_text(cls, text: str) -> Hex:
        """'q,r' (ex. '-2,0') gets converted to Hex(-2, 0)"""
        q, r = text.split(",")
        return cls(int(q), int(r))

    def to_text(self) -> str:
        return f"{self.q},{self.r}"

    def __add__(self, other: Hex) -> Hex:
        return Hex(self.q + other.q, self.r + other.r)

    def __sub__(self, other: Hex) -> Hex:
        return Hex(self.q - other.q, self.r - other.r)

    def __neg__(self) -> Hex:
        return Hex(-self.q, -self.r)

    def scaled(self, factor: int) -> Hex:
        return Hex(self.q * factor, self.r * factor)

    def to_cube(self) -> tuple[int, int, int]:
        return (self.q, -self.q - self.r, self.r)

    def distance(self, other: Hex) -> int:
        dq = self.q - other.q
        dr = self.r - other.r
        return max(abs(dq), abs(dr), abs(dq + dr))

    def is_adjacent(self, other: Hex) -> bool:
        return self.distance(other) == 1

    def is_within_bounds(self) -> bool:
        return (
            abs(self.q) <= BOARD_RADIUS
            and abs(self.r) <= BOARD_RADIUS
            and abs(self.q + self.r) <= BOARD_RADIUS
        )

    def neighbours(self) -> list[Hex]:
        return [self + direction for direction in DIRECTIONS]


# Order matters: when a group could be described by a direction and its opposite, the first one listed wins.
DIRECTIONS: tuple[Hex, ...] = (
    Hex(1, 0),
    Hex(0, 1),
    Hex(-1, 1),
    Hex(-1, 0),
    Hex(0, -1),
    Hex(1, -1),
)


def all_hexes() -> list[Hex]:
    """Every cell of the board, row by row (r = -4 ... 4), each row from low to high q."""
    return [
        Hex(q, r)
        for r in range(-BOARD_RADIUS, BOARD_RADIUS + 1)
        for q in range(
            max(-BOARD_RADIUS, -r - BOARD_RADIUS), min(BOARD_RADIUS, -r + BOARD_RADIUS) + 1
        )
    ]


def cube_dot(a: Hex, b: Hex) -> int:
    ax, ay, az = a.to_cube()
    bx, by, bz = b.to_cube()
    return ax * bx + ay * by + az * bz


def is_unit_direction(vector: Hex) -> bool:
    return vector in DIRECTIONS


def are_parallel(a: Hex, b: Hex) -> bool:
    return a == b or a == -b


def are_perpendicular(a: Hex, b: Hex) -> bool:
    """
    Hex grids have no true right angles: any two of the six directions have a non-zero cube dot product.
    For a sidestep it is enough that the step leaves the group's line, i.e. the directions are not parallel.
    """
    return is_unit_direction(a) and is_unit_direction(b) and not are_parallel(a, b)


def unit_direction(from_hex: Hex, to_hex: Hex) -> Optional[Hex]:
    """Unit vector pointing from one cell to an adjacent one (None if the cells are not neighbours)."""
    delta = to_hex - from_hex
    return delta if is_unit_direction(delta) else None


def projection(coordinate: Hex, direction: Hex) -> int:
    """How far along `direction` a cell lies. Used to order cells back to front."""
    return cube_dot(coordinate, direction)
