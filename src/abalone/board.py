"""The HexBoard stores what occupies each of the 61 cells. It knows nothing about the rules of moving."""

from dataclasses import dataclass
from typing import Self

from src.abalone.hexagon import BOARD_RADIUS, Hex, all_hexes
from src.abalone.pieces import LAYOUT_TO_OCCUPANT, OCCUPANT_TO_LAYOUT, Occupant
from src.core.exceptions import InvalidPositionError

# Rows of the board in layout notation (r = -4 ... 4). Lengths 5, 6, 7, 8, 9, 8, 7, 6, 5.
NUM_ROWS = 2 * BOARD_RADIUS + 1

STARTING_BLACK: tuple[Hex, ...] = (
    *(Hex(-4, r) for r in range(0, 5)),
    *(Hex(-3, r) for r in range(-1, 5)),
    *(Hex(-2, r) for r in range(-2, 1)),
)

STARTING_WHITE: tuple[Hex, ...] = (
    *(Hex(2, r) for r in range(0, 3)),
    *(Hex(3, r) for r in range(-4, 2)),
    *(Hex(4, r) for r in range(-4, 1)),
)


def row_of(r: int) -> list[Hex]:
    """All cells sharing the same r, ordered by q"""
    return [cell for cell in all_hexes() if cell.r == r]


@dataclass
class HexBoard:
    cells: dict[Hex, Occupant]

    @classmethod
    def empty(cls) -> Self:
        return cls({cell: Occupant.EMPTY for cell in all_hexes()})

    @classmethod
    def starting_position(cls) -> Self:
        """Black wedge along the q=-4 edge, White mirrored along the q=4 edge."""
        board = cls.empty()
        for cell in STARTING_BLACK:
            board.set(cell, Occupant.BLACK)
        for cell in STARTING_WHITE:
            board.set(cell, Occupant.WHITE)
        return board

    @classmethod
    def from_layout(cls, layout: str) -> Self:
        """Construct a board from the layout part of a position string.

        Rows go from r=-4 (top) to r=4 (bottom), separated by slashes. Within a row cells are read from low q to high q.
        ex. standard starting position:
        3ww/4ww/b4ww/bb4ww/bbb3www/bb4ww/bb4w/bb4/bb3
        * 'b' and 'w' denote a black or white marble
        * a digit denotes that many empty cells after each other
        """
        rows = layout.split("/")
        if len(rows) != NUM_ROWS:
            raise InvalidPositionError(
                f"Layout must contain {NUM_ROWS} rows, got {len(rows)}: {layout!r}"
            )

        cells: dict[Hex, Occupant] = {}
        for row_idx, row_layout in enumerate(rows):
            row_cells = row_of(row_idx - BOARD_RADIUS)
            position = 0
            for character in row_layout:
                if character.isdecimal():
                    # a number denotes the amount of empty cells after each other
                    for _ in range(int(character)):
                        if position < len(row_cells):
                            cells[row_cells[position]] = Occupant.EMPTY
                        position += 1
                elif character in LAYOUT_TO_OCCUPANT:
                    if position < len(row_cells):
                        cells[row_cells[position]] = LAYOUT_TO_OCCUPANT[character]
                    position += 1
                else:
                    raise InvalidPositionError(
                        f"Unknown character {character!r} in layout row {row_layout!r}"
                    )

            if position != len(row_cells):
                raise InvalidPositionError(
                    f"Row {row_layout!r} describes {position} cells, expected {len(row_cells)}"
                )
        return cls(cells)

    def to_layout(self) -> str:
        """Rows are separated by slashes."""
        return "/".join(
            self._row_to_layout(r) for r in range(-BOARD_RADIUS, BOARD_RADIUS + 1)
        )

    def _row_to_layout(self, r: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for cell in row_of(r):
            occupant = self.get(cell)
            if occupant == Occupant.EMPTY:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(OCCUPANT_TO_LAYOUT[occupant])

        # an entirely empty row still gets its number
        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    def exists(self, cell: Hex) -> bool:
        """Membership test doubles as the 'is it on the board' check."""
        return cell in self.cells

    def get(self, cell: Hex) -> Occupant:
        return self.cells[cell]

    def set(self, cell: Hex, occupant: Occupant) -> None:
        if cell not in self.cells:
            raise KeyError(f"{cell} is not on the board")
        self.cells[cell] = occupant

    def is_empty(self, cell: Hex) -> bool:
        return self.get(cell) == Occupant.EMPTY

    def all_coordinates(self) -> list[Hex]:
        return all_hexes()

    def locate(self, occupant: Occupant) -> list[Hex]:
        return [cell for cell in self.all_coordinates() if self.get(cell) == occupant]

    def count(self, occupant: Occupant) -> int:
        return len(self.locate(occupant))


STARTING_LAYOUT = HexBoard.starting_position().to_layout()
