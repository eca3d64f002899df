"""Fixed-capacity candy board and the seeded grid generator."""

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from candy_server.domain.levels import BOARD_CAPACITY

Coord = Tuple[int, int]

BLANK = 0
MIN_COLOR = 1
MAX_COLOR = 5

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
U64_MASK = (1 << 64) - 1


class Board:
    """A 10x10 grid of color codes with an active rows x cols region.

    Cells outside the active region are always BLANK. All iteration is
    bounded by the active region.
    """

    def __init__(self, rows: int, cols: int, cells: Optional[np.ndarray] = None):
        if not (1 <= rows <= BOARD_CAPACITY and 1 <= cols <= BOARD_CAPACITY):
            raise ValueError(f"board region {rows}x{cols} exceeds {BOARD_CAPACITY}x{BOARD_CAPACITY}")
        if cells is None:
            cells = np.zeros((BOARD_CAPACITY, BOARD_CAPACITY), dtype=np.uint8)
        elif cells.shape != (BOARD_CAPACITY, BOARD_CAPACITY):
            raise ValueError(f"board cells must be {BOARD_CAPACITY}x{BOARD_CAPACITY}, got {cells.shape}")
        self.rows = rows
        self.cols = cols
        self.cells = cells.astype(np.uint8, copy=True)

    @classmethod
    def from_grid(cls, rows: int, cols: int, grid: Sequence[Sequence[int]]) -> "Board":
        """Build a board from a nested list as stored in the database or Redis."""
        return cls(rows, cols, np.array(grid, dtype=np.uint8))

    def to_grid(self) -> List[List[int]]:
        return self.cells.tolist()

    def in_bounds(self, coord: Coord) -> bool:
        r, c = coord
        return 0 <= r < self.rows and 0 <= c < self.cols

    def at(self, r: int, c: int) -> int:
        return int(self.cells[r, c])

    def coords(self) -> Iterable[Coord]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def active_region(self) -> np.ndarray:
        return self.cells[: self.rows, : self.cols]

    def is_well_formed(self) -> bool:
        """Active cells hold colors 1..5 and everything else is blank."""
        active = self.active_region()
        if active.min() < MIN_COLOR or active.max() > MAX_COLOR:
            return False
        outside = self.cells.copy()
        outside[: self.rows, : self.cols] = BLANK
        return not outside.any()

    def swapped(self, a: Coord, b: Coord) -> "Board":
        """Return a copy of the board with the two cells exchanged."""
        board = self.copy()
        cells = board.cells
        cells[a], cells[b] = cells[b], cells[a]
        return board

    def copy(self) -> "Board":
        return Board(self.rows, self.cols, self.cells)

    def pretty(self) -> str:
        return "\n".join(
            " ".join(str(self.at(r, c)) for c in range(self.cols)) for r in range(self.rows)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.rows == other.rows
            and self.cols == other.cols
            and np.array_equal(self.cells, other.cells)
        )

    def __repr__(self) -> str:
        return f"Board(rows={self.rows}, cols={self.cols})"


def next_state(state: int) -> int:
    """One step of the 64-bit linear congruential generator (wrapping)."""
    return (state * LCG_MULTIPLIER + LCG_INCREMENT) & U64_MASK


def generate_grid(seed: int, rows: int, cols: int) -> Board:
    """Fill the active region of a fresh board in row-major order.

    The sequence is fixed: state = state * 1103515245 + 12345 (mod 2**64),
    color = (state // 65536) % 5 + 1. Pre-formed matches are not removed.
    """
    board = Board(rows, cols)
    state = seed & U64_MASK
    for r, c in board.coords():
        state = next_state(state)
        board.cells[r, c] = (state // 65536) % 5 + 1
    return board
