"""Game board with collision detection, merging and line clearing."""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from tetrisiyum.piece import Shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """A single board cell."""
    filled: bool = False
    color: str = "white"


EMPTY_CELL = Cell()
SOLID_CELL = Cell(filled=True, color="black")

Row = Tuple[Cell, ...]
Grid = Tuple[Row, ...]


class Board:
    """20x10 board of cells.

    Rows are immutable tuples, so copying a board only copies the row list
    and unchanged rows are shared between copies and snapshots.
    """

    ROWS = 20
    COLS = 10

    def __init__(self):
        """Initialize an empty board."""
        # rows[row][col], row 0 at the top
        self.rows: List[Row] = [self._empty_row() for _ in range(self.ROWS)]

    @classmethod
    def _empty_row(cls) -> Row:
        return (EMPTY_CELL,) * cls.COLS

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if coordinates are within board bounds.

        Args:
            row: Row (0-19, with 0 at top)
            col: Column (0-9)

        Returns:
            True if in bounds
        """
        return 0 <= row < self.ROWS and 0 <= col < self.COLS

    def get(self, row: int, col: int) -> Cell:
        """Get the cell at (row, col).

        Out of bounds positions are reported as a solid cell.
        """
        if not self.in_bounds(row, col):
            return SOLID_CELL
        return self.rows[row][col]

    def set(self, row: int, col: int, cell: Cell) -> None:
        """Set the cell at (row, col); out of bounds is ignored."""
        if self.in_bounds(row, col):
            line = list(self.rows[row])
            line[col] = cell
            self.rows[row] = tuple(line)

    def is_free(self, shape: Shape, row: int, col: int) -> bool:
        """Check whether a shape fits at the given origin.

        Args:
            shape: 0/1 matrix of the piece
            row: Board row of the matrix origin
            col: Board column of the matrix origin

        Returns:
            False if any occupied cell is out of bounds or overlaps a
            filled cell, True otherwise (including an all-zero shape)
        """
        for r, line in enumerate(shape):
            for c, value in enumerate(line):
                if not value:
                    continue
                if self.get(row + r, col + c).filled:
                    return False
        return True

    def merge_and_clear(self, shape: Shape, row: int, col: int, color: str) -> int:
        """Lock a shape onto the board and clear completed rows.

        Cells falling outside the board are ignored.

        Args:
            shape: 0/1 matrix of the piece
            row: Board row of the matrix origin
            col: Board column of the matrix origin
            color: Color written into the locked cells

        Returns:
            Number of rows cleared
        """
        self._write(self.rows, shape, row, col, Cell(filled=True, color=color))

        remaining = [line for line in self.rows if not all(cell.filled for cell in line)]
        cleared = self.ROWS - len(remaining)
        if cleared:
            self.rows = [self._empty_row() for _ in range(cleared)] + remaining
            logger.debug(f"Cleared {cleared} row(s)")
        return cleared

    def snapshot_with_overlay(self, shape: Shape, row: int, col: int, color: str) -> Grid:
        """Return the grid with a piece drawn on top, leaving the board as is.

        Args:
            shape: 0/1 matrix of the piece
            row: Board row of the matrix origin
            col: Board column of the matrix origin
            color: Color of the overlaid cells

        Returns:
            Tuple of row tuples
        """
        rows = list(self.rows)
        self._write(rows, shape, row, col, Cell(filled=True, color=color))
        return tuple(rows)

    def _write(self, rows: List[Row], shape: Shape, row: int, col: int, cell: Cell) -> None:
        for r, line in enumerate(shape):
            board_row = row + r
            targets = [
                col + c
                for c, value in enumerate(line)
                if value and self.in_bounds(board_row, col + c)
            ]
            if not targets:
                continue
            updated = list(rows[board_row])
            for board_col in targets:
                updated[board_col] = cell
            rows[board_row] = tuple(updated)

    def is_row_full(self, row: int) -> bool:
        """Check if a row is completely filled."""
        return all(cell.filled for cell in self.rows[row])

    def grid(self) -> Grid:
        """Return the locked cells as a tuple of row tuples."""
        return tuple(self.rows)

    def copy(self) -> "Board":
        """Create a copy of the board.

        Returns:
            New board with same state
        """
        new_board = Board()
        new_board.rows = list(self.rows)
        return new_board

    def to_list(self) -> List[List[dict]]:
        """Export board as nested lists of cell dicts (for serialization)."""
        return grid_to_list(self.grid())

    @classmethod
    def from_list(cls, cells: List[List[dict]]) -> "Board":
        """Create board from nested lists of cell dicts.

        Args:
            cells: ROWS lists of COLS {"filled", "color"} dicts

        Returns:
            New board
        """
        if len(cells) != cls.ROWS or any(len(line) != cls.COLS for line in cells):
            raise ValueError(f"Expected {cls.ROWS}x{cls.COLS} cells")
        board = cls()
        board.rows = [
            tuple(Cell(bool(cell["filled"]), cell["color"]) for cell in line)
            for line in cells
        ]
        return board

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.rows == other.rows


def grid_to_list(grid: Grid) -> List[List[dict]]:
    """Convert a grid to nested lists of plain dicts."""
    return [
        [{"filled": cell.filled, "color": cell.color} for cell in line]
        for line in grid
    ]
