"""Piece catalog and rotation logic.

Each piece kind is defined by a 0/1 matrix in its spawn orientation and a
display color. Rotations are not stored; they are computed on demand by
transposing the matrix and reversing each row.
"""

from typing import List, Optional, Tuple

# Type aliases for shape matrices and board coordinates
Shape = Tuple[Tuple[int, ...], ...]
Cells = List[Tuple[int, int]]

# Piece shapes in spawn orientation
# Format: {piece_kind: (matrix, color)}
PIECE_SHAPES: dict[str, Tuple[Shape, str]] = {
    "I": (
        ((1, 1, 1, 1),),
        "cyan",
    ),
    "O": (
        ((1, 1),
         (1, 1)),
        "yellow",
    ),
    "T": (
        ((0, 1, 0),
         (1, 1, 1)),
        "purple",
    ),
    "L": (
        ((1, 0),
         (1, 0),
         (1, 1)),
        "red",
    ),
    "S": (
        ((0, 1, 1),
         (1, 1, 0)),
        "green",
    ),
    "Z": (
        ((1, 1, 0),
         (0, 1, 1)),
        "orange",
    ),
}

PIECE_KINDS = list(PIECE_SHAPES)


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise.

    An R x C matrix becomes C x R. Four rotations give back the original.

    Args:
        shape: Rectangular 0/1 matrix

    Returns:
        New rotated matrix
    """
    if not shape:
        return ()
    return tuple(
        tuple(row[col] for row in reversed(shape))
        for col in range(len(shape[0]))
    )


class Piece:
    """A piece of a given kind placed at a board row and column."""

    def __init__(self, kind: str, row: int = 0, col: int = 0, shape: Optional[Shape] = None):
        """Initialize a piece.

        Args:
            kind: One of "I", "O", "T", "L", "S", "Z"
            row: Board row of the matrix origin (0 at top)
            col: Board column of the matrix origin
            shape: Current orientation; the spawn orientation if omitted
        """
        if kind not in PIECE_SHAPES:
            raise ValueError(f"Invalid piece kind: {kind}")
        spawn_shape, color = PIECE_SHAPES[kind]
        self.kind = kind
        self.color = color
        self.shape: Shape = spawn_shape if shape is None else shape
        self.row = row
        self.col = col

    def get_cells(self) -> Cells:
        """Get absolute (row, col) board coordinates of occupied cells."""
        return [
            (self.row + r, self.col + c)
            for r, line in enumerate(self.shape)
            for c, value in enumerate(line)
            if value
        ]

    def move(self, drow: int, dcol: int) -> "Piece":
        """Return a new piece moved by the given delta."""
        return Piece(self.kind, self.row + drow, self.col + dcol, self.shape)

    def rotated(self) -> "Piece":
        """Return a new piece with its shape rotated clockwise in place."""
        return Piece(self.kind, self.row, self.col, rotate_cw(self.shape))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (self.kind, self.row, self.col, self.shape) == (
            other.kind, other.row, other.col, other.shape
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.row, self.col, self.shape))

    def __repr__(self) -> str:
        return f"Piece({self.kind}, row={self.row}, col={self.col})"
