"""Random piece spawner.

Every piece kind is equally likely on every draw. A seed makes the sequence
reproducible for replays and tests.
"""

import random
from typing import List, Optional

from tetrisiyum.piece import PIECE_KINDS, Piece
from tetrisiyum.rules import SPAWN_COL, SPAWN_ROW


class PieceSpawner:
    """Uniform random piece generator."""

    PIECES = PIECE_KINDS

    def __init__(self, seed: Optional[int] = None):
        """Initialize with an optional seed for deterministic replay.

        Args:
            seed: Random seed for reproducibility (None for system entropy)
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def next_kind(self) -> str:
        """Draw the next piece kind."""
        return self.rng.choice(self.PIECES)

    def next(self) -> Piece:
        """Get a fresh piece at the spawn origin.

        Returns:
            Piece in spawn orientation at (SPAWN_ROW, SPAWN_COL)
        """
        return Piece(self.next_kind(), SPAWN_ROW, SPAWN_COL)

    def peek(self, count: int) -> List[str]:
        """Peek at the next N piece kinds without consuming them.

        Args:
            count: Number of pieces to peek ahead

        Returns:
            List of piece kinds
        """
        temp_rng = random.Random()
        temp_rng.setstate(self.rng.getstate())
        return [temp_rng.choice(self.PIECES) for _ in range(count)]

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the generator with a new seed.

        Args:
            seed: New random seed
        """
        self.seed = seed
        self.rng = random.Random(seed)
