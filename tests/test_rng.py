"""Tests for the piece spawner."""

from tetrisiyum.piece import PIECE_SHAPES
from tetrisiyum.rng import PieceSpawner


def test_spawner_deterministic():
    """Test that same seed produces same sequence."""
    spawner1 = PieceSpawner(12345)
    spawner2 = PieceSpawner(12345)

    sequence1 = [spawner1.next().kind for _ in range(30)]
    sequence2 = [spawner2.next().kind for _ in range(30)]

    assert sequence1 == sequence2, "Same seed should produce identical sequences"


def test_spawned_piece_at_origin():
    """Test pieces spawn at (0, 4) in spawn orientation."""
    spawner = PieceSpawner(7)

    for _ in range(20):
        piece = spawner.next()
        assert (piece.row, piece.col) == (0, 4)
        assert piece.shape == PIECE_SHAPES[piece.kind][0]


def test_spawner_covers_catalog():
    """Test that every kind is eventually drawn."""
    spawner = PieceSpawner(42)
    kinds = {spawner.next_kind() for _ in range(300)}
    assert kinds == set(PIECE_SHAPES)


def test_spawner_peek():
    """Test peeking ahead without consuming."""
    spawner = PieceSpawner(999)

    peeked = spawner.peek(5)
    actual = [spawner.next_kind() for _ in range(5)]

    assert peeked == actual, "Peek should match actual sequence"


def test_spawner_reset():
    """Test resetting with new seed."""
    spawner = PieceSpawner(111)
    first = [spawner.next_kind() for _ in range(5)]

    spawner.reset(111)
    again = [spawner.next_kind() for _ in range(5)]

    assert first == again, "Reset should restart sequence"
