"""Tests for game state transitions."""

import pytest

from tetrisiyum import state as transitions
from tetrisiyum.board import Board, Cell
from tetrisiyum.piece import Piece
from tetrisiyum.rng import PieceSpawner
from tetrisiyum.state import Command, GameState


def running_state(piece: Piece, board: Board = None, **kwargs) -> GameState:
    kwargs.setdefault("speed", 500)
    return GameState(board=board or Board(), piece=piece, started=True, **kwargs)


def vertical_i(row: int, col: int) -> Piece:
    return Piece("I", row, col).rotated()


def fill_rows(board: Board, rows, skip=()):
    for row in rows:
        for col in range(board.COLS):
            if col not in skip:
                board.set(row, col, Cell(filled=True, color="gray"))


def test_initial_state():
    """Test the not-started state."""
    state = GameState()
    assert not state.started
    assert not state.game_over
    assert state.piece is None
    assert state.score == 0
    assert state.level == 1
    assert state.speed == 900


def test_start():
    """Test starting a game."""
    state = transitions.start(GameState(), PieceSpawner(1))

    assert state.started and state.running
    assert state.speed == 500
    assert (state.piece.row, state.piece.col) == (0, 4)
    assert state.score == 0 and state.level == 1


def test_commands_ignored_before_start():
    """Test that gameplay commands are no-ops before start."""
    state = GameState()
    spawner = PieceSpawner(1)

    for command in [Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.SOFT_DROP, Command.ROTATE, Command.TICK]:
        assert transitions.apply_command(state, command, spawner) is state
    assert transitions.evaluate_progression(state) is state


def test_move_left_clamps_at_wall():
    """Test the O-piece stops at column 0."""
    state = running_state(Piece("O", 0, 4))

    for _ in range(4):
        state = transitions.move(state, 0, -1)
    assert state.piece.col == 0

    blocked = transitions.move(state, 0, -1)
    assert blocked is state, "Move into the wall should be a no-op"


def test_move_right_clamps_at_wall():
    state = running_state(Piece("O", 0, 4))
    for _ in range(10):
        state = transitions.move(state, 0, 1)
    assert state.piece.col == 8


def test_soft_drop_never_locks():
    """Test that a blocked soft drop leaves the piece where it is."""
    state = running_state(Piece("O", 18, 4))

    dropped = transitions.move(state, 1, 0)

    assert dropped is state
    assert all(not cell.filled for row in state.board.rows for cell in row)


def test_rotate():
    """Test rotation in place."""
    state = running_state(Piece("I", 0, 4))

    rotated = transitions.rotate(state)

    assert rotated.piece.shape == ((1,), (1,), (1,), (1,))
    assert (rotated.piece.row, rotated.piece.col) == (0, 4)


def test_rotate_blocked_without_wall_kick():
    """Test that rotation into the wall or floor is rejected."""
    at_floor = running_state(Piece("I", 19, 0))
    assert transitions.rotate(at_floor) is at_floor

    at_wall = running_state(vertical_i(0, 9))
    assert transitions.rotate(at_wall) is at_wall


def test_tick_falls():
    state = running_state(Piece("T", 0, 4))
    assert transitions.tick(state, PieceSpawner(1)).piece.row == 1


def test_tick_locks_and_spawns():
    """Test that a blocked tick locks the piece and spawns the next one."""
    state = running_state(Piece("O", 18, 4))

    new_state = transitions.tick(state, PieceSpawner(1))

    for row, col in [(18, 4), (18, 5), (19, 4), (19, 5)]:
        assert new_state.board.get(row, col) == Cell(filled=True, color="yellow")
    assert (new_state.piece.row, new_state.piece.col) == (0, 4)
    assert new_state.score == 0
    assert not state.board.get(19, 4).filled, "Input state must not be modified"


def test_tick_clears_single_row():
    """Test filling the last gap of a row scores 100."""
    board = Board()
    fill_rows(board, [19], skip={0})
    state = running_state(vertical_i(16, 0), board=board, score=50)

    new_state = transitions.tick(state, PieceSpawner(1))

    assert new_state.score == 150
    assert not new_state.board.is_row_full(19)
    assert all(not cell.filled for cell in new_state.board.rows[0])


def test_tick_clears_four_rows():
    """Test a four-row clear scores 1600 and empties the board."""
    board = Board()
    fill_rows(board, range(16, 20), skip={0})
    state = running_state(vertical_i(16, 0), board=board)

    new_state = transitions.tick(state, PieceSpawner(1))

    assert new_state.score == 1600
    assert all(not cell.filled for row in new_state.board.rows for cell in row)
    assert len(new_state.board.rows) == 20


def test_game_over_when_spawn_blocked():
    """Test that a blocked spawn origin ends the game on the next lock."""
    board = Board()
    for row, col in [(0, 4), (0, 5), (1, 4), (1, 5)]:
        board.set(row, col, Cell(filled=True, color="gray"))
    state = running_state(Piece("O", 18, 0), board=board)

    new_state = transitions.tick(state, PieceSpawner(3))

    assert new_state.game_over
    assert not new_state.running
    assert new_state.piece is None
    assert new_state.board.get(19, 0).filled, "Last piece should still be locked"


def test_game_over_is_terminal_until_start():
    """Test that game over ignores commands and start resets everything."""
    spawner = PieceSpawner(5)
    state = running_state(None, score=700, level=4, speed=350, game_over=True)

    for command in [Command.MOVE_LEFT, Command.ROTATE, Command.TICK, Command.SOFT_DROP]:
        assert transitions.apply_command(state, command, spawner) is state

    restarted = transitions.apply_command(state, Command.START, spawner)
    assert restarted.running
    assert (restarted.score, restarted.level, restarted.speed) == (0, 1, 500)
    assert restarted.piece is not None


def test_progression_levels_up_once():
    """Test that reaching level * 100 raises the level and speed once."""
    state = running_state(Piece("O", 0, 4), score=100)

    state = transitions.evaluate_progression(state)
    assert (state.level, state.speed) == (2, 450)

    again = transitions.evaluate_progression(state)
    assert again is state, "Score 100 is below the level 2 threshold"


def test_progression_one_level_per_evaluation():
    """Known quirk: crossing several thresholds still gains one level per evaluation."""
    state = running_state(Piece("O", 0, 4), score=500)

    state = transitions.evaluate_progression(state)
    assert state.level == 2

    state = transitions.evaluate_progression(state)
    assert state.level == 3


def test_progression_monotonic_and_floored():
    """Test level never decreases and speed never drops below 200."""
    state = running_state(Piece("O", 0, 4), score=100_000)
    previous = state

    for _ in range(30):
        state = transitions.evaluate_progression(state)
        assert state.level >= previous.level
        assert state.speed <= previous.speed
        assert state.speed >= 200
        previous = state

    assert state.speed == 200


def test_apply_command_rejects_unknown():
    with pytest.raises(ValueError):
        transitions.apply_command(GameState(), "bogus", PieceSpawner(1))
