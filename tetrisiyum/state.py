"""Immutable game state and pure state transitions.

Every transition takes a state and returns a new one; the board of the input
state is never modified. Blocked moves and commands issued while the game is
not running return the input state unchanged.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from tetrisiyum.board import Board
from tetrisiyum.piece import Piece
from tetrisiyum.rng import PieceSpawner
from tetrisiyum.rules import IDLE_SPEED_MS, INITIAL_SPEED_MS, calculate_score, progress

logger = logging.getLogger(__name__)


class Command(str, Enum):
    """Commands accepted by the engine."""
    START = "start"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SOFT_DROP = "soft_drop"
    ROTATE = "rotate"
    TICK = "tick"


@dataclass(frozen=True)
class GameState:
    """Complete game state."""
    board: Board = field(default_factory=Board)
    piece: Optional[Piece] = None
    score: int = 0
    level: int = 1
    speed: int = IDLE_SPEED_MS
    game_over: bool = False
    started: bool = False

    @property
    def running(self) -> bool:
        return self.started and not self.game_over


def start(state: GameState, spawner: PieceSpawner) -> GameState:
    """Begin a new game from any state, discarding the old one."""
    return GameState(
        board=Board(),
        piece=spawner.next(),
        speed=INITIAL_SPEED_MS,
        started=True,
    )


def move(state: GameState, drow: int, dcol: int) -> GameState:
    """Shift the active piece if the target position is free.

    Args:
        state: Current state
        drow: Row delta (1 = down)
        dcol: Column delta

    Returns:
        New state, or the same state if the move is blocked
    """
    if not state.running:
        return state
    moved = state.piece.move(drow, dcol)
    if not state.board.is_free(moved.shape, moved.row, moved.col):
        return state
    return replace(state, piece=moved)


def rotate(state: GameState) -> GameState:
    """Rotate the active piece clockwise in place, without wall kicks."""
    if not state.running:
        return state
    rotated = state.piece.rotated()
    if not state.board.is_free(rotated.shape, rotated.row, rotated.col):
        return state
    return replace(state, piece=rotated)


def tick(state: GameState, spawner: PieceSpawner) -> GameState:
    """Apply one gravity tick.

    The piece falls one row if it can. Otherwise it is locked, completed rows
    are cleared and scored, and the next piece spawns. If the new piece does
    not fit at the spawn origin the game is over.

    Args:
        state: Current state
        spawner: Source of the next piece

    Returns:
        New state
    """
    if not state.running:
        return state

    piece = state.piece
    if state.board.is_free(piece.shape, piece.row + 1, piece.col):
        return replace(state, piece=piece.move(1, 0))

    board = state.board.copy()
    cleared = board.merge_and_clear(piece.shape, piece.row, piece.col, piece.color)
    score = state.score + calculate_score(cleared)
    logger.debug(f"Locked {piece} clearing {cleared} rows, score={score}")

    new_piece = spawner.next()
    if not board.is_free(new_piece.shape, new_piece.row, new_piece.col):
        logger.info(f"Game over: {new_piece.kind} blocked at spawn, score={score}")
        return replace(state, board=board, piece=None, score=score, game_over=True)

    return replace(state, board=board, piece=new_piece, score=score)


def evaluate_progression(state: GameState) -> GameState:
    """Apply the level/speed rule once.

    At most one level is gained per evaluation, even if the score has crossed
    several thresholds since the previous one.
    """
    if not state.running:
        return state
    level, speed = progress(state.score, state.level, state.speed)
    if level == state.level:
        return state
    logger.info(f"Level up: {state.level} -> {level}, speed {state.speed}ms -> {speed}ms")
    return replace(state, level=level, speed=speed)


def apply_command(state: GameState, command: Command, spawner: PieceSpawner) -> GameState:
    """Dispatch a command to its transition.

    Args:
        state: Current state
        command: Command to apply
        spawner: Source of new pieces for start and tick

    Returns:
        New state
    """
    if command == Command.START:
        return start(state, spawner)
    elif command == Command.MOVE_LEFT:
        return move(state, 0, -1)
    elif command == Command.MOVE_RIGHT:
        return move(state, 0, 1)
    elif command == Command.SOFT_DROP:
        return move(state, 1, 0)
    elif command == Command.ROTATE:
        return rotate(state)
    elif command == Command.TICK:
        return tick(state, spawner)
    else:
        raise ValueError(f"Invalid command: {command}")
