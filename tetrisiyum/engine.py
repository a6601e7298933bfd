"""Game engine exposing the command API and render snapshots.

The engine owns the current GameState and swaps it for the result of a pure
transition on every command, so a caller never observes a half-applied
command.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from tetrisiyum import state as transitions
from tetrisiyum.board import Grid, grid_to_list
from tetrisiyum.piece import Piece
from tetrisiyum.rng import PieceSpawner
from tetrisiyum.state import Command, GameState

logger = logging.getLogger(__name__)

Listener = Callable[[GameState, GameState], None]


@dataclass(frozen=True)
class Snapshot:
    """Render-ready view of the game."""
    grid: Grid
    score: int
    level: int
    speed: int
    game_over: bool
    started: bool
    piece: Optional[Piece]

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        return {
            "grid": grid_to_list(self.grid),
            "score": self.score,
            "level": self.level,
            "speed": self.speed,
            "game_over": self.game_over,
            "started": self.started,
            "piece": (
                {"kind": self.piece.kind, "row": self.piece.row, "col": self.piece.col}
                if self.piece
                else None
            ),
        }

    def to_text(self) -> str:
        """Render the grid as text, one character per cell.

        Empty cells are ".", filled cells show the upper-cased first letter
        of their color.
        """
        lines = [
            "".join(cell.color[0].upper() if cell.filled else "." for cell in line)
            for line in self.grid
        ]
        lines.append(f"score={self.score} level={self.level} speed={self.speed}ms")
        if self.game_over:
            lines.append("GAME OVER")
        return "\n".join(lines)


def build_snapshot(state: GameState) -> Snapshot:
    """Build the snapshot of a state, overlaying the active piece."""
    piece = state.piece
    if piece is not None and not state.game_over:
        grid = state.board.snapshot_with_overlay(piece.shape, piece.row, piece.col, piece.color)
    else:
        grid = state.board.grid()
    return Snapshot(
        grid=grid,
        score=state.score,
        level=state.level,
        speed=state.speed,
        game_over=state.game_over,
        started=state.started,
        piece=piece,
    )


class GameEngine:
    """Falling-block game engine."""

    def __init__(self, seed: Optional[int] = None, state: Optional[GameState] = None):
        """Initialize the engine, by default in the not-started state.

        Args:
            seed: Random seed for the piece sequence (None for entropy)
            state: State to resume from instead of a fresh one
        """
        self.spawner = PieceSpawner(seed)
        self._state = state if state is not None else GameState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def speed(self) -> int:
        """Milliseconds between gravity ticks."""
        return self._state.speed

    @property
    def running(self) -> bool:
        return self._state.running

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked with (previous, new) on every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def start(self) -> None:
        """Start a new game, or restart after game over."""
        self._apply(Command.START)

    def move_left(self) -> None:
        self._apply(Command.MOVE_LEFT)

    def move_right(self) -> None:
        self._apply(Command.MOVE_RIGHT)

    def soft_drop(self) -> None:
        """Move the piece down one row; never locks it."""
        self._apply(Command.SOFT_DROP)

    def rotate(self) -> None:
        self._apply(Command.ROTATE)

    def tick(self) -> None:
        """Gravity tick: fall one row, or lock and spawn the next piece."""
        self._apply(Command.TICK)

    def evaluate_progression(self) -> None:
        """Apply the level/speed rule once (driven every second by the scheduler)."""
        self._set_state(transitions.evaluate_progression(self._state))

    def command(self, name: str) -> None:
        """Apply a command by name.

        Args:
            name: One of the Command values, e.g. "move_left"

        Raises:
            ValueError: If the command name is unknown
        """
        try:
            command = Command(name)
        except ValueError:
            logger.debug(f"Rejected unknown command: {name!r}")
            raise ValueError(f"Invalid command: {name}") from None
        self._apply(command)

    def get_snapshot(self) -> Snapshot:
        """Get the current render snapshot."""
        return build_snapshot(self._state)

    def _apply(self, command: Command) -> None:
        self._set_state(transitions.apply_command(self._state, command, self.spawner))

    def _set_state(self, new_state: GameState) -> None:
        previous = self._state
        if new_state is previous:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(previous, new_state)
