"""Scoring, leveling and speed rules.

Speeds are milliseconds between gravity ticks. A game that has not been
started idles at a slower speed than a freshly started one.
"""

from typing import Tuple

# Spawn origin for every new piece
SPAWN_ROW = 0
SPAWN_COL = 4

IDLE_SPEED_MS = 900
INITIAL_SPEED_MS = 500
SPEED_STEP_MS = 50
MIN_SPEED_MS = 200

LEVEL_SCORE_STEP = 100
LINE_CLEAR_BASE = 100

PROGRESSION_INTERVAL_MS = 1000


def calculate_score(lines_cleared: int) -> int:
    """Calculate score from lines cleared at once.

    Multi-line clears are rewarded quadratically: 1 line = 100,
    2 lines = 400, 4 lines = 1600.

    Args:
        lines_cleared: Number of lines cleared simultaneously

    Returns:
        Score points
    """
    return lines_cleared ** 2 * LINE_CLEAR_BASE


def next_speed(speed: int) -> int:
    """Speed after one level-up, clamped to the floor."""
    return max(speed - SPEED_STEP_MS, MIN_SPEED_MS)


def progress(score: int, level: int, speed: int) -> Tuple[int, int]:
    """Apply one progression evaluation.

    Advances at most one level per call, even when the score has crossed
    several thresholds since the last evaluation.

    Args:
        score: Current score
        level: Current level
        speed: Current gravity period in ms

    Returns:
        (level, speed) after the evaluation
    """
    if score >= level * LEVEL_SCORE_STEP:
        return level + 1, next_speed(speed)
    return level, speed
