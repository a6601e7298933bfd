#!/usr/bin/env python3
"""Demo script that plays a headless game with random commands."""

import argparse
import random

from tetrisiyum.engine import GameEngine
from tetrisiyum.rules import PROGRESSION_INTERVAL_MS

MOVES = ["move_left", "move_right", "rotate", "soft_drop"]


def play(seed: int, steps: int, verbose: bool = False) -> GameEngine:
    """Play up to `steps` gravity ticks, simulating the driver clocks.

    One random command is issued before every tick. Progression is evaluated
    whenever a simulated second has elapsed.
    """
    engine = GameEngine(seed=seed)
    chooser = random.Random(seed)
    engine.start()

    elapsed_ms = 0
    for step in range(steps):
        if not engine.running:
            break
        engine.command(chooser.choice(MOVES))
        engine.tick()

        elapsed_ms += engine.speed
        if elapsed_ms >= PROGRESSION_INTERVAL_MS:
            elapsed_ms = 0
            engine.evaluate_progression()

        if verbose:
            print(f"\nStep {step + 1}")
            print(engine.get_snapshot().to_text())

    return engine


def main():
    """Run the demo."""
    parser = argparse.ArgumentParser(description="Play a headless Tetrisiyum game")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--steps", type=int, default=500)
    parser.add_argument("--verbose", action="store_true", help="Print every step")
    args = parser.parse_args()

    print("Tetrisiyum Demo")
    print("=" * 60)

    engine = play(args.seed, args.steps, args.verbose)

    print(engine.get_snapshot().to_text())


if __name__ == "__main__":
    main()
