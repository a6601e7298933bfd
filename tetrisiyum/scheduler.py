"""Periodic drivers for the game engine.

Two asyncio tasks drive a running game: gravity ticks every `engine.speed`
milliseconds and the level/speed rule is evaluated every second. Both run on
the caller's event loop, so they never interleave with commands.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from tetrisiyum.engine import GameEngine, Snapshot
from tetrisiyum.rules import PROGRESSION_INTERVAL_MS
from tetrisiyum.state import GameState

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[str, Snapshot], Awaitable[None]]


class GameScheduler:
    """Owns the gravity and progression tasks of one engine."""

    def __init__(
        self,
        engine: GameEngine,
        on_update: Optional[UpdateCallback] = None,
        playback_speed: float = 1.0,
    ):
        """Initialize the scheduler.

        Args:
            engine: Engine to drive
            on_update: Awaited with the event name ("tick" or "progression")
                and a fresh snapshot after every driver firing
            playback_speed: Time multiplier (2.0 = both drivers twice as fast)
        """
        if playback_speed <= 0:
            raise ValueError(f"playback_speed must be positive, got {playback_speed}")
        self.engine = engine
        self.on_update = on_update
        self.playback_speed = playback_speed
        self.gravity_task: Optional[asyncio.Task] = None
        self.progression_task: Optional[asyncio.Task] = None
        self.active = False
        engine.add_listener(self._on_state_change)

    @property
    def running(self) -> bool:
        """Whether any driver task is still alive."""
        return any(
            task is not None and not task.done()
            for task in (self.gravity_task, self.progression_task)
        )

    def start(self) -> None:
        """Start both drivers. Must be called from a running event loop."""
        self.stop()
        if not self.engine.running:
            logger.info("[Scheduler] Engine not running, drivers not started")
            return
        self.active = True
        self.gravity_task = asyncio.create_task(self._run_gravity())
        self.progression_task = asyncio.create_task(self._run_progression())
        logger.info(f"[Scheduler] Started: speed={self.engine.speed}ms, playback={self.playback_speed}x")

    def stop(self) -> None:
        """Cancel both drivers."""
        self.active = False
        for task in (self.gravity_task, self.progression_task):
            self._cancel(task)

    def close(self) -> None:
        """Stop the drivers and detach from the engine."""
        self.stop()
        self.engine.remove_listener(self._on_state_change)

    def _restart_gravity(self) -> None:
        self._cancel(self.gravity_task)
        self.gravity_task = asyncio.create_task(self._run_gravity())
        logger.info(f"[Scheduler] Gravity rescheduled: speed={self.engine.speed}ms")

    @staticmethod
    def _cancel(task: Optional[asyncio.Task]) -> None:
        # The calling task finishes its own loop instead of cancelling itself
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _on_state_change(self, previous: GameState, new: GameState) -> None:
        if not self.active:
            return
        if not new.running:
            logger.info(f"[Scheduler] Game over, stopping drivers: score={new.score}")
            self.stop()
        elif new.speed != previous.speed:
            self._restart_gravity()

    async def _notify(self, event: str) -> None:
        if self.on_update is not None:
            await self.on_update(event, self.engine.get_snapshot())

    async def _run_gravity(self) -> None:
        try:
            while self.active and self.engine.running:
                await asyncio.sleep(self.engine.speed / 1000 / self.playback_speed)
                self.engine.tick()
                await self._notify("tick")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[Scheduler] Gravity driver error: {e}", exc_info=True)
            self.stop()

    async def _run_progression(self) -> None:
        delay = PROGRESSION_INTERVAL_MS / 1000 / self.playback_speed
        try:
            while self.active and self.engine.running:
                await asyncio.sleep(delay)
                self.engine.evaluate_progression()
                await self._notify("progression")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[Scheduler] Progression driver error: {e}", exc_info=True)
            self.stop()
