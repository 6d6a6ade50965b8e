from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from snake_core import SnakeGame, StepResult


logger = logging.getLogger(__name__)


class TickScheduler:
    """Turns a variable-rate frame signal into fixed-cadence game steps.

    Each call to on_frame() takes at most one step, once at least the game's
    current tick interval has elapsed since the last accepted tick. Missed
    intervals are not caught up.
    """

    def __init__(self, game: SnakeGame, on_tick: Optional[Callable[[StepResult], None]] = None):
        self.game = game
        self.on_tick = on_tick
        self.last_tick_ms: float | None = None
        self.running = False

    def start(self) -> None:
        self.running = True
        self.last_tick_ms = None

    def stop(self) -> None:
        self.running = False
        self.last_tick_ms = None

    def restart(self) -> None:
        self.stop()
        self.start()

    def on_frame(self, now_ms: float) -> StepResult | None:
        if not self.running:
            return None
        if self.last_tick_ms is None:
            self.last_tick_ms = now_ms
            return None

        elapsed = now_ms - self.last_tick_ms
        if elapsed < 0:
            raise ValueError(f"frame timestamp {now_ms} is earlier than the last tick at {self.last_tick_ms}")
        if elapsed < self.game.state.interval_ms:
            return None

        self.last_tick_ms = now_ms
        result = self.game.step()
        if result.game_over:
            # Stays stopped until the frontend resets the game and restarts us.
            self.running = False
            logger.debug("Scheduler stopped on %s", result.event.value)
        if self.on_tick is not None:
            self.on_tick(result)
        return result

    def run(self, frames: Iterable[float]) -> int:
        steps = 0
        for now_ms in frames:
            if not self.running:
                break
            if self.on_frame(now_ms) is not None:
                steps += 1
        return steps
