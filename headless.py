from __future__ import annotations

import argparse
import logging
from typing import Iterator, List, Sequence

import numpy as np

from scheduler import TickScheduler
from snake_core import GRID_SIZE, Direction, GameConfig, SnakeGame, StepResult


FRAME_PERIOD_MS = 1000.0 / 60.0

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Tech Snake without a display on a simulated frame clock.")
    parser.add_argument("--grid-size", type=int, default=GRID_SIZE, help="Cells per side of the square board.")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for food placement and frame jitter.")
    parser.add_argument(
        "--moves",
        type=parse_moves,
        default=[],
        help="Comma separated directions applied one per tick, e.g. RIGHT,RIGHT,DOWN.",
    )
    parser.add_argument("--max-ticks", type=int, default=200, help="Stop after this many game ticks.")
    parser.add_argument("--jitter-ms", type=float, default=4.0, help="Std-dev of the frame period in milliseconds.")
    parser.add_argument("--log-interval", type=int, default=25, help="How often to log progress (ticks).")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)
    if args.grid_size < 1:
        parser.error("--grid-size must be at least 1")
    return args


def parse_moves(raw: str) -> List[Direction]:
    try:
        return [Direction.parse(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def simulated_frames(rng: np.random.Generator, jitter_ms: float, start_ms: float = 0.0) -> Iterator[float]:
    # Display refresh with jitter; timestamps never go backwards.
    now_ms = start_ms
    while True:
        yield now_ms
        now_ms += max(1.0, float(rng.normal(FRAME_PERIOD_MS, jitter_ms)))


def run_game(
    game: SnakeGame,
    moves: Sequence[Direction],
    max_ticks: int,
    rng: np.random.Generator,
    jitter_ms: float = 4.0,
    log_interval: int = 25,
) -> StepResult | None:
    scripted = iter(moves)
    last: list[StepResult] = []

    def next_move() -> None:
        direction = next(scripted, None)
        if direction is not None:
            game.request_direction(direction)

    def on_tick(result: StepResult) -> None:
        last[:] = [result]
        ticks = result.snapshot.ticks
        if log_interval > 0 and ticks and ticks % log_interval == 0:
            logger.info(
                "[headless] tick=%d score=%d length=%d interval=%dms",
                ticks,
                result.snapshot.score,
                len(result.snapshot.snake),
                result.snapshot.interval_ms,
            )
        if ticks >= max_ticks:
            scheduler.stop()
        else:
            next_move()

    if max_ticks <= 0:
        return None

    scheduler = TickScheduler(game, on_tick=on_tick)
    next_move()
    scheduler.start()
    scheduler.run(simulated_frames(rng, jitter_ms))
    return last[0] if last else None


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    game = SnakeGame(GameConfig.for_grid(args.grid_size, seed=args.seed))
    rng = np.random.default_rng(args.seed)
    run_game(game, args.moves, args.max_ticks, rng, jitter_ms=args.jitter_ms, log_interval=args.log_interval)

    snapshot = game.snapshot()
    print(snapshot.render_text())
    status = f"game over ({snapshot.reason})" if snapshot.game_over else "stopped"
    print(f"[headless] {status} score={snapshot.score} ticks={snapshot.ticks} length={len(snapshot.snake)}")


if __name__ == "__main__":
    main()
