from __future__ import annotations

import argparse
import logging
from typing import Sequence

import pygame

from effects import TrailQueue
from scheduler import TickScheduler
from snake_core import GRID_SIZE, Direction, GameConfig, GameSnapshot, Position, SnakeGame, StepEvent, StepResult


CELL_SIZE = 20
HUD_HEIGHT = 40
FPS = 60
FONT_NAME = "arial"

BACKGROUND = (4, 12, 24)
GRID_COLOR = (8, 47, 73)
HEAD_COLOR = (0, 210, 255)
BODY_COLOR = (0, 114, 255)
TRAIL_COLOR = (58, 123, 213, 150)
FOOD_COLOR = (255, 0, 170)
ACCENT_COLOR = (34, 211, 238)


DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}
RESTART_KEYS = (pygame.K_SPACE, pygame.K_RETURN, pygame.K_r)
QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Tech Snake.")
    parser.add_argument("--grid-size", type=int, default=GRID_SIZE, help="Cells per side of the square board.")
    parser.add_argument("--cell-size", type=int, default=CELL_SIZE, help="Pixel size of one cell.")
    parser.add_argument("--fps", type=int, default=FPS, help="Frame rate cap of the render loop.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for food placement.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)
    if args.grid_size < 1:
        parser.error("--grid-size must be at least 1")
    return args


def draw_block(surface: pygame.Surface, color, position: Position, cell_size: int) -> None:
    rect = pygame.Rect(position[0] * cell_size, HUD_HEIGHT + position[1] * cell_size, cell_size, cell_size)
    pygame.draw.rect(surface, color, rect, border_radius=max(1, cell_size // 6))


def cell_center(position: Position, cell_size: int) -> tuple[int, int]:
    x = position[0] * cell_size + cell_size // 2
    y = HUD_HEIGHT + position[1] * cell_size + cell_size // 2
    return x, y


def draw_grid(surface: pygame.Surface, grid_size: int, cell_size: int) -> None:
    extent = grid_size * cell_size
    for i in range(grid_size + 1):
        offset = i * cell_size
        pygame.draw.line(surface, GRID_COLOR, (offset, HUD_HEIGHT), (offset, HUD_HEIGHT + extent))
        pygame.draw.line(surface, GRID_COLOR, (0, HUD_HEIGHT + offset), (extent, HUD_HEIGHT + offset))


def draw_snake(surface: pygame.Surface, snake: Sequence[Position], cell_size: int) -> None:
    # Tail first so the head is painted on top.
    for idx in range(len(snake) - 1, -1, -1):
        color = HEAD_COLOR if idx == 0 else BODY_COLOR
        draw_block(surface, color, snake[idx], cell_size)


def draw_food(surface: pygame.Surface, food: Position, cell_size: int) -> None:
    radius = max(2, cell_size // 2 - 2)
    pygame.draw.circle(surface, FOOD_COLOR, cell_center(food, cell_size), radius)


def draw_trail(surface: pygame.Surface, trail: TrailQueue, cell_size: int) -> None:
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    for idx, pos in enumerate(trail):
        shrink = min(cell_size // 2 - 1, idx * cell_size // 10)
        rect = pygame.Rect(pos[0] * cell_size, HUD_HEIGHT + pos[1] * cell_size, cell_size, cell_size)
        pygame.draw.rect(overlay, TRAIL_COLOR, rect.inflate(-2 * shrink, -2 * shrink))
    surface.blit(overlay, (0, 0))


def draw_hud(surface: pygame.Surface, font: pygame.font.Font, snapshot: GameSnapshot) -> None:
    score_text = font.render(f"Score: {snapshot.score}", True, ACCENT_COLOR)
    speed_text = font.render(f"Tick: {snapshot.interval_ms} ms", True, pygame.Color("gray70"))
    surface.blit(score_text, (10, 8))
    surface.blit(speed_text, (surface.get_width() - speed_text.get_width() - 10, 8))


def draw_game_over(surface: pygame.Surface, font: pygame.font.Font, snapshot: GameSnapshot) -> None:
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 180))
    surface.blit(overlay, (0, 0))
    center_x = surface.get_width() // 2
    center_y = surface.get_height() // 2
    lines = [
        (f"Game Over! ({snapshot.reason})", ACCENT_COLOR),
        (f"Your score: {snapshot.score}", pygame.Color("white")),
        ("Space to play again, Esc to quit", pygame.Color("gray70")),
    ]
    for i, (text, color) in enumerate(lines):
        msg = font.render(text, True, color)
        rect = msg.get_rect(center=(center_x, center_y + (i - 1) * 30))
        surface.blit(msg, rect)


def handle_key(key: int, game: SnakeGame, scheduler: TickScheduler, trail: TrailQueue) -> bool:
    """Apply one key press. Returns False when the player asked to quit."""
    if key in QUIT_KEYS:
        return False
    if key in DIRECTIONS:
        game.request_direction(DIRECTIONS[key])
    elif key in RESTART_KEYS:
        game.reset()
        trail.clear()
        scheduler.restart()
    return True


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    game = SnakeGame(GameConfig.for_grid(args.grid_size, seed=args.seed))
    trail = TrailQueue()

    def on_tick(result: StepResult) -> None:
        if result.event is StepEvent.GREW:
            trail.extend(result.trail, pygame.time.get_ticks())
        elif result.game_over:
            print(f"[game] over ({result.snapshot.reason}) score={result.snapshot.score}")

    scheduler = TickScheduler(game, on_tick=on_tick)

    pygame.init()
    board_px = args.grid_size * args.cell_size
    screen = pygame.display.set_mode((board_px, board_px + HUD_HEIGHT))
    pygame.display.set_caption("Tech Snake")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(FONT_NAME, 24)
    logger.info("Starting %dx%d board, seed=%s", args.grid_size, args.grid_size, args.seed)

    scheduler.start()
    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and running:
                    running = handle_key(event.key, game, scheduler, trail)
            if not running:
                break

            now_ms = pygame.time.get_ticks()
            scheduler.on_frame(now_ms)
            trail.expire(now_ms)
            snapshot = game.snapshot()

            screen.fill(BACKGROUND)
            draw_grid(screen, snapshot.grid_size, args.cell_size)
            draw_food(screen, snapshot.food, args.cell_size)
            draw_snake(screen, snapshot.snake, args.cell_size)
            draw_trail(screen, trail, args.cell_size)
            draw_hud(screen, font, snapshot)
            if snapshot.game_over:
                draw_game_over(screen, font, snapshot)

            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        # No step may run once the window is gone.
        scheduler.stop()
        pygame.quit()


if __name__ == "__main__":
    main()
