import pygame
import pytest

from effects import TrailQueue
from scheduler import TickScheduler
from snake import BODY_COLOR, HEAD_COLOR, HUD_HEIGHT, draw_snake, handle_key, parse_args
from snake_core import Direction, GameConfig


def test_arrow_keys_request_directions(game):
    scheduler = TickScheduler(game)
    trail = TrailQueue()
    assert handle_key(pygame.K_UP, game, scheduler, trail)
    assert game.state.pending_direction is Direction.UP
    assert handle_key(pygame.K_LEFT, game, scheduler, trail)
    # LEFT reverses the committed RIGHT heading.
    assert game.state.pending_direction is Direction.UP
    assert handle_key(pygame.K_s, game, scheduler, trail)
    assert game.state.pending_direction is Direction.DOWN


def test_restart_key_resets_everything(make_game):
    game = make_game([(19, 10)], direction=Direction.RIGHT, score=40)
    scheduler = TickScheduler(game)
    trail = TrailQueue()
    trail.extend([(1, 1)], now_ms=0)
    scheduler.start()
    scheduler.on_frame(0)
    scheduler.on_frame(200)
    assert game.game_over and not scheduler.running

    assert handle_key(pygame.K_SPACE, game, scheduler, trail)
    assert not game.game_over
    assert game.snapshot().score == 0
    assert scheduler.running
    assert len(trail) == 0


def test_quit_keys(game):
    scheduler = TickScheduler(game)
    assert not handle_key(pygame.K_ESCAPE, game, scheduler, TrailQueue())
    assert not handle_key(pygame.K_q, game, scheduler, TrailQueue())


def test_draw_snake_paints_head_and_body():
    cell = 10
    surface = pygame.Surface((5 * cell, HUD_HEIGHT + 5 * cell))
    draw_snake(surface, [(2, 1), (1, 1)], cell)
    head = surface.get_at((2 * cell + cell // 2, HUD_HEIGHT + cell + cell // 2))
    body = surface.get_at((cell + cell // 2, HUD_HEIGHT + cell + cell // 2))
    assert tuple(head)[:3] == HEAD_COLOR
    assert tuple(body)[:3] == BODY_COLOR


def test_parse_args_accepts_small_boards():
    args = parse_args(["--grid-size", "6", "--seed", "3"])
    config = GameConfig.for_grid(args.grid_size, seed=args.seed)
    assert config.start == (3, 3)
    assert config.grid_size == 6


def test_parse_args_rejects_empty_board():
    with pytest.raises(SystemExit):
        parse_args(["--grid-size", "0"])
