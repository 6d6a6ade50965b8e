import argparse

import numpy as np
import pytest

from headless import main, parse_moves, run_game, simulated_frames
from snake_core import Direction, GameConfig, SnakeGame, StepEvent


def test_parse_moves():
    assert parse_moves("right, down,UP") == [Direction.RIGHT, Direction.DOWN, Direction.UP]
    assert parse_moves("") == []
    with pytest.raises(argparse.ArgumentTypeError):
        parse_moves("RIGHT,sideways")


def test_simulated_frames_never_go_backwards():
    frames = simulated_frames(np.random.default_rng(0), jitter_ms=50.0)
    stamps = [next(frames) for _ in range(500)]
    assert stamps[0] == 0.0
    assert all(b > a for a, b in zip(stamps, stamps[1:]))


def test_run_game_stops_after_max_ticks():
    game = SnakeGame(GameConfig(seed=0))
    result = run_game(game, [], max_ticks=5, rng=np.random.default_rng(0))
    assert result.event is StepEvent.MOVED
    snap = game.snapshot()
    assert snap.ticks == 5
    assert snap.head == (15, 10)
    assert not snap.game_over


def test_run_game_applies_one_move_per_tick():
    game = SnakeGame(GameConfig(seed=0))
    run_game(game, [Direction.DOWN, Direction.LEFT], max_ticks=3, rng=np.random.default_rng(1))
    assert game.snapshot().snake == ((8, 11),)


def test_run_game_ends_on_wall():
    game = SnakeGame(GameConfig(seed=0))
    result = run_game(game, [], max_ticks=100, rng=np.random.default_rng(2))
    assert result.event is StepEvent.WALL
    assert game.snapshot().ticks == 9


def test_main_prints_board_and_summary(capsys):
    main(["--max-ticks", "3", "--log-level", "WARNING"])
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 21
    assert all(len(row) == 20 for row in out[:20])
    assert out[10][13] == "H"
    assert out[-1] == "[headless] stopped score=0 ticks=3 length=1"


@pytest.mark.parametrize("max_ticks", [0, -3])
def test_run_game_takes_no_tick_without_budget(max_ticks):
    game = SnakeGame(GameConfig(seed=0))
    assert run_game(game, [Direction.DOWN], max_ticks=max_ticks, rng=np.random.default_rng(0)) is None
    snap = game.snapshot()
    assert snap.ticks == 0
    assert snap.head == (10, 10)
    assert snap.direction is Direction.RIGHT


def test_main_with_zero_max_ticks(capsys):
    main(["--max-ticks", "0", "--log-level", "WARNING"])
    out = capsys.readouterr().out.splitlines()
    assert out[-1] == "[headless] stopped score=0 ticks=0 length=1"


@pytest.mark.parametrize("size", ["10", "5", "1"])
def test_main_on_small_boards(capsys, size):
    main(["--grid-size", size, "--max-ticks", "3", "--log-level", "WARNING"])
    out = capsys.readouterr().out.splitlines()
    grid = int(size)
    assert len(out) == grid + 1
    assert all(len(row) == grid for row in out[:grid])
    assert out[-1].startswith("[headless] ")


def test_main_rejects_empty_board():
    with pytest.raises(SystemExit):
        main(["--grid-size", "0"])
