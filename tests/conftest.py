import os
import sys
from collections import deque

import pytest

# Add the repository root to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from snake_core import Direction, DirectionBuffer, GameConfig, SnakeGame  # noqa: E402


@pytest.fixture
def game():
    return SnakeGame(GameConfig(seed=7))


@pytest.fixture
def make_game():
    """Build a game positioned at an arbitrary mid-play state."""

    def _make(snake, direction=Direction.RIGHT, food=(0, 0), **fields):
        game = SnakeGame(GameConfig(seed=7))
        state = game.state
        state.snake = deque(snake)
        state.food = food
        state.directions = DirectionBuffer(committed=direction, pending=direction)
        for name, value in fields.items():
            setattr(state, name, value)
        return game

    return _make
