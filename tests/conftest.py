"""
Pytest fixtures for the Connect Four tests.
"""

import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from connect_four.debug import debug, DebugLevel
from connect_four.game.board import GameState
from connect_four.game.session import GameSession

DRAW_MOVES = ([0, 1, 0, 1, 1, 0, 1, 0, 0, 1, 0, 1]
              + [2, 3, 2, 3, 3, 2, 3, 2, 2, 3, 2, 3]
              + [4, 5, 4, 5, 5, 4, 5, 4, 4, 5, 4, 5]
              + [6, 6, 6, 6, 6, 6])


@pytest.fixture(autouse=True)
def reset_debug():
    """Put the shared debug manager back to its defaults after every test."""
    yield
    debug.configure(level=DebugLevel.WARNING, enabled=True, log_file="", components=[])


@pytest.fixture
def game() -> GameState:
    """A fresh game."""
    return GameState.new()


@pytest.fixture
def session() -> GameSession:
    """A session holding a fresh game."""
    return GameSession()


@pytest.fixture
def draw_moves():
    """42 moves that fill the board without anyone connecting four."""
    return list(DRAW_MOVES)
