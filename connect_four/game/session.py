"""
session.py - A single Connect Four game shared between callers

GameSession holds the current GameState and serializes every operation on it
with a lock, so concurrent callers always see one linear history of moves.
Create one session per game; sessions share nothing with each other.
"""

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from connect_four.debug import debug
from connect_four.game.board import (GameState, MoveError, MoveResult,
                                     legal_moves, submit_move, submit_moves)
from connect_four.utils import Outcome


@dataclass(frozen=True)
class GameSnapshot:
    """What callers get to see of a game: the moves played and the outcome."""
    moves: Tuple[int, ...]
    outcome: Outcome

    @classmethod
    def of(cls, state: GameState) -> 'GameSnapshot':
        return cls(moves=state.move_log, outcome=state.outcome)


@dataclass(frozen=True)
class SessionResult:
    """
    Reply to GameSession.submit: a snapshot on success, an error otherwise.

    ``state`` is the position held right after the submission was handled
    (the new one on success, the untouched one on rejection).
    """
    snapshot: Optional[GameSnapshot] = None
    error: Optional[MoveError] = None
    state: Optional[GameState] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None


class GameSession:
    """
    Owns one game and applies operations to it one at a time.

    Every public method takes the session lock for its whole duration, so
    a submit can never interleave with another submit, an inspect or a
    restart.
    """

    def __init__(self, state: Optional[GameState] = None):
        self._lock = threading.Lock()
        self._state = state if state is not None else GameState.new()
        debug.debug("Initializing GameSession", "session")

    @property
    def state(self) -> GameState:
        """The current position (an immutable value)."""
        with self._lock:
            return self._state

    def submit(self, move_or_moves) -> SessionResult:
        """
        Play one move (an int) or several (a list or tuple of ints).

        If any of several moves is illegal, none of them are played. A
        rejected submission never changes the game.
        """
        with self._lock:
            result = self._apply(move_or_moves)
            if not result.ok:
                debug.debug(f"Submission {move_or_moves!r} rejected: {result.error}", "session")
                return SessionResult(error=result.error, state=self._state)

            self._state = result.state
            debug.debug(f"Moves now {list(self._state.move_log)}, "
                        f"outcome {self._state.outcome.value}", "session")
            return SessionResult(snapshot=GameSnapshot.of(self._state), state=self._state)

    def _apply(self, move_or_moves) -> MoveResult:
        if isinstance(move_or_moves, np.ndarray) and move_or_moves.ndim == 0:
            move_or_moves = move_or_moves.item()
        if isinstance(move_or_moves, (int, np.integer)) and not isinstance(move_or_moves, bool):
            return submit_move(self._state, move_or_moves)
        if isinstance(move_or_moves, (Sequence, np.ndarray)) and not isinstance(move_or_moves, (str, bytes)):
            return submit_moves(self._state, list(move_or_moves))
        return MoveResult(self._state, MoveError.ILLEGAL_MOVE)

    def legal_moves(self) -> List[int]:
        """Columns that still have room, in ascending order."""
        with self._lock:
            return legal_moves(self._state)

    def inspect(self) -> GameSnapshot:
        """Look at the moves and outcome without changing anything."""
        with self._lock:
            return GameSnapshot.of(self._state)

    def restart(self) -> bool:
        """Start a fresh game, whether or not the current one has finished."""
        with self._lock:
            debug.debug(f"Restarting after {self._state.ply_count} plies", "session")
            self._state = GameState.new()
        return True
