"""
board.py - Packed board representation and move rules for Connect Four

This module implements the immutable GameState value and the pure functions
that act on it: submitting one move or a batch of moves, listing legal moves
and detecting four in a row.

Each player owns one integer bitboard. Column ``c`` uses bits ``7*c`` to
``7*c + 6``, counted from the bottom of the column; the seventh bit of every
column is never set by a piece and only marks the column as full. Functions
never modify a GameState in place, they return a new one wrapped in a
MoveResult together with an optional MoveError.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np

from connect_four.debug import debug, DebugLevel
from connect_four.utils import (ROWS, COLS, MAX_PLIES, TOP_ROW_MASK, Player, Outcome,
                                DIRECTION_SHIFTS, bit_index, board_to_cells,
                                iter_set_bits, bit_to_cell, render_board_ascii)


class MoveError(Enum):
    """Reasons a move or a batch of moves can be rejected."""
    GAME_OVER = "Game is over"
    ILLEGAL_MOVE = "Illegal move"
    ILLEGAL_MOVES = "One or more invalid moves"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class GameState:
    """
    A Connect Four position.

    Attributes:
        boards: Packed bitboards as (yellow, red)
        column_fill_counts: Number of pieces in each column
        move_log: Columns played so far, in order
        ply_count: Number of moves made by both players
        outcome: Result of the game, UNDECIDED while it is running
    """
    boards: Tuple[int, int] = (0, 0)
    column_fill_counts: Tuple[int, ...] = (0,) * COLS
    move_log: Tuple[int, ...] = ()
    ply_count: int = 0
    outcome: Outcome = field(default=Outcome.UNDECIDED)

    def __post_init__(self):
        # Frozen, so normalise through object.__setattr__
        for name in ('boards', 'column_fill_counts', 'move_log'):
            value = getattr(self, name)
            if not isinstance(value, (tuple, list)):
                raise ValueError(f"{name} must be a tuple or list, got {type(value).__name__}")
            object.__setattr__(self, name, tuple(value))
        _validate(self)

    @classmethod
    def new(cls) -> 'GameState':
        """Create the initial, empty position."""
        return cls()

    @property
    def player_to_move(self) -> Player:
        return Player.for_ply(self.ply_count)

    @property
    def last_player(self) -> Optional[Player]:
        """The player who made the most recent move, or None at the start."""
        if self.ply_count == 0:
            return None
        return Player.for_ply(self.ply_count - 1)

    @property
    def is_over(self) -> bool:
        return self.outcome.is_game_over()

    def board_for(self, player: Player) -> int:
        """The packed bitboard of one player."""
        return self.boards[player.value - 1]

    def to_grid(self) -> np.ndarray:
        """
        Get the position as a numpy array.

        Returns:
            ROWS x COLS int8 array, top row first, holding 0 for empty cells
            and the Player value for occupied ones
        """
        grid = np.zeros((ROWS, COLS), dtype=np.int8)
        for player in Player:
            for position in iter_set_bits(self.board_for(player)):
                row, col = bit_to_cell(position)
                grid[row, col] = player.value
        return grid

    def render(self) -> str:
        return render_board_ascii(self.to_grid())

    def __str__(self) -> str:
        return self.render()


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate(state: GameState) -> None:
    """Raise ValueError unless the fields describe a reachable stacking of pieces."""
    if not isinstance(state.outcome, Outcome):
        raise ValueError(f"outcome must be an Outcome, got {state.outcome!r}")

    if not _is_int(state.ply_count) or state.ply_count != len(state.move_log):
        raise ValueError(f"ply_count {state.ply_count} does not match "
                         f"{len(state.move_log)} logged moves")

    fills = state.column_fill_counts
    if len(fills) != COLS:
        raise ValueError(f"expected {COLS} column fill counts, got {len(fills)}")
    if not all(_is_int(fill) and 0 <= fill <= ROWS for fill in fills):
        raise ValueError(f"column fill counts must be integers in 0..{ROWS}, got {fills}")

    if len(state.boards) != 2 or not all(_is_int(board) and board >= 0 for board in state.boards):
        raise ValueError(f"boards must be two non-negative integers, got {state.boards}")

    yellow, red = state.boards
    if yellow & red:
        raise ValueError("yellow and red boards overlap")

    # Every column holds exactly fill[c] pieces, stacked from the bottom
    expected = sum(((1 << fill) - 1) << bit_index(col, 0) for col, fill in enumerate(fills))
    if yellow | red != expected:
        raise ValueError("boards do not match the column fill counts")

    if sum(fills) != state.ply_count:
        raise ValueError(f"{sum(fills)} pieces on the board but ply_count is {state.ply_count}")

    if tuple(state.move_log.count(col) for col in range(COLS)) != fills:
        raise ValueError(f"move log {list(state.move_log)} does not match the column fill counts")


@dataclass(frozen=True)
class MoveResult:
    """The state produced by a move submission, or the input state and an error."""
    state: GameState
    error: Optional[MoveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def legal_moves(state: GameState) -> List[int]:
    """
    Get the columns that still have room for a piece.

    The outcome is not consulted; use ``state.is_over`` to find out whether
    the game has already ended.

    Returns:
        Ascending list of open column indices
    """
    return [col for col in range(COLS)
            if not TOP_ROW_MASK & (1 << bit_index(col, state.column_fill_counts[col]))]


def is_legal_move(state: GameState, column) -> bool:
    """Check that a column is an integer naming an open column."""
    if isinstance(column, bool) or not isinstance(column, (int, np.integer)):
        return False
    return int(column) in legal_moves(state)


def connected_four(board: int) -> bool:
    """
    Check a packed bitboard for four pieces in a row in any direction.

    The first AND marks every cell that starts a pair along a direction, the
    second marks every pair that is followed by another pair two cells on,
    which is exactly a run of four.
    """
    for shift in DIRECTION_SHIFTS.values():
        pairs = board & (board >> shift)
        if pairs & (pairs >> (2 * shift)):
            return True
    return False


def winning_cells(state: GameState) -> List[Tuple[int, int]]:
    """
    Get the cells of the winning line(s) if the game has been won.

    Returns:
        Sorted list of (row, col) grid cells, or an empty list if no one has won
    """
    winner = state.outcome.winner
    if winner is None:
        return []

    board = state.board_for(winner)
    line = 0
    for shift in DIRECTION_SHIFTS.values():
        starts = board & (board >> shift) & (board >> (2 * shift)) & (board >> (3 * shift))
        if starts:
            line |= starts | (starts << shift) | (starts << (2 * shift)) | (starts << (3 * shift))

    return sorted(board_to_cells(line))


def _place(state: GameState, column: int) -> GameState:
    """Drop a piece for the player to move and settle the outcome."""
    mover = state.player_to_move
    fill = state.column_fill_counts[column]

    boards = list(state.boards)
    boards[mover.value - 1] |= 1 << bit_index(column, fill)

    fill_counts = list(state.column_fill_counts)
    fill_counts[column] = fill + 1

    if debug.is_enabled_for(DebugLevel.TRACE, "board"):
        debug.trace(f"{mover.name} drops into column {column} at height {fill}", "board")

    placed = replace(state,
                     boards=tuple(boards),
                     column_fill_counts=tuple(fill_counts),
                     move_log=state.move_log + (column,),
                     ply_count=state.ply_count + 1)

    return replace(placed, outcome=_detect_outcome(placed))


def _detect_outcome(state: GameState) -> Outcome:
    """Decide the outcome right after a piece has been placed."""
    mover = state.last_player
    if connected_four(state.board_for(mover)):
        debug.info(f"{mover.name} connects four after {state.ply_count} plies", "board")
        return Outcome.win_for(mover)

    if state.ply_count == MAX_PLIES:
        debug.info("Board is full, game ends in a draw", "board")
        return Outcome.DRAW

    return Outcome.UNDECIDED


def _check_move(state: GameState, column) -> Optional[MoveError]:
    if state.is_over:
        return MoveError.GAME_OVER
    if not is_legal_move(state, column):
        return MoveError.ILLEGAL_MOVE
    return None


def submit_move(state: GameState, column) -> MoveResult:
    """
    Submit a move for whoever's turn it is.

    Args:
        state: Current position
        column: Column to drop a piece into (0-indexed)

    Returns:
        MoveResult with the new position, or with the unchanged position and
        GAME_OVER / ILLEGAL_MOVE
    """
    error = _check_move(state, column)
    if error is not None:
        debug.debug(f"Rejected move {column!r}: {error}", "board")
        return MoveResult(state, error)

    return MoveResult(_place(state, int(column)))


def submit_moves(state: GameState, columns: Iterable) -> MoveResult:
    """
    Submit several moves at once.

    The moves are applied in order. If any of them is rejected, none of them
    are played and the original position is returned with ILLEGAL_MOVES.

    Args:
        state: Current position
        columns: Columns to play, in order

    Returns:
        MoveResult with the final position, or with the original one and an error
    """
    current = state
    for index, column in enumerate(columns):
        error = _check_move(current, column)
        if error is not None:
            debug.debug(f"Rejected batch at move {index} ({column!r}): {error}", "board")
            return MoveResult(state, MoveError.ILLEGAL_MOVES)
        current = _place(current, int(column))

    return MoveResult(current)
