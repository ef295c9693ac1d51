"""
utils.py - Constants, enumerations and bit helpers for Connect Four

This module provides the board geometry, the player and outcome enumerations,
the shift table used for four-in-a-row detection and a few helpers for moving
between bit positions and (row, column) grid cells.
"""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

# Game constants
ROWS = 6
COLS = 7
MAX_PLIES = ROWS * COLS

# Each column takes ROWS + 1 bits; the extra top bit is never set by a piece
COLUMN_STRIDE = ROWS + 1

# Bit layout of the unused top row of every column
TOP_ROW_MASK = sum(1 << (col * COLUMN_STRIDE + ROWS) for col in range(COLS))


class Player(Enum):
    """The two players. Yellow always moves first."""
    YELLOW = 1
    RED = 2

    def other(self) -> 'Player':
        """Get the other player."""
        return Player.RED if self == Player.YELLOW else Player.YELLOW

    @classmethod
    def for_ply(cls, ply: int) -> 'Player':
        """The player who makes the given (zero-based) ply."""
        return cls.YELLOW if ply & 1 == 0 else cls.RED

    def __str__(self):
        return "X" if self == Player.YELLOW else "O"


class Outcome(Enum):
    """Enumeration representing the game outcome."""
    UNDECIDED = "undecided"
    YELLOW_WINS = "yellow_wins"
    RED_WINS = "red_wins"
    DRAW = "draw"

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != Outcome.UNDECIDED

    @classmethod
    def win_for(cls, player: Player) -> 'Outcome':
        return cls.YELLOW_WINS if player == Player.YELLOW else cls.RED_WINS

    @property
    def winner(self) -> Optional[Player]:
        if self == Outcome.YELLOW_WINS:
            return Player.YELLOW
        if self == Outcome.RED_WINS:
            return Player.RED
        return None


class Direction(Enum):
    """Line directions, valued by their shift distance in the packed board."""
    VERTICAL = 1
    HORIZONTAL = COLUMN_STRIDE
    DIAGONAL_DOWN = COLUMN_STRIDE - 1  # from top-left to bottom-right
    DIAGONAL_UP = COLUMN_STRIDE + 1  # from bottom-left to top-right


# Shift distances checked by the win detector, in order
DIRECTION_SHIFTS: Dict[Direction, int] = {direction: direction.value for direction in Direction}


def bit_index(column: int, row: int) -> int:
    """
    Bit position of a cell in a packed board.

    Args:
        column: Column index (0-6)
        row: Row counted from the bottom of the column (0-5)
    """
    return column * COLUMN_STRIDE + row


def iter_set_bits(board: int) -> Iterator[int]:
    """Yield the positions of the set bits of a packed board, lowest first."""
    while board:
        low = board & -board
        yield low.bit_length() - 1
        board ^= low


def bit_to_cell(position: int) -> Tuple[int, int]:
    """
    Convert a bit position to a (row, col) grid cell.

    Grid rows are counted from the top, as in the rendered board.
    """
    column, height = divmod(position, COLUMN_STRIDE)
    return ROWS - 1 - height, column


def board_to_cells(board: int) -> List[Tuple[int, int]]:
    """All (row, col) grid cells occupied in a packed board."""
    return [bit_to_cell(position) for position in iter_set_bits(board)]


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a grid as ASCII art.

    Args:
        grid: ROWS x COLS array with 0 for empty and Player values for pieces

    Returns:
        ASCII representation of the board
    """
    symbols = {0: " ", Player.YELLOW.value: "X", Player.RED.value: "O"}
    border = "|" + "-" * (COLS * 2 - 1) + "|"

    lines = [border]
    for row in range(ROWS):
        lines.append("|" + " ".join(symbols[int(cell)] for cell in grid[row]) + "|")
    lines.append(border)
    lines.append("|" + " ".join(str(col) for col in range(COLS)) + "|")

    return "\n".join(lines)
