"""
connect_four.game - Core game mechanics for Connect Four

This package contains the packed board and move rules, the session wrapper
holding one game, and a Gymnasium environment built on the session.
"""

from connect_four.game.board import (GameState, MoveError, MoveResult, submit_move,
                                     submit_moves, legal_moves, is_legal_move,
                                     connected_four, winning_cells)
from connect_four.game.session import GameSession, GameSnapshot, SessionResult

__all__ = ['GameState', 'MoveError', 'MoveResult', 'submit_move', 'submit_moves',
           'legal_moves', 'is_legal_move', 'connected_four', 'winning_cells',
           'GameSession', 'GameSnapshot', 'SessionResult']
