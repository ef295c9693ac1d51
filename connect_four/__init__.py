"""
connect_four - Connect Four rules engine

This package provides a compact bitboard implementation of the Connect Four
rules (move validation, win and draw detection) and a session object that
serializes access to a single game.
"""

# Version number
__version__ = '0.1.4'
