"""
env.py - Gymnasium environment over a Connect Four game session

ConnectFourEnv lets reinforcement-learning code drive a GameSession through
the standard reset/step interface. Both players move through the same
environment; rewards are given from the point of view of the player who
just moved.
"""

from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from connect_four.debug import debug
from connect_four.game.board import GameState, legal_moves, winning_cells
from connect_four.game.session import GameSession
from connect_four.utils import ROWS, COLS, Outcome


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    Observations are the ROWS x COLS grid (0 empty, 1 yellow, 2 red) with the
    top row first. An illegal action leaves the game unchanged and ends the
    episode as truncated.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, render_mode: Optional[str] = None, session: Optional[GameSession] = None):
        debug.debug("Initializing ConnectFourEnv", "env")

        self.action_space = spaces.Discrete(COLS)
        self.observation_space = spaces.Box(low=0, high=2, shape=(ROWS, COLS), dtype=np.int8)

        self.session = session if session is not None else GameSession()
        self.render_mode = render_mode

        self.reward_win = 1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None,
              options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        """Start a new game and return the first observation."""
        super().reset(seed=seed)
        self.session.restart()

        if self.render_mode == "human":
            self.render()

        state = self.session.state
        return state.to_grid(), self._get_info(state)

    def step(self, action) -> Tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        """
        Play one column for the player to move.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        result = self.session.submit(action)
        state = result.state

        if not result.ok:
            debug.warning(f"Invalid action {action!r}: {result.error}", "env")
            info = self._get_info(state)
            info['invalid_move'] = True
            info['error'] = result.error.value
            return state.to_grid(), self.reward_invalid_move, False, True, info

        outcome = result.snapshot.outcome
        if outcome == Outcome.DRAW:
            reward, terminated = self.reward_draw, True
        elif outcome.is_game_over():
            reward, terminated = self.reward_win, True
        else:
            reward, terminated = self.reward_step, False

        if terminated:
            debug.info(f"Episode finished: {outcome.value}", "env")

        if self.render_mode == "human":
            print(state.render())

        return state.to_grid(), reward, terminated, False, self._get_info(state)

    def render(self) -> Optional[str]:
        if self.render_mode == "ascii":
            return self.session.state.render()
        if self.render_mode == "human":
            print(self.session.state.render())
        return None

    def action_masks(self) -> np.ndarray:
        """Boolean mask of the columns that still have room."""
        mask = np.zeros(COLS, dtype=bool)
        mask[self.session.legal_moves()] = True
        return mask

    def _get_info(self, state: GameState) -> Dict[str, Any]:
        legal = legal_moves(state)
        return {
            'legal_moves': legal,
            'num_legal_moves': len(legal),
            'player_to_move': state.player_to_move.value,
            'outcome': state.outcome.value,
            'moves_made': state.ply_count,
            'winning_cells': winning_cells(state),
        }
