"""
cli.py - Command-line tools for the Connect Four rules engine

This module provides a CLI for replaying a list of moves through a game
session and for benchmarking the engine.
"""

import argparse
import random
import sys
from typing import List, Optional

from connect_four.debug import debug, DebugLevel
from connect_four.game.board import (GameState, connected_four, legal_moves,
                                     submit_move, winning_cells)
from connect_four.game.session import GameSession
from connect_four.utils import Player


class SimpleCLI:
    """Simple command-line interface for the Connect Four engine."""

    def __init__(self, argv: Optional[List[str]] = None):
        self.argv = argv
        self.args = None
        self.session = GameSession()

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Connect Four rules engine')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level (ignored with --debug)')
        parser.add_argument('--log-file', default=None, help='Also write log messages to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        replay_parser = subparsers.add_parser('replay', help='Play a list of moves and show the result')
        replay_parser.add_argument('moves', nargs='*', type=int, help='Columns to play (0-6)')
        replay_parser.add_argument('--step', action='store_true',
                                   help='Submit the moves one at a time instead of as one batch')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark the engine')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of random games to play')
        benchmark_parser.add_argument('--seed', type=int, default=None, help='Random seed')

        return parser

    def parse_args(self) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(self.argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)

        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

    def run(self) -> int:
        """Run the selected command and return the exit status."""
        if not self.args:
            self.parse_args()

        if self.args.command == 'replay':
            return self.replay()
        if self.args.command == 'benchmark':
            return self.benchmark()

        print("Please specify a command. Use --help for options.")
        return 1

    def replay(self) -> int:
        """Submit the given moves to a fresh session and print the position."""
        self.session.restart()
        accepted = True

        if self.args.step:
            for column in self.args.moves:
                result = self.session.submit(column)
                if not result.ok:
                    print(f"Move {column} rejected: {result.error}")
                    accepted = False
                    break
        else:
            result = self.session.submit(self.args.moves)
            if not result.ok:
                print(f"Moves rejected: {result.error}")
                accepted = False

        state = self.session.state
        print(state.render())
        print(f"Moves: {list(state.move_log)}")
        print(f"Outcome: {state.outcome.value}")

        if state.is_over:
            cells = winning_cells(state)
            if cells:
                print(f"Winning line: {cells}")
        else:
            print(f"To move: {state.player_to_move.name.lower()}, "
                  f"legal moves: {self.session.legal_moves()}")

        return 0 if accepted else 1

    def benchmark(self) -> int:
        """Benchmark move submission and win detection on random games."""
        iterations = self.args.iterations
        if iterations <= 0:
            print("Iterations must be positive.")
            return 1

        rng = random.Random(self.args.seed)
        print(f"Running benchmark with {iterations} games...")

        finished: List[GameState] = []
        total_moves = 0
        debug.start_timer("random_games")
        for _ in range(iterations):
            state = GameState.new()
            while not state.is_over:
                state = submit_move(state, rng.choice(legal_moves(state))).state
                total_moves += 1
            finished.append(state)
        games_time = debug.end_timer("random_games")
        print(f"Played {iterations} games with {total_moves} moves: {games_time:.6f} seconds total, "
              f"{games_time / total_moves * 1000:.6f} ms per move")

        debug.start_timer("win_check")
        for state in finished:
            for player in Player:
                connected_four(state.board_for(player))
        check_time = debug.end_timer("win_check")
        checks = len(finished) * len(Player)
        print(f"Performed {checks} win checks: {check_time:.6f} seconds total, "
              f"{check_time / checks * 1000:.6f} ms per check")

        yellow = sum(1 for state in finished if state.outcome.winner == Player.YELLOW)
        red = sum(1 for state in finished if state.outcome.winner == Player.RED)
        print(f"Yellow wins: {yellow}, Red wins: {red}, Draws: {iterations - yellow - red}")

        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    return SimpleCLI(argv).run()


if __name__ == "__main__":
    sys.exit(main())
