# test_session.py
import threading

import numpy as np
import pytest

from connect_four.game.board import GameState, MoveError, submit_moves
from connect_four.game.session import GameSession, GameSnapshot, SessionResult
from connect_four.utils import COLS, Outcome


# ---------------------------------------------------------
# submit
# ---------------------------------------------------------
def test_submit_single_moves(session):
    assert session.submit(4) == SessionResult(snapshot=GameSnapshot((4,), Outcome.UNDECIDED))
    assert session.submit(5) == SessionResult(snapshot=GameSnapshot((4, 5), Outcome.UNDECIDED))


def test_submit_list_of_moves(session):
    result = session.submit([4, 5])

    assert result.ok
    assert result.snapshot.moves == (4, 5)
    assert result.snapshot.outcome == Outcome.UNDECIDED


def test_submit_tuple_of_moves(session):
    assert session.submit((0, 1, 0)).snapshot.moves == (0, 1, 0)


def test_rejected_batch_leaves_session_unchanged(session):
    session.submit(3)

    result = session.submit([4, 7])

    assert not result.ok
    assert result.error == MoveError.ILLEGAL_MOVES
    assert result.snapshot is None
    assert session.inspect().moves == (3,)


def test_win_then_game_over(session):
    result = session.submit([1, 1, 2, 2, 3, 3, 4])

    assert result.snapshot == GameSnapshot((1, 1, 2, 2, 3, 3, 4), Outcome.YELLOW_WINS)
    assert session.submit(4).error == MoveError.GAME_OVER


def test_seventh_move_in_a_column_is_illegal(session):
    session.submit([0] * 6)

    assert session.submit(0).error == MoveError.ILLEGAL_MOVE
    assert session.inspect().moves == (0,) * 6


@pytest.mark.parametrize("payload", ["3", None, 2.5, {"column": 3}, True, np.array(2.5)])
def test_unsupported_payloads_are_illegal(session, payload):
    result = session.submit(payload)

    assert result.error == MoveError.ILLEGAL_MOVE
    assert session.state == GameState.new()


def test_zero_dimensional_array_is_a_single_move(session):
    result = session.submit(np.array(3))

    assert result.ok
    assert result.snapshot.moves == (3,)


def test_array_of_moves_is_a_batch(session):
    assert session.submit(np.array([4, 5])).snapshot.moves == (4, 5)
    assert session.submit(np.array([0, 9])).error == MoveError.ILLEGAL_MOVES
    assert session.inspect().moves == (4, 5)


def test_result_carries_the_position_it_describes(session):
    accepted = session.submit([2, 3])
    rejected = session.submit(7)

    assert accepted.state.move_log == (2, 3)
    assert rejected.state is accepted.state
    assert rejected.state is session.state


# ---------------------------------------------------------
# queries
# ---------------------------------------------------------
def test_legal_moves(session):
    assert session.legal_moves() == [0, 1, 2, 3, 4, 5, 6]

    session.submit([3, 3, 3, 3, 3, 3])

    assert session.legal_moves() == [0, 1, 2, 4, 5, 6]


def test_inspect_does_not_change_state(session):
    session.submit([4, 5, 4])
    before = session.state

    assert session.inspect() == GameSnapshot((4, 5, 4), Outcome.UNDECIDED)
    assert session.state is before


def test_inspect_finished_game(session):
    session.submit([4, 5, 4, 5, 4, 5])
    session.submit(4)

    assert session.inspect() == GameSnapshot((4, 5, 4, 5, 4, 5, 4), Outcome.YELLOW_WINS)


def test_session_can_start_from_a_position():
    start = submit_moves(GameState.new(), [2, 3]).state
    session = GameSession(start)

    assert session.inspect().moves == (2, 3)


# ---------------------------------------------------------
# restart
# ---------------------------------------------------------
def test_restart_midgame(session):
    session.submit(4)

    assert session.restart() is True
    assert session.submit(4).snapshot.moves == (4,)


def test_restart_finished_game(session):
    session.submit([1, 1, 2, 2, 3, 3, 4])

    session.restart()

    assert session.inspect() == GameSnapshot((), Outcome.UNDECIDED)
    assert session.submit(0).ok


def test_sessions_are_independent():
    first, second = GameSession(), GameSession()

    first.submit([0, 1])

    assert second.inspect().moves == ()


# ---------------------------------------------------------
# concurrency
# ---------------------------------------------------------
def test_concurrent_submits_produce_a_linear_history(session):
    accepted = []
    accepted_lock = threading.Lock()
    barrier = threading.Barrier(COLS)

    def worker(column):
        barrier.wait()
        for _ in range(8):
            if session.submit(column).ok:
                with accepted_lock:
                    accepted.append(column)

    threads = [threading.Thread(target=worker, args=(col,)) for col in range(COLS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    state = session.state
    assert state.ply_count == len(accepted) == len(state.move_log)
    assert sorted(state.move_log) == sorted(accepted)
    assert bin(state.boards[0]).count("1") + bin(state.boards[1]).count("1") == state.ply_count
    for col in range(COLS):
        assert state.column_fill_counts[col] == state.move_log.count(col)

    # Replaying the recorded history reaches the same position
    assert submit_moves(GameState.new(), state.move_log).state == state
