"""
Tests for game sessions: new game, moves, undo and terminal states.
"""

from itertools import cycle
from unittest import TestCase, main

import numpy as np

from game2048.addons.config import GameConfig
from game2048.addons.errors import InvalidBoard, InvalidDirection
from game2048.core.gameboard import has_reached_target
from game2048.core.gamemove import Direction, legal_actions
from game2048.envs.session import (
    Session,
    SessionStatus,
    apply_move,
    can_undo,
    new_game,
    restart,
    resume_game,
    undo,
)

# ##: Board one right move away from a stuck checkerboard.
ALMOST_STUCK = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [2, 4, 2, 0]])
STUCK = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]])


class FixedSource:
    """Random source replaying fixed sequences."""

    def __init__(self, ints=(0,), floats=(0.5,)):
        self._ints = cycle(ints)
        self._floats = cycle(floats)

    def random(self) -> float:
        return next(self._floats)

    def integers(self, high: int) -> int:
        return min(next(self._ints), high - 1)


class TestNewGame(TestCase):
    """Test session creation."""

    def test_initial_state(self):
        """A new game has two tiles, no score and no history."""
        session = new_game(rng=42)
        self.assertEqual(np.count_nonzero(session.board), 2)
        self.assertTrue(np.all(np.isin(session.board[session.board != 0], [2, 4])))
        self.assertEqual(session.score, 0)
        self.assertEqual(session.best_score, 0)
        self.assertFalse(session.can_undo)
        self.assertFalse(session.game_over)
        self.assertFalse(session.won)
        self.assertEqual(session.status, SessionStatus.PLAYING)

    def test_injected_source(self):
        """Sequential spawns follow the random source."""
        session = new_game(rng=FixedSource())
        np.testing.assert_array_equal(session.board[0], [2, 2, 0, 0])
        self.assertEqual(np.count_nonzero(session.board), 2)

    def test_size_and_tiles(self):
        """Size and tile count can be overridden."""
        session = new_game(size=6, initial_tiles=5, rng=1)
        self.assertEqual(session.board.shape, (6, 6))
        self.assertEqual(session.size, 6)
        self.assertEqual(np.count_nonzero(session.board), 5)
        self.assertEqual(session.config.size, 6)

    def test_seed_reproducibility(self):
        """Same seed produces identical games."""
        np.testing.assert_array_equal(new_game(rng=3).board, new_game(rng=3).board)

    def test_board_is_read_only(self):
        """The session board cannot be modified in place."""
        session = new_game(rng=0)
        with self.assertRaises(ValueError):
            session.board[0, 0] = 8

    def test_invalid_config(self):
        """Out of range configuration values are rejected."""
        for kwargs in ({'size': 1}, {'initial_tiles': 0}, {'chance_four': 1.5}, {'target': 3}, {'history_depth': -1}):
            with self.subTest(**kwargs), self.assertRaises(ValueError):
                GameConfig(**kwargs)


class TestApplyMove(TestCase):
    """Test move application."""

    def setUp(self):
        """Start from ``[2, 2, 0, 0]`` on the first row."""
        self.session = new_game(rng=FixedSource())

    def test_accepted_move(self):
        """An accepted move merges, scores, spawns and records history."""
        session = apply_move(self.session, Direction.LEFT)
        np.testing.assert_array_equal(session.board[0], [4, 2, 0, 0])
        self.assertEqual(session.score, 4)
        self.assertEqual(session.best_score, 4)
        self.assertTrue(session.can_undo)
        self.assertEqual(session.last_move.score_gained, 4)
        self.assertEqual(session.last_spawn.position, (0, 1))
        self.assertEqual(session.last_spawn.value, 2)

    def test_session_is_not_modified(self):
        """Transitions return a new session."""
        board = self.session.board.copy()
        apply_move(self.session, 'left')
        np.testing.assert_array_equal(self.session.board, board)
        self.assertEqual(self.session.score, 0)
        self.assertFalse(self.session.can_undo)

    def test_noop_move(self):
        """A move that changes nothing returns the same session."""
        self.assertIs(apply_move(self.session, Direction.UP), self.session)

    def test_invalid_direction(self):
        """Unknown directions are rejected."""
        with self.assertRaises(InvalidDirection):
            apply_move(self.session, 'diagonal')

    def test_rng_override(self):
        """An explicit random source is used for that move only."""
        session = apply_move(self.session, Direction.LEFT, rng=FixedSource(ints=(14,), floats=(0.0,)))
        self.assertEqual(session.last_spawn.position, (3, 3))
        self.assertEqual(session.last_spawn.value, 4)

    def test_game_over(self):
        """A move leaving no possible move ends the game, and later moves are rejected."""
        session = resume_game(ALMOST_STUCK, score=100, rng=FixedSource(floats=(0.05,)))
        self.assertFalse(session.game_over)

        with self.assertLogs('game2048.envs.session', level='INFO') as logs:
            session = apply_move(session, Direction.RIGHT)
        np.testing.assert_array_equal(session.board, STUCK)
        self.assertTrue(session.game_over)
        self.assertEqual(session.status, SessionStatus.GAME_OVER)
        self.assertIn('Game over', logs.output[0])

        for direction in Direction:
            self.assertIs(apply_move(session, direction), session)

    def test_win_does_not_end_game(self):
        """Reaching the target sets the flag while play continues."""
        board = np.zeros((4, 4), dtype=int)
        board[0, :2] = 1024
        session = resume_game(board, rng=FixedSource(ints=(5,)))
        session = apply_move(session, Direction.LEFT)
        self.assertTrue(session.won)
        self.assertFalse(session.game_over)
        self.assertEqual(session.status, SessionStatus.WON)
        self.assertEqual(session.score, 2048)

        session = apply_move(session, Direction.DOWN)
        self.assertTrue(session.won)
        self.assertEqual(session.board[3, 0], 2048)

    def test_custom_target(self):
        """The target tile comes from the configuration."""
        board = np.zeros((4, 4), dtype=int)
        board[0, :2] = 8
        session = resume_game(board, config=GameConfig(target=16), rng=0)
        self.assertTrue(apply_move(session, Direction.LEFT).won)


class TestUndo(TestCase):
    """Test undo."""

    def test_undo_restores_previous_state(self):
        """Undo cancels exactly one accepted move, spawned tile included."""
        session = new_game(rng=11)
        for direction in (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN):
            moved = apply_move(session, direction)
            if moved is session:
                continue
            restored = undo(moved)
            np.testing.assert_array_equal(restored.board, session.board)
            self.assertEqual(restored.score, session.score)
            self.assertEqual(restored.best_score, moved.best_score)

    def test_undo_without_history(self):
        """Undo on a fresh session is a no-op."""
        session = new_game(rng=0)
        self.assertFalse(can_undo(session))
        self.assertIs(undo(session), session)

    def test_undo_leaves_game_over(self):
        """Undo is the way out of a finished game."""
        session = resume_game(ALMOST_STUCK, rng=FixedSource(floats=(0.05,)))
        finished = apply_move(session, Direction.RIGHT)
        self.assertTrue(finished.game_over)

        restored = undo(finished)
        self.assertFalse(restored.game_over)
        self.assertEqual(restored.status, SessionStatus.PLAYING)
        np.testing.assert_array_equal(restored.board, ALMOST_STUCK)
        self.assertIsNone(restored.last_move)

    def test_undo_recomputes_won(self):
        """Undoing the winning move clears the flag."""
        board = np.zeros((4, 4), dtype=int)
        board[0, :2] = 1024
        session = apply_move(resume_game(board, rng=0), Direction.LEFT)
        self.assertTrue(session.won)
        self.assertFalse(undo(session).won)

    def test_history_depth(self):
        """Only the configured number of moves can be undone."""
        session = new_game(config=GameConfig(history_depth=2), rng=5)
        states = [session]
        for direction in cycle(Direction):
            if len(states) == 4:
                break
            moved = apply_move(states[-1], direction)
            if moved is not states[-1]:
                states.append(moved)

        session = undo(undo(states[-1]))
        np.testing.assert_array_equal(session.board, states[1].board)
        self.assertFalse(session.can_undo)
        self.assertIs(undo(session), session)


class TestSessionLifecycle(TestCase):
    """Test restart, resume and score bookkeeping."""

    def test_best_score_is_monotonic(self):
        """best_score never decreases across moves, undos and restarts."""
        rng = np.random.default_rng(2)
        session = new_game(rng=rng)
        best = session.best_score
        for step in range(400):
            if step % 7 == 6:
                session = undo(session)
            elif session.game_over or step % 97 == 96:
                session = restart(session)
            else:
                session = apply_move(session, int(rng.integers(4)))
            self.assertGreaterEqual(session.best_score, best)
            self.assertGreaterEqual(session.best_score, session.score)
            best = session.best_score

    def test_restart(self):
        """Restart keeps configuration and best score, and clears the rest."""
        session = apply_move(new_game(rng=FixedSource(), config=GameConfig(size=5)), Direction.LEFT)
        fresh = restart(session)
        self.assertEqual(fresh.score, 0)
        self.assertEqual(fresh.best_score, session.best_score)
        self.assertEqual(fresh.config, session.config)
        self.assertFalse(fresh.can_undo)
        self.assertEqual(np.count_nonzero(fresh.board), 2)

    def test_resume_game(self):
        """A session rebuilt from persisted fields matches the original."""
        session = apply_move(new_game(rng=FixedSource()), Direction.LEFT)
        data = session.to_dict()
        resumed = resume_game(data['board'], score=data['score'], best_score=data['best_score'])
        np.testing.assert_array_equal(resumed.board, session.board)
        self.assertEqual(resumed.score, session.score)
        self.assertEqual(resumed.best_score, session.best_score)
        self.assertFalse(resumed.can_undo)

    def test_resume_stuck_board(self):
        """Terminal flags are recomputed on resume."""
        session = resume_game(STUCK, score=10, best_score=5)
        self.assertTrue(session.game_over)
        self.assertEqual(session.best_score, 10)

    def test_resume_invalid(self):
        """Malformed boards and scores are rejected."""
        with self.assertRaises(InvalidBoard):
            resume_game([[2, 0], [0, 0]])
        with self.assertRaises(InvalidBoard):
            resume_game([[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 7]])
        with self.assertRaises(ValueError):
            resume_game(np.zeros((4, 4), dtype=int), score=-1)

    def test_to_dict_and_str(self):
        """Plain-data and text views of a session."""
        session = new_game(rng=FixedSource())
        data = session.to_dict()
        self.assertEqual(data['board'][0], [2, 2, 0, 0])
        self.assertEqual(data['score'], 0)
        self.assertIn('score=0', str(session))
        self.assertIsInstance(session, Session)


class TestSessionIsolation(TestCase):
    """Test that sessions do not share mutable state."""

    def test_replayed_move_is_identical(self):
        """The same move on the same session always spawns the same tile."""
        session = new_game(rng=1)
        direction = legal_actions(session.board)[0]
        first, second = apply_move(session, direction), apply_move(session, direction)
        np.testing.assert_array_equal(first.board, second.board)
        self.assertEqual(first.last_spawn.position, second.last_spawn.position)
        self.assertEqual(first.last_spawn.value, second.last_spawn.value)

    def test_sibling_sessions_do_not_interfere(self):
        """Playing on a derived session leaves the draws of its parent unchanged."""
        session = new_game(rng=4)
        expected = apply_move(session, legal_actions(session.board)[0])

        child = session
        for _ in range(10):
            legal = legal_actions(child.board)
            if not legal:
                break
            child = apply_move(child, legal[-1])

        replayed = apply_move(session, legal_actions(session.board)[0])
        np.testing.assert_array_equal(replayed.board, expected.board)

    def test_restart_is_replayable(self):
        """Restarting the same session twice gives the same board."""
        session = new_game(rng=8)
        np.testing.assert_array_equal(restart(session).board, restart(session).board)

    def test_caller_generator_not_advanced(self):
        """A generator passed by the caller is copied, not consumed."""
        generator = np.random.default_rng(3)
        state = generator.bit_generator.state
        session = new_game(rng=generator)
        apply_move(session, legal_actions(session.board)[0])
        self.assertEqual(generator.bit_generator.state, state)

    def test_rng_override_keeps_session_source(self):
        """A one-off random source does not replace the session's own."""
        session = new_game(rng=FixedSource())
        moved = apply_move(session, Direction.LEFT, rng=np.random.default_rng(0))
        self.assertIs(moved.rng, session.rng)


class TestSessionValidation(TestCase):
    """Test board validation on direct construction."""

    def test_constructor_rejects_non_tiles(self):
        """Values that are not powers of two are rejected."""
        with self.assertRaises(InvalidBoard):
            Session(board=[[3, 0], [0, 0]], config=GameConfig(size=2))

    def test_constructor_rejects_size_mismatch(self):
        """The board must match the configured size."""
        with self.assertRaises(InvalidBoard):
            Session(board=[[2, 0], [0, 0]])
        with self.assertRaises(InvalidBoard):
            Session(board=np.zeros((5, 5), dtype=int), config=GameConfig(size=4))

    def test_constructor_accepts_valid_board(self):
        """A valid board is stored as a read-only copy."""
        board = np.array([[2, 0], [0, 4]])
        session = Session(board=board, config=GameConfig(size=2))
        np.testing.assert_array_equal(session.board, board)
        self.assertFalse(session.board.flags.writeable)

    def test_default_target_matches_board_check(self):
        """The configured default target is the one used by the board check."""
        board = np.zeros((4, 4), dtype=int)
        board[0, 0] = GameConfig().target
        self.assertTrue(has_reached_target(board))
        board[0, 0] = GameConfig().target // 2
        self.assertFalse(has_reached_target(board))


if __name__ == '__main__':
    main()
