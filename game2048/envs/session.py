"""
Game session of the 2048 engine.

A session is an immutable value: every transition (``new_game``, ``apply_move``, ``undo``, ``restart``)
returns a new session and leaves its argument untouched. A numpy random generator held by a session is
never advanced in place: transitions that draw tiles work on a copy and store it in the new session, so
replaying a transition on the same session gives the same result. Other random sources cannot be copied
and are shared between a session and the sessions derived from it. Callers sharing a session between
threads must serialize the transitions themselves.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from numpy import ndarray

from game2048.addons.config import GameConfig
from game2048.addons.types import MoveResult, SpawnResult
from game2048.core.gameboard import can_move, empty_board, has_reached_target, max_tile, move, validate_board
from game2048.core.gamemove import Direction
from game2048.core.spawn import RandomSource, clone_rng, fill_cells, spawn_tile
from game2048.envs.history import History, Snapshot
from game2048.utils.render import render_board

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """
    Status of a session.

    PLAYING: moves are possible and the target tile has not been reached.
    WON: the target tile has been reached; play may continue.
    GAME_OVER: no move changes the board; only ``undo`` or a new game leave this status.
    """

    PLAYING = 'playing'
    WON = 'won'
    GAME_OVER = 'game_over'


def _frozen(board, size: int) -> ndarray:
    """Return a validated, read-only int64 copy of a board."""
    state = validate_board(board, size=size)
    state.flags.writeable = False
    return state


@dataclass(frozen=True, eq=False)
class Session:
    """
    State of a game: board, scores, undo history and terminal flags.

    Attributes
    ----------
    board : ndarray
        Current board, read-only. Validated on construction against ``config.size``, raising
        ``InvalidBoard`` when malformed.
    score : int
        Score of the current game.
    best_score : int
        Best score seen, never decreases.
    history : History
        Snapshots of the states before the last accepted moves.
    game_over : bool
        True when no move changes the board.
    won : bool
        True once a tile reached the configured target.
    config : GameConfig
        Game configuration.
    rng : RandomSource
        Random source of the tile spawns.
    last_move : MoveResult, optional
        Result of the move that produced this session.
    last_spawn : SpawnResult, optional
        Tile spawned after that move.
    """

    board: ndarray
    score: int = 0
    best_score: int = 0
    history: History | None = None
    game_over: bool = False
    won: bool = False
    config: GameConfig = field(default_factory=GameConfig)
    rng: RandomSource | None = field(default=None, repr=False)
    last_move: MoveResult | None = field(default=None, repr=False)
    last_spawn: SpawnResult | None = field(default=None, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'board', _frozen(self.board, self.config.size))
        if self.history is None:
            object.__setattr__(self, 'history', History(self.config.history_depth))
        if self.rng is None:
            object.__setattr__(self, 'rng', clone_rng())

    @property
    def status(self) -> SessionStatus:
        """Current status, GAME_OVER taking precedence over WON."""
        if self.game_over:
            return SessionStatus.GAME_OVER
        if self.won:
            return SessionStatus.WON
        return SessionStatus.PLAYING

    @property
    def can_undo(self) -> bool:
        """Whether ``undo`` would restore a previous state."""
        return len(self.history) > 0

    @property
    def max_tile(self) -> int:
        """Largest tile on the board."""
        return max_tile(self.board)

    @property
    def size(self) -> int:
        """Dimension of the board."""
        return self.board.shape[0]

    def to_dict(self) -> dict[str, Any]:
        """
        Plain-data view of the fields a host may persist.

        ``resume_game(**{k: d[k] for k in ('board', 'score', 'best_score')})`` rebuilds an equivalent session.
        """
        return {
            'board': self.board.tolist(),
            'score': self.score,
            'best_score': self.best_score,
            'won': self.won,
            'game_over': self.game_over,
        }

    def __str__(self) -> str:
        return f'{render_board(self.board)}\nscore={self.score} best={self.best_score} status={self.status.value}'


def new_game(
    size: int | None = None,
    initial_tiles: int | None = None,
    rng: RandomSource | int | None = None,
    config: GameConfig | None = None,
    best_score: int = 0,
) -> Session:
    """
    Start a new game.

    Parameters
    ----------
    size : int, optional
        Board dimension, overrides ``config.size``.
    initial_tiles : int, optional
        Number of tiles to spawn, overrides ``config.initial_tiles``.
    rng : RandomSource, int or None, optional
        Random source or seed for every spawn of the session.
    config : GameConfig, optional
        Game configuration, default ``GameConfig()``.
    best_score : int, optional
        Best score carried over from previous games.

    Returns
    -------
    Session
        A session with an empty history and ``initial_tiles`` tiles on the board.
    """
    config = config or GameConfig()
    overrides = {key: value for key, value in (('size', size), ('initial_tiles', initial_tiles)) if value is not None}
    if overrides:
        config = replace(config, **overrides)

    generator = clone_rng(rng)
    board, _ = fill_cells(empty_board(config.size), config.initial_tiles, config.chance_four, generator)

    _logger.debug('New %dx%d game', config.size, config.size)
    return Session(
        board=board,
        best_score=best_score,
        won=has_reached_target(board, config.target),
        game_over=not can_move(board),
        config=config,
        rng=generator,
    )


def restart(session: Session) -> Session:
    """Start a new game with the configuration, random source and best score of ``session``."""
    return new_game(config=session.config, rng=session.rng, best_score=session.best_score)


def resume_game(
    board,
    score: int = 0,
    best_score: int = 0,
    config: GameConfig | None = None,
    rng: RandomSource | int | None = None,
) -> Session:
    """
    Rebuild a session from persisted fields.

    Parameters
    ----------
    board : array_like
        Board to resume from.
    score : int, optional
        Score of the game.
    best_score : int, optional
        Best score, raised to ``score`` if lower.
    config : GameConfig, optional
        Game configuration; the board must match its size.
    rng : RandomSource, int or None, optional
        Random source or seed.

    Returns
    -------
    Session
        A session with an empty history and terminal flags recomputed from the board.

    Raises
    ------
    InvalidBoard
        If the board is malformed or its size differs from ``config.size``.
    ValueError
        If a score is negative.
    """
    config = config or GameConfig()
    state = validate_board(board, size=config.size)
    if score < 0 or best_score < 0:
        raise ValueError(f'Scores must be >= 0, got score={score} best_score={best_score}')

    return Session(
        board=state,
        score=score,
        best_score=max(best_score, score),
        won=has_reached_target(state, config.target),
        game_over=not can_move(state),
        config=config,
        rng=clone_rng(rng),
    )


def apply_move(session: Session, direction, rng: RandomSource | int | None = None) -> Session:
    """
    Play a move.

    Parameters
    ----------
    session : Session
        The current session.
    direction : Direction, str or int
        Direction of the move.
    rng : RandomSource, int or None, optional
        Random source for this spawn only; the session's own source is used otherwise.

    Returns
    -------
    Session
        The session after the move and the tile spawn, or ``session`` itself when the game is over or
        the move changes nothing.

    Raises
    ------
    InvalidDirection
        If the direction is unknown.

    Notes
    -----
    Reaching the target sets ``won`` but does not end the game; only the absence of moves does.
    """
    direction = Direction.parse(direction)
    if session.game_over:
        _logger.debug('Move %s rejected: game is over', direction.value)
        return session

    result = move(session.board, direction)
    if not result.moved:
        _logger.debug('Move %s changes nothing', direction.value)
        return session

    config = session.config
    generator = clone_rng(session.rng if rng is None else rng)
    spawn = spawn_tile(result.board, config.chance_four, generator)
    score = session.score + result.score_gained
    won = session.won or has_reached_target(spawn.board, config.target)
    game_over = not can_move(spawn.board)

    _logger.debug('Move %s: +%d (score %d), spawned %s at %s', direction.value, result.score_gained, score,
                  spawn.value, spawn.position)
    if won and not session.won:
        _logger.info('Reached the %d tile with score %d', config.target, score)
    if game_over:
        _logger.info('Game over with score %d, max tile %d\n%s', score, max_tile(spawn.board),
                     render_board(spawn.board))

    return replace(
        session,
        board=spawn.board,
        score=score,
        best_score=max(session.best_score, score),
        history=session.history.push(Snapshot(session.board, session.score)),
        game_over=game_over,
        won=won,
        rng=generator if rng is None else session.rng,
        last_move=result,
        last_spawn=spawn,
    )


def undo(session: Session) -> Session:
    """
    Restore the state before the last accepted move.

    The spawned tile goes away with the move. The undone move cannot be redone. Without history,
    ``session`` itself is returned.
    """
    if not session.can_undo:
        _logger.debug('Nothing to undo')
        return session

    snapshot, history = session.history.pop()
    _logger.debug('Undo: back to score %d, %d moves left to undo', snapshot.score, len(history))
    return replace(
        session,
        board=snapshot.board,
        score=snapshot.score,
        history=history,
        game_over=False,
        won=has_reached_target(snapshot.board, session.config.target),
        last_move=None,
        last_spawn=None,
    )


def can_undo(session: Session) -> bool:
    """Whether ``undo`` would restore a previous state."""
    return session.can_undo
