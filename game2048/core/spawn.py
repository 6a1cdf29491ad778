"""
Random tile placement.

Randomness is always injected: functions take a random source, a seed, or nothing (a fresh numpy
generator). Any object with ``random()`` and ``integers(n)`` can stand in for the numpy generator.
"""

from copy import deepcopy
from typing import Protocol, runtime_checkable

from numpy import integer, ndarray
from numpy.random import Generator, default_rng

from game2048.addons.config import SPAWN_CHANCE_FOUR
from game2048.addons.types import SpawnResult
from game2048.core.gameboard import empty_cells, validate_board


@runtime_checkable
class RandomSource(Protocol):
    """Source of randomness used for tile spawns."""

    def random(self) -> float:
        """Return a float in [0, 1)."""

    def integers(self, high: int) -> int:
        """Return an integer in [0, high)."""


def make_rng(source: RandomSource | int | None = None) -> RandomSource:
    """
    Build a random source.

    Parameters
    ----------
    source : RandomSource, int or None
        An existing random source (returned as is), a seed, or None for an unseeded generator.

    Returns
    -------
    RandomSource
        The random source to draw from.
    """
    if source is None or isinstance(source, (int, integer)):
        return default_rng(source)
    if isinstance(source, RandomSource):
        return source
    raise TypeError(f'Expected a seed or an object with random() and integers(), got {type(source).__name__}')


def clone_rng(source: RandomSource | int | None = None) -> RandomSource:
    """
    Build a random source whose draws do not advance ``source``.

    Numpy generators are copied together with their bit generator state, so the copy replays the
    draws ``source`` would make. Other random sources cannot be copied in general and are returned as is.
    """
    generator = make_rng(source)
    if isinstance(generator, Generator):
        return deepcopy(generator)
    return generator


def spawn_tile(board, chance_four: float = SPAWN_CHANCE_FOUR, rng: RandomSource | int | None = None) -> SpawnResult:
    """
    Place a new tile (2 or 4) on a random empty cell.

    Parameters
    ----------
    board : array_like
        The current state of the game board. Not modified.
    chance_four : float, optional
        Probability that the new tile is a 4.
    rng : RandomSource, int or None, optional
        Random source or seed.

    Returns
    -------
    SpawnResult
        The new board with the spawned position and value; position and value are None if the board was full.

    Notes
    -----
    The cell is drawn first (uniformly among empty cells), then the value.
    """
    state = validate_board(board)
    cells = empty_cells(state)
    if not cells:
        return SpawnResult(state)

    generator = make_rng(rng)
    row, col = cells[int(generator.integers(len(cells)))]
    value = 4 if generator.random() < chance_four else 2
    state[row, col] = value
    return SpawnResult(state, (row, col), value)


def fill_cells(
    state: ndarray,
    number_tile: int,
    chance_four: float = SPAWN_CHANCE_FOUR,
    rng: RandomSource | int | None = None,
) -> tuple[ndarray, list[SpawnResult]]:
    """
    Spawn several tiles one after the other.

    Each spawn sees the tiles placed by the previous ones. Spawning stops early when the board is full.

    Returns
    -------
    tuple[ndarray, list[SpawnResult]]
        The final board and the result of every spawn that placed a tile.
    """
    generator = make_rng(rng)
    spawns = []
    for _ in range(number_tile):
        spawn = spawn_tile(state, chance_four, generator)
        if not spawn.spawned:
            break
        state = spawn.board
        spawns.append(spawn)
    return state, spawns
