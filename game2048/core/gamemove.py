"""
Game move utilities for the 2048 engine: the move directions and the functions determining legal
and illegal moves.
"""

from __future__ import annotations

from enum import Enum

from numpy import asarray, integer, ndarray

from game2048.addons.errors import InvalidDirection

# ##: Action indices, in the order used by every direction table of the engine.
ACTIONS = {'left': 0, 'up': 1, 'right': 2, 'down': 3}


class Direction(str, Enum):
    """
    Direction of a move.

    The enum order follows the action indices: 0 left, 1 up, 2 right, 3 down.
    """

    LEFT = 'left'
    UP = 'up'
    RIGHT = 'right'
    DOWN = 'down'

    @property
    def action(self) -> int:
        """Integer index of the direction."""
        return ACTIONS[self.value]

    @classmethod
    def parse(cls, value: Direction | str | int) -> Direction:
        """
        Convert a direction, a direction name or an action index into a Direction.

        Parameters
        ----------
        value : Direction, str or int
            A member of this enum, a case-insensitive name (``"LEFT"``, ``"up"``) or an action index.

        Returns
        -------
        Direction
            The matching direction.

        Raises
        ------
        InvalidDirection
            If the value does not name one of the four directions.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if name in ACTIONS:
                return cls(name)
        elif isinstance(value, (int, integer)) and not isinstance(value, bool):
            if 0 <= int(value) < len(ACTIONS):
                return list(cls)[int(value)]
        raise InvalidDirection(f'Unknown direction: {value!r}')


def _tiles_can_advance(ahead: ndarray, behind: ndarray) -> bool:
    """
    Check if a tile in ``behind`` can move into the neighbouring cell of ``ahead``.

    ``ahead`` and ``behind`` are the two halves of every adjacent pair, ``ahead`` being the cell in the
    direction of the move. A tile advances when that cell is empty or holds the same value.
    """
    return bool(((behind != 0) & ((ahead == 0) | (ahead == behind))).any())


def legal_actions_mask(state: ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions in a single pass.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for the directions in action order, True when the move changes the board.

    Notes
    -----
    No rotation is needed: each direction compares the board with itself shifted by one cell.
    """
    state = asarray(state)
    west, east = state[:, :-1], state[:, 1:]
    north, south = state[:-1, :], state[1:, :]

    moves = {
        Direction.LEFT: _tiles_can_advance(west, east),
        Direction.UP: _tiles_can_advance(north, south),
        Direction.RIGHT: _tiles_can_advance(east, west),
        Direction.DOWN: _tiles_can_advance(south, north),
    }
    return tuple(moves[direction] for direction in Direction)


def legal_actions(state: ndarray) -> list[Direction]:
    """
    Determine the directions that change the board.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    list[Direction]
        Legal directions, in action order.
    """
    mask = legal_actions_mask(state)
    return [direction for direction, legal in zip(Direction, mask) if legal]


def illegal_actions(state: ndarray) -> list[Direction]:
    """
    Determine the directions that leave the board unchanged.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    list[Direction]
        Illegal directions, in action order.
    """
    mask = legal_actions_mask(state)
    return [direction for direction, legal in zip(Direction, mask) if not legal]
