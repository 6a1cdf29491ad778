"""
Core functionality of the 2048 board: validation, sliding and merging of tiles, and terminal checks.

Every function here is pure: inputs are never modified and a new array is returned.
"""

from typing import Callable

from numpy import arange, array_equal, asarray, flatnonzero, fliplr, int64, ndarray, rot90, zeros, zeros_like

from game2048.addons.config import DEFAULT_SIZE, WINNING_TILE
from game2048.addons.errors import InvalidBoard
from game2048.addons.types import LineMerge, MergePosition, MoveResult
from game2048.core.gamemove import Direction, legal_actions_mask

Transform = Callable[[ndarray], ndarray]
Remap = Callable[[int, int, int], tuple[int, int]]

# ##: For each direction: board to left-move frame, left-move frame back to board, merge coordinates back to board.
_TRANSFORMS: dict[Direction, tuple[Transform, Transform, Remap]] = {
    Direction.LEFT: (lambda board: board, lambda board: board, lambda row, col, size: (row, col)),
    Direction.RIGHT: (fliplr, fliplr, lambda row, col, size: (row, size - 1 - col)),
    Direction.UP: (
        lambda board: rot90(board, 1),
        lambda board: rot90(board, -1),
        lambda row, col, size: (col, size - 1 - row),
    ),
    Direction.DOWN: (
        lambda board: rot90(board, -1),
        lambda board: rot90(board, 1),
        lambda row, col, size: (size - 1 - col, row),
    ),
}


def empty_board(size: int = DEFAULT_SIZE) -> ndarray:
    """
    Create a board of the given size with every cell empty.

    Raises
    ------
    InvalidBoard
        If the size is smaller than 2.
    """
    if size < 2:
        raise InvalidBoard(f'Board size must be >= 2, got {size}')
    return zeros((size, size), dtype=int64)


def validate_board(board, size: int | None = None) -> ndarray:
    """
    Check a board coming from outside the engine and return an owned copy of it.

    Parameters
    ----------
    board : array_like
        Square matrix where 0 marks an empty cell and any other value is a power of two >= 2.
    size : int, optional
        Expected dimension of the board.

    Returns
    -------
    ndarray
        A new ``int64`` array holding the same values.

    Raises
    ------
    InvalidBoard
        If the board is not a square integer matrix, or holds a value that is not a tile.
    """
    try:
        state = asarray(board)
    except ValueError as error:
        raise InvalidBoard(f'Board is not a matrix: {error}') from error

    if state.ndim != 2 or state.shape[0] != state.shape[1] or state.shape[0] < 2:
        raise InvalidBoard(f'Board must be a square matrix of size >= 2, got shape {state.shape}')
    if size is not None and state.shape[0] != size:
        raise InvalidBoard(f'Board must be {size}x{size}, got {state.shape[0]}x{state.shape[1]}')
    if state.dtype.kind not in 'iu':
        raise InvalidBoard(f'Board must hold integers, got {state.dtype}')

    state = state.astype(int64)
    tiles = state[state != 0]
    invalid = tiles[(tiles < 2) | ((tiles & (tiles - 1)) != 0)]
    if invalid.size:
        raise InvalidBoard(f'Board values must be 0 or powers of two >= 2, got {invalid.tolist()}')
    return state


def empty_cells(board: ndarray) -> list[tuple[int, int]]:
    """List the empty cells of a board as ``(row, col)`` pairs, in row-major order."""
    return [(int(row), int(col)) for row, col in zip(*(asarray(board) == 0).nonzero())]


def merge_line(line: ndarray) -> LineMerge:
    """
    Slide a line towards its start, merging adjacent equal tiles.

    Parameters
    ----------
    line : ndarray
        A 1D array representing one row or column of the game board.

    Returns
    -------
    LineMerge
        The packed line (padded with zeros to the input length), the score of the merges and the
        ``(index, value)`` of every merged tile.

    Notes
    -----
    - Zeros (empty cells) are removed before merging.
    - Merging occurs from the start of the line towards the end.
    - Each tile can only be merged once per call: ``[2, 2, 2, 0]`` gives ``[4, 2, 0, 0]``.
    """
    line = asarray(line)
    non_zero = line[line != 0]
    result = zeros(len(line), dtype=int64)
    merges = []
    score = 0

    # ##: Walk the tiles, consuming pairs of equal values.
    i, j = 0, 0
    while i < len(non_zero):
        if i + 1 < len(non_zero) and non_zero[i] == non_zero[i + 1]:
            merged = int(non_zero[i]) * 2
            result[j] = merged
            merges.append((j, merged))
            score += merged
            i += 2
        else:
            result[j] = non_zero[i]
            i += 1
        j += 1

    return LineMerge(result, score, merges)


def slide_and_merge(board: ndarray) -> MoveResult:
    """
    Slide the game board to the left, merge adjacent cells, and compute the score.

    Parameters
    ----------
    board : ndarray
        The game board represented as a 2D NumPy array.

    Returns
    -------
    MoveResult
        The updated board, whether any tile moved, the score of all merges and the merge positions.

    Notes
    -----
    - The function operates on rows, effectively sliding left.
    - For other directions, rotate the board before calling this function.
    - A row moved if a value changed or a tile left its original index.
    """
    result = zeros_like(board, dtype=int64)
    merged_positions = []
    score = 0
    moved = False

    for i, row in enumerate(board):
        line, row_score, merges = merge_line(row)
        result[i] = line
        score += row_score
        merged_positions.extend(MergePosition(i, col, value) for col, value in merges)

        origins = flatnonzero(row)
        moved = moved or not array_equal(line, row) or bool((origins != arange(len(origins))).any())

    return MoveResult(result, moved, score, merged_positions)


def move(board, direction) -> MoveResult:
    """
    Move the board in a direction.

    Parameters
    ----------
    board : array_like
        The game board.
    direction : Direction, str or int
        The direction of the move.

    Returns
    -------
    MoveResult
        The moved board, with merge positions in board coordinates.

    Raises
    ------
    InvalidBoard
        If the board is malformed.
    InvalidDirection
        If the direction is unknown.

    Notes
    -----
    Only the left move is implemented; the other directions transform the board into the left-move
    frame and back. ``moved`` is recomputed by comparing the result with the input board.
    """
    direction = Direction.parse(direction)
    state = validate_board(board)
    size = state.shape[0]

    forward, backward, remap = _TRANSFORMS[direction]
    shifted = slide_and_merge(forward(state))
    result = backward(shifted.board).copy()

    if array_equal(result, state):
        return MoveResult(state, False, 0, [])

    positions = [MergePosition(*remap(pos.row, pos.col, size), pos.value) for pos in shifted.merged_positions]
    return MoveResult(result, True, shifted.score_gained, positions)


def move_left(board) -> MoveResult:
    """Move the board to the left."""
    return move(board, Direction.LEFT)


def move_right(board) -> MoveResult:
    """Move the board to the right."""
    return move(board, Direction.RIGHT)


def move_up(board) -> MoveResult:
    """Move the board up."""
    return move(board, Direction.UP)


def move_down(board) -> MoveResult:
    """Move the board down."""
    return move(board, Direction.DOWN)


def can_move(board) -> bool:
    """
    Check if at least one direction changes the board.

    Parameters
    ----------
    board : array_like
        The game board.

    Returns
    -------
    bool
        True if some move is possible, False otherwise.

    Notes
    -----
    For a board holding at least one tile this is the same as "an empty cell exists or two adjacent
    tiles are equal". A board without any tile cannot move in any direction and returns False.
    """
    return any(legal_actions_mask(validate_board(board)))


def max_tile(board) -> int:
    """Return the largest tile of the board, 0 when the board is empty."""
    return int(validate_board(board).max())


def has_reached_target(board, target: int = WINNING_TILE) -> bool:
    """Check if any tile of the board is at least ``target``."""
    return bool((validate_board(board) >= target).any())
