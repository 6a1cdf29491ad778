"""Text rendering of game boards."""

from numpy import asarray


def render_board(board, empty: str = '.') -> str:
    """
    Render a board as aligned text, one line per row.

    Parameters
    ----------
    board : array_like
        The game board.
    empty : str, optional
        Symbol for empty cells.

    Returns
    -------
    str
        The rendered board.
    """
    rows = asarray(board).tolist()
    cells = [[str(value) if value else empty for value in row] for row in rows]
    width = max((len(cell) for row in cells for cell in row), default=1)
    return '\n'.join(' '.join(cell.rjust(width) for cell in row) for row in cells)
