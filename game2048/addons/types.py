# -*- coding: utf-8 -*-
"""
Set of types for this project.
"""
from typing import NamedTuple

from numpy import ndarray


class MergePosition(NamedTuple):
    """Cell holding a tile created by a merge, in board coordinates."""

    row: int
    col: int
    value: int


class LineMerge(NamedTuple):
    """
    Result of sliding a single line towards its start.

    ``merges`` lists ``(index, value)`` pairs for the merged tiles, indexed in the output line.
    """

    line: ndarray
    score: int
    merges: list[tuple[int, int]]


class MoveResult(NamedTuple):
    """
    Outcome of moving a board in one direction.

    When ``moved`` is False, ``board`` holds the same values as the input and ``score_gained`` is 0.
    """

    board: ndarray
    moved: bool
    score_gained: int
    merged_positions: list[MergePosition]


class SpawnResult(NamedTuple):
    """
    Outcome of a tile spawn. ``position`` and ``value`` are None when the board was full.
    """

    board: ndarray
    position: tuple[int, int] | None = None
    value: int | None = None

    @property
    def spawned(self) -> bool:
        """Whether a tile was placed."""
        return self.position is not None
