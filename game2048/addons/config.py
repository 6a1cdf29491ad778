# -*- coding: utf-8 -*-
"""
Configuration of a game session.
"""
from dataclasses import dataclass

# ##>: Defaults shared by the configuration and the board functions.
DEFAULT_SIZE = 4
SPAWN_CHANCE_FOUR = 0.1
WINNING_TILE = 2048


@dataclass(frozen=True)
class GameConfig:
    """
    Game configuration.

    Attributes
    ----------
    size : int
        Dimension of the square board.
    initial_tiles : int
        Number of tiles spawned when a game starts.
    chance_four : float
        Probability that a spawned tile is a 4 instead of a 2.
    target : int
        Tile value that marks the game as won.
    history_depth : int
        Number of moves that can be undone.
    """

    size: int = DEFAULT_SIZE
    initial_tiles: int = 2
    chance_four: float = SPAWN_CHANCE_FOUR
    target: int = WINNING_TILE
    history_depth: int = 5

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"size must be >= 2, got {self.size}")
        if not 1 <= self.initial_tiles <= self.size * self.size:
            raise ValueError(f"initial_tiles must be in [1, {self.size * self.size}], got {self.initial_tiles}")
        if not 0.0 <= self.chance_four <= 1.0:
            raise ValueError(f"chance_four must be in [0, 1], got {self.chance_four}")
        if self.target < 2 or self.target & (self.target - 1):
            raise ValueError(f"target must be a power of two >= 2, got {self.target}")
        if self.history_depth < 0:
            raise ValueError(f"history_depth must be >= 0, got {self.history_depth}")
