# -*- coding: utf-8 -*-
"""
This module provides the pure board functions of the 2048 engine.

It includes functions for validating boards, sliding and merging tiles in the four directions,
checking legal moves and terminal states, and spawning random tiles.
"""

from .gameboard import (
    empty_board,
    empty_cells,
    has_reached_target,
    can_move,
    max_tile,
    merge_line,
    move,
    move_down,
    move_left,
    move_right,
    move_up,
    slide_and_merge,
    validate_board,
)
from .gamemove import Direction, illegal_actions, legal_actions, legal_actions_mask
from .spawn import RandomSource, clone_rng, fill_cells, make_rng, spawn_tile

__all__ = [
    "Direction",
    "legal_actions",
    "illegal_actions",
    "legal_actions_mask",
    "empty_board",
    "empty_cells",
    "validate_board",
    "merge_line",
    "slide_and_merge",
    "move",
    "move_left",
    "move_right",
    "move_up",
    "move_down",
    "can_move",
    "max_tile",
    "has_reached_target",
    "RandomSource",
    "make_rng",
    "clone_rng",
    "spawn_tile",
    "fill_cells",
]
