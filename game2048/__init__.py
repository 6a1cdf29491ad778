# -*- coding: utf-8 -*-
"""
Board engine for the 2048 game.

The engine is split into a pure board core (sliding, merging, terminal checks) and a session layer
(tile spawning, score bookkeeping, bounded undo history) built on top of it.
"""

from .addons.config import GameConfig
from .addons.errors import GameError, InvalidBoard, InvalidDirection
from .addons.types import MergePosition, MoveResult, SpawnResult
from .core import Direction, can_move, has_reached_target, max_tile, move, spawn_tile
from .envs import Session, SessionStatus, apply_move, can_undo, new_game, restart, resume_game, undo

__all__ = [
    "GameConfig",
    "GameError",
    "InvalidBoard",
    "InvalidDirection",
    "MergePosition",
    "MoveResult",
    "SpawnResult",
    "Direction",
    "move",
    "can_move",
    "max_tile",
    "has_reached_target",
    "spawn_tile",
    "Session",
    "SessionStatus",
    "new_game",
    "apply_move",
    "undo",
    "restart",
    "resume_game",
    "can_undo",
]
