# -*- coding: utf-8 -*-
"""
Set of types, configuration and errors shared by the engine.
"""
from .config import GameConfig
from .errors import GameError, InvalidBoard, InvalidDirection
from .types import LineMerge, MergePosition, MoveResult, SpawnResult

__all__ = [
    "GameConfig",
    "GameError",
    "InvalidBoard",
    "InvalidDirection",
    "LineMerge",
    "MergePosition",
    "MoveResult",
    "SpawnResult",
]
