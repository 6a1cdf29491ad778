# -*- coding: utf-8 -*-
"""
Session layer of the 2048 engine.

This module provides the `Session` value and the transitions playing a game on top of the board core.
"""

from .history import History, Snapshot
from .session import Session, SessionStatus, apply_move, can_undo, new_game, restart, resume_game, undo

__all__ = [
    "History",
    "Snapshot",
    "Session",
    "SessionStatus",
    "new_game",
    "apply_move",
    "undo",
    "restart",
    "resume_game",
    "can_undo",
]
