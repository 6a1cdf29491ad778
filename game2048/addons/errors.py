# -*- coding: utf-8 -*-
"""
Errors raised by the engine.

Only caller mistakes are errors: a malformed board or an unknown direction. Situations such as a
move that changes nothing, a spawn on a full board or an undo without history are ordinary results.
"""


class GameError(Exception):
    """Base class of the engine errors."""


class InvalidBoard(GameError, ValueError):
    """The board is not a square matrix of empty cells and powers of two."""


class InvalidDirection(GameError, ValueError):
    """The value does not name one of the four move directions."""
