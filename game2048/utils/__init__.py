# -*- coding: utf-8 -*-
"""
Utilities for displaying game boards.
"""

from .render import render_board

__all__ = ["render_board"]
