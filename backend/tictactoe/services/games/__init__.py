"""Game domain services: board model, win detection and move rules.

This package contains pure domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""
from .board import GameState, MARK_X, MARK_O
from .engine import (
    MoveError,
    GameAlreadyWon,
    PositionNotInteger,
    PositionOutOfRange,
    PositionOccupied,
    apply_move,
    create_game,
    reset_game,
)
from .rules import has_winner
