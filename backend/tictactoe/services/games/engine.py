"""Move validation and state transitions for a single game.

The engine keeps no state of its own: callers pass the current
`GameState` in and persist whatever comes back.
"""
from numbers import Real
from typing import Any, Optional

from .board import GameState, BOARD_SIZE, other_mark
from .rules import has_winner


class MoveError(Exception):
    """A move rejected by the rules. The request has no side effect."""
    code = 'invalid_move'
    message = 'Invalid move'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class GameAlreadyWon(MoveError):
    code = 'already_won'
    message = 'Game already won'


class PositionNotInteger(MoveError):
    code = 'not_integer'
    message = 'Position must be an integer'


class PositionOutOfRange(MoveError):
    code = 'out_of_range'
    message = 'Position must be between 0 and 8'


class PositionOccupied(MoveError):
    code = 'occupied'
    message = 'Position is already occupied'


def create_game() -> GameState:
    return GameState()


def reset_game() -> GameState:
    return GameState()


def _as_position(position: Any) -> int:
    # bool is an int subclass but never a board position
    if isinstance(position, bool) or not isinstance(position, Real):
        raise PositionNotInteger()
    if isinstance(position, int):
        return position
    try:
        if not float(position).is_integer():
            raise PositionNotInteger()
    except (OverflowError, ValueError):
        raise PositionNotInteger()
    return int(position)


def apply_move(state: GameState, position: Any) -> GameState:
    """Place the current player's mark at `position` and return the new state.

    Checks run in a fixed order and the first failure wins:
    already won, not an integer, out of bounds, occupied.
    """
    if state.won:
        raise GameAlreadyWon()
    index = _as_position(position)
    if index < 0 or index >= BOARD_SIZE:
        raise PositionOutOfRange()
    if state.board[index] is not None:
        raise PositionOccupied()

    board = list(state.board)
    board[index] = state.current_player
    return GameState(
        board=board,
        current_player=other_mark(state.current_player),
        won=has_winner(board),
    )
