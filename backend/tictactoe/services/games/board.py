from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .rules import has_winner

# Board is a 3x3 grid stored as a flat list of 9 cells:
#  0 | 1 | 2
#  3 | 4 | 5
#  6 | 7 | 8
BOARD_SIZE = 9

MARK_X = 'X'
MARK_O = 'O'
MARKS = (MARK_X, MARK_O)

Cell = Optional[str]  # 'X', 'O' or None for empty


def empty_board() -> List[Cell]:
    return [None] * BOARD_SIZE


def other_mark(mark: str) -> str:
    return MARK_O if mark == MARK_X else MARK_X


@dataclass
class GameState:
    """Snapshot of one room's game.

    `won` is derived from `board`; records loaded from storage recompute it.
    """
    board: List[Cell] = field(default_factory=empty_board)
    current_player: str = MARK_X
    won: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'board': list(self.board),
            'currentPlayer': self.current_player,
            'won': self.won,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameState':
        if not isinstance(data.get('board'), list):
            raise ValueError(f'missing or invalid board: {data.get("board")!r}')
        board = list(data['board'])
        if len(board) != BOARD_SIZE or any(c is not None and c not in MARKS for c in board):
            raise ValueError(f'invalid board: {board!r}')
        current = data.get('currentPlayer', MARK_X)
        if current not in MARKS:
            raise ValueError(f'invalid currentPlayer: {current!r}')
        return cls(board=board, current_player=current, won=has_winner(board))
