from typing import Optional, Sequence, Tuple


WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def has_winner(board: Sequence[Optional[str]]) -> bool:
    """Return True if any row, column or diagonal holds three identical marks."""
    if not board:
        return False
    for a, b, c in WINNING_LINES:
        first = board[a]
        if first is not None and board[b] == first and board[c] == first:
            return True
    return False
