"""Move ordering for alpha-beta: MVV-LVA captures and promotions first."""

from typing import Dict, Iterable, List

from chessbot.core.board import Move

PROMOTION_BONUS = 800


def move_score(move: Move, values: Dict[int, int]) -> int:
    score = 0
    if move.captured is not None:
        score += values.get(move.captured, 0) * 10 - values.get(move.piece, 0)
    if move.promotion is not None:
        score += PROMOTION_BONUS
    return score


def order_moves(moves: Iterable[Move], values: Dict[int, int]) -> List[Move]:
    """Sort descending by transient score; equal scores keep their order."""
    return sorted(moves, key=lambda m: move_score(m, values), reverse=True)


def order_captures(moves: Iterable[Move], values: Dict[int, int]) -> List[Move]:
    """Captures only, most valuable victim first."""
    captures = [m for m in moves if m.captured is not None]
    return sorted(captures, key=lambda m: values.get(m.captured, 0), reverse=True)
