"""Static evaluator: material plus piece-square bonuses, from one side's point of view."""

from typing import Optional

import chess

from chessbot.config import CONFIG, EvalSettings

# Rows run from rank 8 down to rank 1 as seen by White; Black reads them mirrored.
PST = {
    "PAWN": [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [50, 50, 50, 50, 50, 50, 50, 50],
        [10, 10, 20, 30, 30, 20, 10, 10],
        [5, 5, 10, 25, 25, 10, 5, 5],
        [0, 0, 0, 20, 20, 0, 0, 0],
        [5, -5, -10, 0, 0, -10, -5, 5],
        [5, 10, 10, -20, -20, 10, 10, 5],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ],
    "KNIGHT": [
        [-50, -40, -30, -30, -30, -30, -40, -50],
        [-40, -20, 0, 0, 0, 0, -20, -40],
        [-30, 0, 10, 15, 15, 10, 0, -30],
        [-30, 5, 15, 20, 20, 15, 5, -30],
        [-30, 0, 15, 20, 20, 15, 0, -30],
        [-30, 5, 10, 15, 15, 10, 5, -30],
        [-40, -20, 0, 5, 5, 0, -20, -40],
        [-50, -40, -30, -30, -30, -30, -40, -50],
    ],
    "BISHOP": [
        [-20, -10, -10, -10, -10, -10, -10, -20],
        [-10, 0, 0, 0, 0, 0, 0, -10],
        [-10, 0, 5, 10, 10, 5, 0, -10],
        [-10, 5, 5, 10, 10, 5, 5, -10],
        [-10, 0, 10, 10, 10, 10, 0, -10],
        [-10, 10, 10, 10, 10, 10, 10, -10],
        [-10, 5, 0, 0, 0, 0, 5, -10],
        [-20, -10, -10, -10, -10, -10, -10, -20],
    ],
    "ROOK": [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [5, 10, 10, 10, 10, 10, 10, 5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [0, 0, 0, 5, 5, 0, 0, 0],
    ],
    "QUEEN": [
        [-20, -10, -10, -5, -5, -10, -10, -20],
        [-10, 0, 0, 0, 0, 0, 0, -10],
        [-10, 0, 5, 5, 5, 5, 0, -10],
        [-5, 0, 5, 5, 5, 5, 0, -5],
        [0, 0, 5, 5, 5, 5, 0, -5],
        [-10, 5, 5, 5, 5, 5, 0, -10],
        [-10, 0, 5, 0, 0, 0, 0, -10],
        [-20, -10, -10, -5, -5, -10, -10, -20],
    ],
    "KING": [
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-20, -30, -30, -40, -40, -30, -30, -20],
        [-10, -20, -20, -20, -20, -20, -20, -10],
        [20, 20, 0, 0, 0, 0, 20, 20],
        [20, 30, 10, 0, 0, 10, 30, 20],
    ],
}


def pst_bonus(piece_type: int, color: chess.Color, square: int) -> int:
    """Positional bonus for a piece, mirroring the table for Black."""
    table = PST[chess.piece_name(piece_type).upper()]
    rank = chess.square_rank(square)
    row = 7 - rank if color == chess.WHITE else rank
    return table[row][chess.square_file(square)]


class Evaluator:
    def __init__(self, cfg: Optional[EvalSettings] = None):
        self.cfg = cfg or CONFIG.eval
        self.values = {
            pt: self.cfg.piece_values[chess.piece_name(pt).upper()]
            for pt in chess.PIECE_TYPES
        }

    @property
    def mate_score(self) -> int:
        return self.cfg.mate_score

    def terminal_score(self, board, perspective: chess.Color) -> Optional[int]:
        """Score of a finished game, or None while it is still running."""
        if board.is_checkmate():
            # The side to move is the one mated.
            return -self.cfg.mate_score if board.side_to_move() == perspective else self.cfg.mate_score
        if board.is_draw() or board.is_stalemate() or board.is_threefold_repetition():
            return 0
        return None

    def evaluate(self, board, perspective: Optional[chess.Color] = None) -> int:
        """Return static eval in centipawns, positive favors `perspective`.

        `perspective` defaults to the side to move. A side in check is
        charged the check bonus; finished games score as mate or zero.
        """
        if perspective is None:
            perspective = board.side_to_move()

        terminal = self.terminal_score(board, perspective)
        if terminal is not None:
            return terminal

        score = 0
        for sq, pt, color in board.pieces():
            value = self.values[pt]
            if self.cfg.use_positional:
                value += pst_bonus(pt, color, sq)
            if color == perspective:
                score += value
            else:
                score -= value

        if board.in_check():
            if board.side_to_move() == perspective:
                score -= self.cfg.check_bonus
            else:
                score += self.cfg.check_bonus

        return score
