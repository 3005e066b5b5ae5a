import random
from typing import Optional, Tuple

from chessbot.config import CONFIG, Difficulty
from chessbot.core.board import ChessBoard
from chessbot.core.evaluator import Evaluator
from chessbot.core.openings import detect_opening
from chessbot.core.search import SearchEngine, SearchResult


class Engine:
    """A game against the engine: one board plus the search that answers on it."""

    def __init__(self, difficulty=None, seed: Optional[int] = None, use_book: Optional[bool] = None):
        self.board = ChessBoard()
        self.difficulty = Difficulty.parse(difficulty or CONFIG.search.difficulty)
        rng = random.Random(seed if seed is not None else CONFIG.search.seed)
        self.search = SearchEngine(Evaluator(), rng=rng, use_book=use_book)

    def think(self) -> SearchResult:
        return self.search.analyse(self.board, self.difficulty)

    def get_best_move(self) -> Tuple[Optional[str], Optional[int]]:
        result = self.think()
        return (result.move.uci if result.move else None), result.score

    def play_engine_move(self) -> Optional[str]:
        """Search and play the reply; None when the game is over."""
        result = self.think()
        if result.move is None:
            return None
        self.board.apply(result.move)
        return result.move.uci

    def make_move(self, move_uci: str) -> bool:
        return self.board.push_uci(move_uci)

    def opening_name(self) -> str:
        return detect_opening(self.board.san_history())

    def print_board(self):
        self.board.print_board()
