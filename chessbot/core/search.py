import logging
import random
import time
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from chessbot.config import CONFIG, QUIESCENCE_DEPTH_LIMIT, SearchConfig, SearchSettings
from chessbot.core.board import ChessBoard, IllegalMoveError, Move
from chessbot.core.book import OpeningBook, default_book
from chessbot.core.evaluator import Evaluator
from chessbot.core.ordering import order_captures, order_moves
from chessbot.core.transposition import EXACT, LOWER, UPPER, TranspositionTable
from chessbot.core.utils import format_info

log = logging.getLogger(__name__)

INF = 1_000_000


class EvaluatedMove(NamedTuple):
    move: Move
    score: int


@dataclass
class SearchContext:
    """State owned by one search call: the board it drives and its table."""

    board: ChessBoard
    tt: TranspositionTable = field(default_factory=TranspositionTable)
    q_limit: int = QUIESCENCE_DEPTH_LIMIT
    nodes: int = 0
    q_nodes: int = 0
    seldepth: int = 0  # deepest quiescence ply reached


@dataclass
class SearchResult:
    move: Optional[Move]
    score: Optional[int] = None
    source: str = "none"  # "book", "search" or "none"
    depth: int = 0
    nodes: int = 0
    evaluated: List[EvaluatedMove] = field(default_factory=list)


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, book: Optional[OpeningBook] = None,
                 rng: Optional[random.Random] = None, use_book: Optional[bool] = None,
                 settings: Optional[SearchSettings] = None):
        self.settings = settings or CONFIG.search
        self.evaluator = evaluator or Evaluator()
        if use_book is None:
            use_book = self.settings.use_book
        if not use_book:
            book = None
        elif book is None:
            book = OpeningBook.load(self.settings.book_path) if self.settings.book_path else default_book()
        self.book = book
        self.rng = rng or random.Random(self.settings.seed)

    # Public API

    def select_move(self, board: ChessBoard, difficulty=None) -> Optional[Move]:
        return self.analyse(board, difficulty).move

    def analyse(self, board: ChessBoard, difficulty=None,
                config: Optional[SearchConfig] = None) -> SearchResult:
        """Choose a move: catalogue first, otherwise one search per root move.

        Returns a result with move None when the position has no legal
        moves or the rules engine rejected a move mid-search.
        """
        if config is None:
            config = SearchConfig.for_difficulty(difficulty or self.settings.difficulty, self.settings)

        if self.book is not None:
            book_move = self.book.choose(board, self.rng)
            if book_move is not None:
                log.info("Book move %s", book_move)
                return SearchResult(book_move, source="book")

        ctx = SearchContext(board, TranspositionTable(), config.quiescence_depth_limit)
        start = time.perf_counter()
        evaluated: List[EvaluatedMove] = []
        try:
            for move in board.legal_moves():
                with board.applied(move):
                    score = -self._negamax(ctx, config.max_depth - 1, -INF, INF)
                evaluated.append(EvaluatedMove(move, score))
        except IllegalMoveError as e:
            log.warning("Search abandoned, no move produced: %s", e)
            return SearchResult(None, nodes=ctx.nodes)

        if not evaluated:
            return SearchResult(None)

        # Stable: the first of equal scores in enumeration order wins.
        evaluated.sort(key=lambda em: em.score, reverse=True)
        best = evaluated[0]
        log.info(format_info(config.max_depth, best.score, ctx.nodes + ctx.q_nodes,
                             time.perf_counter() - start, best.move, ctx.seldepth,
                             self.evaluator.mate_score))
        return SearchResult(best.move, best.score, "search", config.max_depth,
                            ctx.nodes + ctx.q_nodes, evaluated)

    def search(self, board: ChessBoard, depth: int, alpha: int = -INF, beta: int = INF,
               tt: Optional[TranspositionTable] = None,
               context: Optional[SearchContext] = None) -> int:
        """Alpha-beta score of `board` for the side to move."""
        if context is None:
            context = SearchContext(board, tt if tt is not None else TranspositionTable())
        return self._negamax(context, depth, alpha, beta)

    def quiesce(self, board: ChessBoard, alpha: int = -INF, beta: int = INF, qdepth: int = 0,
                context: Optional[SearchContext] = None) -> int:
        if context is None:
            context = SearchContext(board)
        return self._quiescence(context, alpha, beta, qdepth)

    # Core negamax (alpha-beta)

    def _negamax(self, ctx: SearchContext, depth: int, alpha: int, beta: int) -> int:
        board = ctx.board
        ctx.nodes += 1
        key = board.position_key()

        cached = ctx.tt.probe(key, depth, alpha, beta)
        if cached is not None:
            return cached

        if board.is_game_over():
            return self.evaluator.evaluate(board, board.side_to_move())

        alpha_orig = alpha

        if depth <= 0:
            score = self._quiescence(ctx, alpha, beta, 0)
            if score >= beta:
                bound = LOWER
            elif score <= alpha_orig:
                bound = UPPER
            else:
                bound = EXACT
            ctx.tt.store(key, 0, score, bound)
            return score

        best_score = -INF
        best_move = None
        moves = order_moves(board.legal_moves(notation=False), self.evaluator.values)
        for move in moves:
            with board.applied(move):
                score = -self._negamax(ctx, depth - 1, -beta, -alpha)

            if score > best_score:
                best_score = score
                best_move = move
            if best_score > alpha:
                alpha = best_score
            if alpha >= beta:
                ctx.tt.store(key, depth, best_score, LOWER, move)
                return beta

        bound = UPPER if best_score <= alpha_orig else EXACT
        ctx.tt.store(key, depth, best_score, bound, best_move)
        return best_score

    # Quiescence search (captures only)

    def _quiescence(self, ctx: SearchContext, alpha: int, beta: int, qdepth: int) -> int:
        board = ctx.board
        ctx.q_nodes += 1
        if qdepth > ctx.seldepth:
            ctx.seldepth = qdepth

        stand_pat = self.evaluator.evaluate(board, board.side_to_move())
        if stand_pat >= beta:
            return beta
        if stand_pat > alpha:
            alpha = stand_pat
        if qdepth >= ctx.q_limit:
            return alpha

        captures = order_captures(board.legal_moves(notation=False), self.evaluator.values)
        for move in captures:
            with board.applied(move):
                score = -self._quiescence(ctx, -beta, -alpha, qdepth + 1)
            if score >= beta:
                return beta
            if score > alpha:
                alpha = score

        return alpha


def select_move(board: ChessBoard, difficulty=None, rng: Optional[random.Random] = None) -> Optional[Move]:
    """One-shot move choice with the default evaluator and catalogue."""
    return SearchEngine(rng=rng).select_move(board, difficulty)
