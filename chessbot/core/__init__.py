"""Core engine components: board adapter, evaluator, ordering, catalogue, table and search."""

from .board import ChessBoard, IllegalMoveError, Move, RulesError
from .book import OpeningBook, default_book
from .evaluator import Evaluator
from .search import INF, SearchEngine, SearchResult, select_move
from .transposition import TranspositionTable
