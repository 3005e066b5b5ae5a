"""Board wrapper over python-chess: the rules engine the search drives."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import chess


class RulesError(Exception):
    """Base class for rules engine failures."""


class IllegalMoveError(RulesError):
    """Raised when a move is not in the legal list of the current position."""


@dataclass(frozen=True)
class Move:
    from_square: int
    to_square: int
    piece: int
    captured: Optional[int] = None
    promotion: Optional[int] = None
    san: str = field(default="", compare=False)

    @property
    def uci(self) -> str:
        return self.to_chess().uci()

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_promotion(self) -> bool:
        return self.promotion is not None

    def coordinates(self) -> Tuple[str, str]:
        return chess.square_name(self.from_square), chess.square_name(self.to_square)

    def to_chess(self) -> chess.Move:
        return chess.Move(self.from_square, self.to_square, promotion=self.promotion)

    def __str__(self):
        return self.san or self.uci


class ChessBoard:
    def __init__(self, fen: str = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.move_history: List[str] = []

    def reset(self):
        """Reset to the initial position."""
        self.board.reset()
        self.move_history.clear()

    def set_fen(self, fen: str):
        """Set board state from a FEN string. Raises ValueError on bad input."""
        self.board.set_fen(fen)
        self.move_history.clear()

    def get_fen(self) -> str:
        return self.board.fen()

    def copy(self) -> "ChessBoard":
        other = ChessBoard.__new__(ChessBoard)
        other.board = self.board.copy()
        other.move_history = list(self.move_history)
        return other

    # Move generation

    def _wrap(self, move: chess.Move, notation: bool) -> Move:
        board = self.board
        if board.is_en_passant(move):
            captured = chess.PAWN
        else:
            captured = board.piece_type_at(move.to_square)
        return Move(
            from_square=move.from_square,
            to_square=move.to_square,
            piece=board.piece_type_at(move.from_square),
            captured=captured,
            promotion=move.promotion,
            san=board.san(move) if notation else "",
        )

    def legal_moves(self, square: Optional[int] = None, notation: bool = True) -> List[Move]:
        """Verbose legal moves, optionally only those leaving `square`."""
        if square is None:
            moves = self.board.legal_moves
        else:
            moves = self.board.generate_legal_moves(from_mask=chess.BB_SQUARES[square])
        return [self._wrap(m, notation) for m in moves]

    def move_from_uci(self, text: str) -> Move:
        """Resolve a UCI string against the legal list."""
        try:
            move = chess.Move.from_uci(text)
        except ValueError:
            raise IllegalMoveError(f"Invalid UCI move: {text!r}") from None
        if not self.board.is_legal(move):
            raise IllegalMoveError(f"Illegal move: {text}")
        return self._wrap(move, notation=True)

    # State changes

    def apply(self, move: Move):
        cm = move.to_chess()
        if not self.board.is_legal(cm):
            raise IllegalMoveError(f"Illegal move {cm.uci()} in {self.board.fen()}")
        self.board.push(cm)
        self.move_history.append(cm.uci())

    def undo(self):
        if not self.board.move_stack:
            raise IllegalMoveError("No move to undo")
        self.board.pop()
        if self.move_history:
            self.move_history.pop()

    @contextmanager
    def applied(self, move: Move) -> Iterator["ChessBoard"]:
        """Apply `move` for the duration of the block; always undone on exit."""
        self.apply(move)
        try:
            yield self
        finally:
            self.undo()

    def push_uci(self, move_str: str) -> bool:
        """Push a UCI move (e.g. 'e2e4'). Returns True if legal."""
        try:
            self.apply(self.move_from_uci(move_str))
        except IllegalMoveError:
            return False
        return True

    def undo_move(self):
        """Pop the last move if there is one."""
        if self.board.move_stack:
            self.undo()

    # Queries

    def side_to_move(self) -> chess.Color:
        return self.board.turn

    def in_check(self) -> bool:
        return self.board.is_check()

    def is_checkmate(self) -> bool:
        return self.board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self.board.is_stalemate()

    def is_draw(self) -> bool:
        return self.board.is_insufficient_material() or self.board.halfmove_clock >= 100

    def is_threefold_repetition(self) -> bool:
        return self.board.is_repetition(3)

    def is_game_over(self) -> bool:
        if not any(self.board.generate_legal_moves()):
            return True
        return self.is_draw() or self.is_threefold_repetition()

    def position_key(self) -> str:
        """Placement, side to move, castling rights and en passant square."""
        # No move history: table scores can carry a repetition draw to another path.
        return self.board.epd()

    def piece_at(self, square: int) -> Optional[Tuple[int, chess.Color]]:
        piece = self.board.piece_at(square)
        if piece is None:
            return None
        return piece.piece_type, piece.color

    def pieces(self) -> Iterator[Tuple[int, int, chess.Color]]:
        """Yield (square, kind, side) for every occupied square."""
        for sq, piece in self.board.piece_map().items():
            yield sq, piece.piece_type, piece.color

    def san_history(self) -> List[str]:
        """SAN of every move played since the last reset or FEN."""
        replay = self.board.root()
        sans = []
        for move in self.board.move_stack:
            sans.append(replay.san(move))
            replay.push(move)
        return sans

    def print_board(self):
        """Print ASCII representation."""
        print(self.board)
