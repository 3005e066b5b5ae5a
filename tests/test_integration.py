"""
Integration test suite for the chessbot engine.

Tests components working together end-to-end:
- Move selection (catalogue, search, difficulty depths)
- Legality and terminal handling across positions
- Recoverable rules engine failures
- Engine wrapper games
- FastAPI REST API
"""

import logging
import random

import chess
import pytest

from chessbot.config import Difficulty, SearchConfig, SearchSettings
from chessbot.core.board import ChessBoard, IllegalMoveError
from chessbot.core.book import OpeningBook, default_book
from chessbot.core.search import SearchEngine, SearchResult, select_move
from chessbot.main import Engine

MATE = 999_999

BEFORE_FOOLS_MATE_FEN = "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq g3 0 2"
FOOLS_MATE_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE_FEN = "5k2/5P2/5K2/8/8/8/8/8 b - - 0 1"
BACK_RANK_FEN = "6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1"
TACTICAL_FEN = "4k3/3p4/8/2n1b3/3P4/2N5/4B3/4K3 w - - 0 1"


def random_positions(count, plies, seed):
    rng = random.Random(seed)
    for _ in range(count):
        b = ChessBoard()
        for _ in range(plies):
            moves = b.legal_moves(notation=False)
            if not moves:
                break
            b.apply(rng.choice(moves))
        yield b


class RejectingBoard(ChessBoard):
    """Rules engine that refuses every move the search tries to apply."""

    def apply(self, move):
        raise IllegalMoveError(f"rejected {move.uci}")


# ════════════════════════════════════════════════════════════════════════════
#  MOVE SELECTION
# ════════════════════════════════════════════════════════════════════════════

class TestMoveSelection:
    def test_book_move_from_start(self):
        engine = SearchEngine(rng=random.Random(3))
        b = ChessBoard()
        result = engine.analyse(b, Difficulty.HARD)
        assert result.source == "book"
        assert result.score is None
        assert result.move.coordinates() in default_book().candidates(b.position_key())

    @pytest.mark.parametrize("seed", range(5))
    def test_catalogue_containment(self, seed):
        b = ChessBoard()
        for uci in ("e2e4", "e7e5"):
            b.push_uci(uci)
        move = SearchEngine(rng=random.Random(seed)).select_move(b, "medium")
        assert move.coordinates() in default_book().candidates(b.position_key())
        assert move.san

    def test_book_choice_reproducible_with_seed(self):
        b = ChessBoard()
        first = SearchEngine(rng=random.Random(11)).select_move(b)
        second = SearchEngine(rng=random.Random(11)).select_move(b)
        assert first == second

    def test_catalogue_miss_falls_through_to_search(self):
        book = OpeningBook.from_mapping({chess.STARTING_FEN: ["e2e5"]})
        engine = SearchEngine(book=book, rng=random.Random(1))
        b = ChessBoard()
        result = engine.analyse(b, Difficulty.EASY)
        assert result.source == "search"
        assert result.move in b.legal_moves()

    def test_book_disabled(self):
        result = SearchEngine(use_book=False).analyse(ChessBoard(), "easy")
        assert result.source == "search"
        assert len(result.evaluated) == 20

    @pytest.mark.parametrize("difficulty", ["easy", "medium"])
    def test_mate_in_one_selected(self, difficulty):
        b = ChessBoard(BEFORE_FOOLS_MATE_FEN)
        engine = SearchEngine(use_book=False)
        result = engine.analyse(b, difficulty)
        assert result.move.uci == "d8h4"
        assert result.move.san == "Qh4#"
        assert result.score == MATE
        with b.applied(result.move):
            assert engine.search(b, 1) == -MATE

    def test_back_rank_mate_on_hard(self):
        b = ChessBoard(BACK_RANK_FEN)
        result = SearchEngine(use_book=False).analyse(b, "hard")
        assert result.move.uci == "a1a8"
        assert result.depth == 3

    @pytest.mark.parametrize("difficulty,depth", [("easy", 1), ("medium", 2), ("hard", 3)])
    def test_difficulty_sets_depth(self, difficulty, depth):
        result = SearchEngine(use_book=False).analyse(ChessBoard(TACTICAL_FEN), difficulty)
        assert result.depth == depth
        assert result.source == "search"

    def test_explicit_search_config(self):
        config = SearchConfig(max_depth=1, difficulty=Difficulty.EASY)
        result = SearchEngine(use_book=False).analyse(ChessBoard(TACTICAL_FEN), config=config)
        assert result.depth == 1

    def test_ranked_moves_sorted_and_best_first(self):
        result = SearchEngine(use_book=False).analyse(ChessBoard(TACTICAL_FEN), "easy")
        scores = [em.score for em in result.evaluated]
        assert scores == sorted(scores, reverse=True)
        assert result.move == result.evaluated[0].move
        assert result.score == scores[0]

    def test_ties_keep_enumeration_order(self):
        b = ChessBoard(TACTICAL_FEN)
        result = SearchEngine(use_book=False).analyse(b, "easy")
        order = {m: i for i, m in enumerate(b.legal_moves())}
        for a, c in zip(result.evaluated, result.evaluated[1:]):
            if a.score == c.score:
                assert order[a.move] < order[c.move]

    def test_wins_hanging_piece(self):
        result = SearchEngine(use_book=False).analyse(ChessBoard(TACTICAL_FEN), "medium")
        assert result.move.captured in (chess.BISHOP, chess.KNIGHT)

    def test_settings_default_difficulty(self):
        settings = SearchSettings(difficulty="easy", use_book=False)
        result = SearchEngine(settings=settings).analyse(ChessBoard(TACTICAL_FEN))
        assert result.depth == 1

    def test_module_level_select_move(self):
        b = ChessBoard()
        move = select_move(b, "easy", rng=random.Random(0))
        assert move in b.legal_moves()


# ════════════════════════════════════════════════════════════════════════════
#  LEGALITY, TERMINALS AND STATE RESTORATION
# ════════════════════════════════════════════════════════════════════════════

class TestSearchPipeline:
    @pytest.mark.parametrize("difficulty,count", [("easy", 4), ("medium", 4), ("hard", 2)])
    def test_selected_move_is_legal(self, difficulty, count):
        engine = SearchEngine(rng=random.Random(5))
        for b in random_positions(count, 12, seed=42):
            if b.is_game_over():
                continue
            move = engine.select_move(b, difficulty)
            assert move in b.legal_moves()

    def test_checkmate_returns_none(self):
        b = ChessBoard(FOOLS_MATE_FEN)
        result = SearchEngine().analyse(b, "hard")
        assert result.move is None
        assert result.source == "none"

    def test_stalemate_returns_none(self):
        assert SearchEngine().select_move(ChessBoard(STALEMATE_FEN), "medium") is None

    def test_position_restored_after_search(self):
        b = ChessBoard(TACTICAL_FEN)
        b.push_uci("c3b5")
        key, history = b.position_key(), list(b.move_history)
        SearchEngine(use_book=False).analyse(b, "medium")
        assert b.position_key() == key
        assert b.move_history == history

    def test_fresh_table_per_call(self):
        engine = SearchEngine(use_book=False)
        b = ChessBoard(TACTICAL_FEN)
        first = engine.analyse(b, "medium")
        second = engine.analyse(b, "medium")
        assert first.move == second.move
        assert first.score == second.score
        assert first.nodes == second.nodes

    def test_rejected_apply_is_absorbed(self, caplog):
        b = RejectingBoard(TACTICAL_FEN)
        with caplog.at_level(logging.WARNING, logger="chessbot.core.search"):
            result = SearchEngine(use_book=False).analyse(b, "easy")
        assert result.move is None
        assert b.get_fen() == TACTICAL_FEN
        assert "no move produced" in caplog.text

    def test_book_hit_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="chessbot.core.search"):
            SearchEngine(rng=random.Random(0)).analyse(ChessBoard())
        assert "Book move" in caplog.text

    def test_search_info_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="chessbot.core.search"):
            SearchEngine(use_book=False).analyse(ChessBoard(TACTICAL_FEN), "easy")
        assert "info depth 1" in caplog.text


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER
# ════════════════════════════════════════════════════════════════════════════

class TestEngineWrapper:
    def test_get_best_move(self):
        engine = Engine(difficulty="easy", seed=1)
        move, score = engine.get_best_move()
        assert move is not None
        assert chess.Move.from_uci(move) in chess.Board().legal_moves

    def test_make_move(self):
        engine = Engine(seed=1)
        assert engine.make_move("e2e4")
        assert not engine.make_move("e2e5")

    def test_play_sequence_and_opening(self):
        engine = Engine(seed=1)
        for uci in ("e2e4", "e7e5", "g1f3", "b8c6", "f1b5"):
            assert engine.make_move(uci)
        assert engine.opening_name() == "Ruy Lopez"

    def test_engine_vs_engine_stays_legal(self):
        engine = Engine(difficulty="easy", seed=9)
        for _ in range(16):
            if engine.board.is_game_over():
                break
            legal = {m.uci for m in engine.board.legal_moves(notation=False)}
            played = engine.play_engine_move()
            assert played in legal
        assert len(engine.board.move_history) > 0

    def test_play_engine_move_when_mated(self):
        engine = Engine(seed=1)
        engine.board.set_fen(FOOLS_MATE_FEN)
        assert engine.play_engine_move() is None


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI INTEGRATION
# ════════════════════════════════════════════════════════════════════════════

class TestAPIIntegration:
    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, board

        self.client = TestClient(app)
        board.reset()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert data["is_game_over"] is False
        assert len(data["legal_moves"]) == 20
        assert data["opening"] == "Starting Position"

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == "e2e4"
        assert data["san"] == "e4"
        assert "4P3" in data["fen"]

    def test_post_move_illegal(self):
        assert self.client.post("/move", json={"move": "e2e5"}).status_code == 400

    def test_post_move_invalid_format(self):
        assert self.client.post("/move", json={"move": "zzzz"}).status_code == 400

    def test_set_position(self):
        response = self.client.post("/position", json={"fen": TACTICAL_FEN})
        assert response.status_code == 200
        assert response.json()["fen"] == TACTICAL_FEN

    def test_set_position_invalid(self):
        assert self.client.post("/position", json={"fen": "nonsense"}).status_code == 400

    def test_search_from_book(self):
        response = self.client.post("/search", json={"difficulty": "easy"})
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "book"
        assert chess.Move.from_uci(data["best_move"]) in chess.Board().legal_moves

    def test_search_off_book(self):
        self.client.post("/position", json={"fen": TACTICAL_FEN})
        data = self.client.post("/search", json={"difficulty": "easy"}).json()
        assert data["source"] == "search"
        assert data["depth"] == 1
        assert isinstance(data["score"], int)

    def test_search_bad_difficulty(self):
        assert self.client.post("/search", json={"difficulty": "insane"}).status_code == 400

    def test_search_game_over(self):
        self.client.post("/position", json={"fen": FOOLS_MATE_FEN})
        assert self.client.post("/search", json={}).status_code == 400

    def test_stateless_ai_move(self):
        response = self.client.post("/ai-move", json={"fen": BEFORE_FOOLS_MATE_FEN, "difficulty": "easy"})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] == "d8h4"
        assert data["san"] == "Qh4#"

    def test_stateless_ai_move_terminal(self):
        data = self.client.post("/ai-move", json={"fen": FOOLS_MATE_FEN}).json()
        assert data["best_move"] is None
        assert data["source"] == "none"

    def test_stateless_ai_move_bad_fen(self):
        assert self.client.post("/ai-move", json={"fen": "x"}).status_code == 400

    def test_reset(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/reset")
        assert response.json()["fen"] == chess.STARTING_FEN
