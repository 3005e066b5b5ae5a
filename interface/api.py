"""FastAPI REST interface for the engine."""

import logging
import threading
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from chessbot.config import CONFIG, Difficulty
from chessbot.core.board import ChessBoard, IllegalMoveError
from chessbot.core.openings import detect_opening
from chessbot.core.search import SearchEngine, SearchResult

log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game; every search still builds its own transposition table.
engine = SearchEngine()
board = ChessBoard()
_board_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI format e.g. "e2e4"


class SearchRequest(BaseModel):
    difficulty: Optional[str] = None


class AIMoveRequest(BaseModel):
    fen: str
    difficulty: Optional[str] = None


def _difficulty(value: Optional[str]) -> Difficulty:
    try:
        return Difficulty.parse(value or CONFIG.search.difficulty)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _result_payload(result: SearchResult, fen: str) -> dict:
    return {
        "best_move": result.move.uci if result.move else None,
        "san": result.move.san if result.move else None,
        "score": result.score,
        "source": result.source,
        "depth": result.depth,
        "nodes": result.nodes,
        "fen": fen,
    }


@app.get("/board")
def get_board():
    with _board_lock:
        return {
            "fen": board.get_fen(),
            "turn": "white" if board.side_to_move() else "black",
            "legal_moves": [m.uci for m in board.legal_moves(notation=False)],
            "is_game_over": board.is_game_over(),
            "in_check": board.in_check(),
            "opening": detect_opening(board.san_history()),
        }


@app.post("/position")
def set_position(req: FenRequest):
    with _board_lock:
        try:
            board.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": board.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        try:
            move = board.move_from_uci(req.move)
            board.apply(move)
        except IllegalMoveError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"fen": board.get_fen(), "move": req.move, "san": move.san}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    difficulty = _difficulty(req.difficulty)
    with _board_lock:
        if board.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        search_board = board.copy()

    result = engine.analyse(search_board, difficulty)
    return _result_payload(result, search_board.get_fen())


@app.post("/ai-move")
def ai_move(req: AIMoveRequest):
    """Stateless: pick a reply for the posted position."""
    difficulty = _difficulty(req.difficulty)
    try:
        position = ChessBoard(req.fen)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
    result = engine.analyse(position, difficulty)
    log.info("ai-move %s -> %s (%s)", req.fen, result.move.uci if result.move else None, result.source)
    return _result_payload(result, position.get_fen())


@app.post("/reset")
def reset_board():
    with _board_lock:
        board.reset()
        return {"fen": board.get_fen()}
