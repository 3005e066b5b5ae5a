"""Per-search transposition table keyed by position key.

A table lives for exactly one top-level move computation: the search
creates it, fills it, and drops it when the move is chosen. Entries
from an earlier call are never consulted.

Usage (example):

    from chessbot.core.transposition import TranspositionTable, EXACT

    tt = TranspositionTable()
    tt.store(board.position_key(), depth=2, score=35, bound=EXACT)
    entry = tt.get(board.position_key())
    if entry is not None:
        print(entry.score, entry.depth, entry.bound, entry.best_move)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from chessbot.core.board import Move


class Bound(Enum):
    EXACT = "exact"
    LOWER = "beta"   # failed high: true score >= stored score
    UPPER = "alpha"  # failed low: true score <= stored score


EXACT = Bound.EXACT
LOWER = Bound.LOWER
UPPER = Bound.UPPER


@dataclass
class TTEntry:
    score: int
    depth: int
    bound: Bound
    best_move: Optional[Move] = None


class TranspositionTable:
    """Plain dict wrapper; a single search owns it, so no locking."""

    def __init__(self):
        self._table: Dict[str, TTEntry] = {}
        self.hits = 0

    def __len__(self):
        return len(self._table)

    def __contains__(self, key: str) -> bool:
        return key in self._table

    def get(self, key: str) -> Optional[TTEntry]:
        return self._table.get(key)

    def put(self, key: str, entry: TTEntry):
        self._table[key] = entry

    def store(self, key: str, depth: int, score: int, bound: Bound, best_move: Optional[Move] = None):
        self.put(key, TTEntry(score, depth, bound, best_move))

    def probe(self, key: str, depth: int, alpha: int, beta: int) -> Optional[int]:
        """Return a score that ends the search at this node, or None."""
        entry = self._table.get(key)
        if entry is None or entry.depth < depth:
            return None
        if entry.bound is EXACT:
            self.hits += 1
            return entry.score
        if entry.bound is LOWER and entry.score >= beta:
            self.hits += 1
            return beta
        if entry.bound is UPPER and entry.score <= alpha:
            self.hits += 1
            return alpha
        return None

    def clear(self):
        self._table.clear()
        self.hits = 0
