"""Static opening catalogue: position key -> candidate (origin, destination) pairs."""

import logging
import random
import re
import tomllib
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from chessbot.core.board import ChessBoard, Move

log = logging.getLogger(__name__)

Coordinates = Tuple[str, str]

_COORD_RE = re.compile(r"^([a-h][1-8])([a-h][1-8])$")


class OpeningBookError(ValueError):
    """Malformed catalogue data."""


@dataclass(frozen=True)
class BookStats:
    total_positions: int
    total_moves: int
    average_moves_per_position: float


def parse_coordinates(text: str) -> Coordinates:
    m = _COORD_RE.match(text.strip())
    if not m:
        raise OpeningBookError(f"Bad catalogue move: {text!r}")
    return m.group(1), m.group(2)


class OpeningBook:
    def __init__(self, entries: Dict[str, List[Coordinates]]):
        self._entries = entries

    @classmethod
    def from_mapping(cls, raw: Dict[str, List[str]]) -> "OpeningBook":
        """Build from FEN -> ["e2e4", ...], normalising each FEN to a position key."""
        entries: Dict[str, List[Coordinates]] = {}
        for fen, moves in raw.items():
            if not moves:
                raise OpeningBookError(f"No candidate moves for {fen!r}")
            try:
                key = ChessBoard(fen).position_key()
            except ValueError as e:
                raise OpeningBookError(f"Invalid FEN in catalogue: {fen!r}: {e}") from e
            bucket = entries.setdefault(key, [])
            for text in moves:
                pair = parse_coordinates(text)
                if pair not in bucket:
                    bucket.append(pair)
        return cls(entries)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "OpeningBook":
        """Load a TOML catalogue; the bundled one when `path` is None."""
        if path is None:
            source = resources.files("chessbot") / "data" / "book.toml"
        else:
            source = Path(path)
        try:
            with source.open("rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise OpeningBookError(f"Cannot parse catalogue {source}: {e}") from e
        book = cls.from_mapping(raw.get("positions", {}))
        log.debug("Loaded opening catalogue with %d positions", len(book))
        return book

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def is_in_book(self, key: str) -> bool:
        return key in self._entries

    def candidates(self, key: str) -> List[Coordinates]:
        return list(self._entries.get(key, ()))

    def choose(self, board: ChessBoard, rng: random.Random) -> Optional[Move]:
        """Pick one catalogue move for the current position and resolve it.

        Returns None on a miss, including a candidate with no matching
        legal move.
        """
        key = board.position_key()
        cands = self._entries.get(key)
        if not cands:
            return None
        pick = rng.choice(cands)
        for move in board.legal_moves():
            if move.coordinates() == pick:
                return move
        log.warning("Catalogue move %s%s is not legal in %s", pick[0], pick[1], key)
        return None

    def stats(self) -> BookStats:
        positions = len(self._entries)
        total = sum(len(v) for v in self._entries.values())
        avg = round(total / positions, 1) if positions else 0.0
        return BookStats(positions, total, avg)


@lru_cache(maxsize=None)
def default_book() -> OpeningBook:
    """The bundled catalogue, parsed once per process."""
    return OpeningBook.load()
