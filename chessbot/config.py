# chessbot/config.py
import logging
import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

log = logging.getLogger(__name__)

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

QUIESCENCE_DEPTH_LIMIT = 3


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}") from None


DIFFICULTY_DEPTHS = {
    "easy": 1,
    "medium": 2,
    "hard": 3,
}


@dataclass
class SearchSettings:
    difficulty: str = "medium"
    depths: Dict[str, int] = field(default_factory=lambda: DIFFICULTY_DEPTHS.copy())
    use_book: bool = True
    book_path: Optional[str] = None  # None means the bundled catalogue
    seed: Optional[int] = None


@dataclass
class EvalSettings:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    use_positional: bool = True
    check_bonus: int = 50
    mate_score: int = 999_999


@dataclass
class UIConfig:
    engine_name: str = "ChessBot"


@dataclass(frozen=True)
class SearchConfig:
    """Limits for one move computation."""

    max_depth: int
    difficulty: Difficulty = Difficulty.MEDIUM
    quiescence_depth_limit: int = QUIESCENCE_DEPTH_LIMIT

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def for_difficulty(cls, difficulty, settings: Optional[SearchSettings] = None) -> "SearchConfig":
        difficulty = Difficulty.parse(difficulty)
        depths = (settings or CONFIG.search).depths
        depth = depths.get(difficulty.value, DIFFICULTY_DEPTHS[difficulty.value])
        return cls(max_depth=depth, difficulty=difficulty)


@dataclass
class Config:
    search: SearchSettings = field(default_factory=SearchSettings)
    eval: EvalSettings = field(default_factory=EvalSettings)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if not hasattr(target, k):
                    log.warning("Ignoring unknown config key %s.%s", section, k)
                    continue
                current = getattr(target, k)
                if isinstance(current, dict) and isinstance(v, dict):
                    # partial tables override per key
                    current.update(v)
                else:
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ENGINE_CONFIG_TOML", "config.toml"))
# allow env override of difficulty for quick debugging
_override = os.environ.get("ENGINE_DIFFICULTY")
if _override:
    try:
        CONFIG.search.difficulty = Difficulty.parse(_override).value
    except ValueError:
        log.warning("Ignoring ENGINE_DIFFICULTY=%r", _override)
