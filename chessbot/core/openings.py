"""Opening names for a game's SAN move history, for display."""

from typing import List, Sequence, Tuple

# (name, SAN line); the longest line matching the start of the game wins.
_LINES = [
    # King's Pawn Openings (1.e4)
    ("Ruy Lopez", "e4 e5 Nf3 Nc6 Bb5"),
    ("Ruy Lopez: Berlin Defense", "e4 e5 Nf3 Nc6 Bb5 Nf6"),
    ("Ruy Lopez: Morphy Defense", "e4 e5 Nf3 Nc6 Bb5 a6"),
    ("Ruy Lopez: Exchange Variation", "e4 e5 Nf3 Nc6 Bb5 a6 Bxc6"),
    ("Ruy Lopez: Closed", "e4 e5 Nf3 Nc6 Bb5 a6 Ba4 Nf6 O-O Be7"),
    ("Ruy Lopez: Marshall Attack", "e4 e5 Nf3 Nc6 Bb5 a6 Ba4 Nf6 O-O Be7 Re1 b5 Bb3 O-O c3 d5"),

    ("Italian Game", "e4 e5 Nf3 Nc6 Bc4"),
    ("Giuoco Piano", "e4 e5 Nf3 Nc6 Bc4 Bc5"),
    ("Italian Game: Two Knights Defense", "e4 e5 Nf3 Nc6 Bc4 Nf6"),
    ("Fried Liver Attack", "e4 e5 Nf3 Nc6 Bc4 Nf6 Ng5 d5 exd5 Nxd5 Nxf7"),
    ("Evans Gambit", "e4 e5 Nf3 Nc6 Bc4 Bc5 b4"),

    ("Scotch Game", "e4 e5 Nf3 Nc6 d4"),
    ("Scotch Game", "e4 e5 Nf3 Nc6 d4 exd4"),

    ("Petrov's Defense", "e4 e5 Nf3 Nf6"),
    ("King's Gambit", "e4 e5 f4"),
    ("King's Gambit Accepted", "e4 e5 f4 exf4"),
    ("King's Gambit Declined", "e4 e5 f4 Bc5"),

    ("Sicilian Defense", "e4 c5"),
    ("Sicilian: Open", "e4 c5 Nf3 d6 d4"),
    ("Sicilian: Najdorf", "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 a6"),
    ("Sicilian: Dragon", "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 g6"),
    ("Sicilian: Sveshnikov", "e4 c5 Nf3 Nc6 d4 cxd4 Nxd4 Nf6 Nc3 e5"),
    ("Sicilian: Accelerated Dragon", "e4 c5 Nf3 Nc6 d4 cxd4 Nxd4 g6"),
    ("Sicilian: Closed", "e4 c5 Nc3"),
    ("Sicilian: Alapin", "e4 c5 c3"),

    ("French Defense", "e4 e6"),
    ("French Defense", "e4 e6 d4 d5"),
    ("French: Winawer", "e4 e6 d4 d5 Nc3 Bb4"),
    ("French: Tarrasch", "e4 e6 d4 d5 Nd2"),
    ("French: Advance", "e4 e6 d4 d5 e5"),

    ("Caro-Kann Defense", "e4 c6"),
    ("Caro-Kann", "e4 c6 d4 d5"),
    ("Caro-Kann: Classical", "e4 c6 d4 d5 Nc3 dxe4 Nxe4"),
    ("Caro-Kann: Advance", "e4 c6 d4 d5 e5"),
    ("Caro-Kann: Panov Attack", "e4 c6 d4 d5 exd5 cxd5 c4"),

    ("Pirc Defense", "e4 d6"),
    ("Pirc Defense", "e4 d6 d4 Nf6 Nc3 g6"),
    ("Modern Defense", "e4 g6"),
    ("Scandinavian Defense", "e4 d5"),
    ("Alekhine's Defense", "e4 Nf6"),

    # Queen's Pawn Openings (1.d4)
    ("Queen's Gambit", "d4 d5 c4"),
    ("Queen's Gambit Declined", "d4 d5 c4 e6"),
    ("Queen's Gambit Accepted", "d4 d5 c4 dxc4"),
    ("Slav Defense", "d4 d5 c4 c6"),
    ("Semi-Slav Defense", "d4 d5 c4 c6 Nf3 Nf6 Nc3 e6"),

    ("King's Indian Defense", "d4 Nf6 c4 g6"),
    ("King's Indian", "d4 Nf6 c4 g6 Nc3 Bg7 e4 d6"),
    ("Grunfeld Defense", "d4 Nf6 c4 g6 Nc3 d5"),

    ("Nimzo-Indian Defense", "d4 Nf6 c4 e6 Nc3 Bb4"),
    ("Queen's Indian Defense", "d4 Nf6 c4 e6 Nf3 b6"),
    ("Bogo-Indian Defense", "d4 Nf6 c4 e6 Nf3 Bb4+"),

    ("Benoni Defense", "d4 Nf6 c4 c5"),
    ("Modern Benoni", "d4 Nf6 c4 c5 d5"),
    ("Dutch Defense", "d4 f5"),

    ("London System", "d4 Nf6 Nf3 d5 Bf4"),
    ("Torre Attack", "d4 Nf6 Nf3 e6 Bg5"),
    ("Trompowsky Attack", "d4 Nf6 Bg5"),
    ("Catalan Opening", "d4 Nf6 c4 e6 g3"),

    # Flank Openings
    ("English Opening", "c4"),
    ("English: Symmetrical", "c4 c5"),
    ("English: Reversed Sicilian", "c4 e5"),

    ("Reti Opening", "Nf3"),
    ("Reti: King's Indian Attack", "Nf3 d5 g3"),

    ("Bird's Opening", "f4"),
    ("Polish Opening", "b4"),
    ("Hungarian Opening", "g3"),

    # Other
    ("Vienna Game", "e4 e5 Nc3"),
    ("Four Knights Game", "e4 e5 Nf3 Nc6 Nc3 Nf6"),
    ("Philidor Defense", "e4 e5 Nf3 d6"),
    ("Elephant Gambit", "e4 e5 Nf3 d5"),
    ("Latvian Gambit", "e4 e5 Nf3 f5"),
]

OPENINGS: List[Tuple[str, Tuple[str, ...]]] = [(name, tuple(line.split())) for name, line in _LINES]

_FIRST_MOVE_NAMES = {
    "e4": "King's Pawn Opening",
    "d4": "Queen's Pawn Opening",
    "c4": "English Opening",
    "Nf3": "Reti Opening",
}

_SHORT_SUFFIXES = (": Classical", ": Main Line", " Opening", " Game", " Defense", " Variation")


def detect_opening(sans: Sequence[str]) -> str:
    """Most specific opening name for a SAN history such as ["e4", "e5", "Nf3"]."""
    moves = list(sans)
    if not moves:
        return "Starting Position"

    best_name, best_len = None, 0
    for name, line in OPENINGS:
        if len(line) > best_len and len(line) <= len(moves) and tuple(moves[:len(line)]) == line:
            best_name, best_len = name, len(line)
    if best_name is not None:
        return best_name

    if len(moves) == 1:
        return _FIRST_MOVE_NAMES.get(moves[0], "Uncommon Opening")
    if moves[0] == "e4":
        return "King's Pawn Game" if moves[1] == "e5" else "King's Pawn Opening"
    if moves[0] == "d4":
        return "Queen's Pawn Opening"
    return "Custom Opening"


def short_opening_name(sans: Sequence[str]) -> str:
    name = detect_opening(sans)
    for suffix in _SHORT_SUFFIXES:
        name = name.replace(suffix, "")
    return name
