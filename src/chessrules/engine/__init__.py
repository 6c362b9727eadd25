from .board import (
    BISHOP,
    BLACK,
    KING,
    KNIGHT,
    NONE,
    PAWN,
    QUEEN,
    ROOK,
    WHITE,
    make_piece,
)
from .draws import DrawStatus
from .game import Game, GameOutcome
from .move import Move, MoveRecord, parse_uci, square_to_str, str_to_square
from .position import Position

__all__ = [
    "BISHOP",
    "BLACK",
    "KING",
    "KNIGHT",
    "NONE",
    "PAWN",
    "QUEEN",
    "ROOK",
    "WHITE",
    "DrawStatus",
    "Game",
    "GameOutcome",
    "Move",
    "MoveRecord",
    "Position",
    "make_piece",
    "parse_uci",
    "square_to_str",
    "str_to_square",
]
