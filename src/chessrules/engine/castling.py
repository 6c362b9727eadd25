from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .board import BOARD_SIZE, KING, KINGSIDE, QUEENSIDE, back_row, make_piece


def original_king_square(color: int) -> int:
    return back_row(color) * BOARD_SIZE + 4


def king_rook_square(color: int) -> int:
    return back_row(color) * BOARD_SIZE + BOARD_SIZE - 1


def queen_rook_square(color: int) -> int:
    return back_row(color) * BOARD_SIZE


def _pair() -> List[bool]:
    return [False, False]


@dataclass
class CastlingRights:
    """Per-color "has moved" flags gating castling.

    Flags are monotonic: once set they are never cleared, even when the rook
    in question is later captured. A flag is set by whatever piece leaves
    the original rook square, and by any king move.
    """

    king_moved: List[bool] = field(default_factory=_pair)
    king_rook_moved: List[bool] = field(default_factory=_pair)
    queen_rook_moved: List[bool] = field(default_factory=_pair)

    def note_move(self, color: int, from_sq: int, piece: int) -> None:
        """Record a move by ``color`` that lands ``piece`` after leaving ``from_sq``."""
        if piece == make_piece(color, KING):
            self.king_moved[color] = True
        if from_sq == queen_rook_square(color):
            self.queen_rook_moved[color] = True
        if from_sq == king_rook_square(color):
            self.king_rook_moved[color] = True

    def may_castle(self, color: int, side: int) -> bool:
        if self.king_moved[color]:
            return False
        if side == KINGSIDE:
            return not self.king_rook_moved[color]
        if side == QUEENSIDE:
            return not self.queen_rook_moved[color]
        return False

    def flags(self) -> Tuple[bool, ...]:
        """Hashable snapshot, ordered king / king rook / queen rook, white first."""
        return (
            *self.king_moved,
            *self.king_rook_moved,
            *self.queen_rook_moved,
        )

    def copy(self) -> "CastlingRights":
        return CastlingRights(
            king_moved=list(self.king_moved),
            king_rook_moved=list(self.king_rook_moved),
            queen_rook_moved=list(self.queen_rook_moved),
        )
