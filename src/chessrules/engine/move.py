from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import (
    BOARD_SIZE,
    CHAR_TO_KIND,
    KIND_TO_CHAR,
    PROMOTION_KINDS,
    SQUARES,
    col_of,
    row_of,
)


PROMOTION_PIECES = {KIND_TO_CHAR[k] for k in PROMOTION_KINDS}
FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class MoveRecord:
    """One half-move of game history.

    Attributes:
        piece (int): Piece that landed on ``to_sq`` (the promoted piece for
            promotions).
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
    """

    piece: int
    from_sq: int
    to_sq: int


@dataclass(frozen=True)
class Move:
    """Move request as entered by a player.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
        promotion (Optional[int]): Piece kind to promote to, if any.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[int] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = KIND_TO_CHAR[self.promotion] if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo


def parse_uci(uci: str) -> Move:
    """Build a move request from UCI text such as ``"g1f3"`` or ``"b7a8q"``.

    The promotion letter is case-insensitive; only queen, rook, knight and
    bishop are accepted.

    Raises:
        ValueError: On a bad length, square name or promotion letter.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    promotion: Optional[int] = None
    if len(uci) == 5:
        letter = uci[4].lower()
        if letter not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {letter!r}")
        promotion = CHAR_TO_KIND[letter]
    return Move(str_to_square(uci[:2]), str_to_square(uci[2:4]), promotion)


def str_to_square(name: str) -> int:
    """Square index (a1=0 .. h8=63) for a name like ``"e4"``; raises ValueError."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        raise ValueError(f"invalid square: {name!r}")
    return RANKS.index(name[1]) * BOARD_SIZE + FILES.index(name[0])


def square_to_str(square: int) -> str:
    """Name of ``square``; raises ValueError when it is off the board."""
    if not 0 <= square < SQUARES:
        raise ValueError(f"invalid square index: {square}")
    return FILES[col_of(square)] + RANKS[row_of(square)]
