from __future__ import annotations

from typing import List, Sequence

from .board import BLACK, NONE, PIECES, SQUARES


MASK64 = 0xFFFFFFFFFFFFFFFF
CASTLING_FLAGS = 6


class _SplitMix64:
    def __init__(self, seed: int) -> None:
        self.state = seed & MASK64

    def next(self) -> int:
        # Deterministic 64-bit SplitMix64
        self.state = (self.state + 0x9E3779B97F4A7C15) & MASK64
        z = self.state
        z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & MASK64
        z = (z ^ (z >> 27)) * 0x94D049BB133111EB & MASK64
        z = z ^ (z >> 31)
        return z & MASK64


class Zobrist:
    """Zobrist keys for position identity.

    Table layout:
    - piece_square[12][64]: indexed by piece code (color * 6 + kind)
    - side_to_move: toggled when black is to move
    - castling[6]: one key per monotonic castling flag, in
      ``CastlingRights.flags()`` order
    """

    piece_square: List[List[int]]
    side_to_move: int
    castling: List[int]

    def __init__(self, seed: int = 0xC0FFEE_F00D_DEAD) -> None:
        prng = _SplitMix64(seed)
        self.piece_square = [[prng.next() for _ in range(SQUARES)] for _ in range(2 * PIECES)]
        self.side_to_move = prng.next()
        self.castling = [prng.next() for _ in range(CASTLING_FLAGS)]


# Global deterministic table
ZOBRIST = Zobrist()


def position_key(board: Sequence[int], has_move: int, castling_flags: Sequence[bool]) -> int:
    """Compute the 64-bit key of (board layout, side to move, castling flags).

    Two positions that agree on all three components always share a key.
    En passant availability is not part of the key.
    """
    h = 0
    for sq, piece in enumerate(board):
        if piece != NONE:
            h ^= ZOBRIST.piece_square[piece][sq]
    if has_move == BLACK:
        h ^= ZOBRIST.side_to_move
    for i, flag in enumerate(castling_flags):
        if flag:
            h ^= ZOBRIST.castling[i]
    return h & MASK64
