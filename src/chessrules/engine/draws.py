"""Draw detection by full-history replay.

Every detector here rebuilds what it needs from the move list, starting from
the standard layout, with the same trusted executor live play uses.
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import IntEnum
from typing import TYPE_CHECKING, List, Sequence

from .board import (
    BISHOP,
    BOARD_SIZE,
    KING,
    KNIGHT,
    NONE,
    PAWN,
    QUEEN,
    ROOK,
    SQUARES,
    WHITE,
    col_of,
    color_of,
    destinations,
    execute_move,
    kind_of,
    make_piece,
    opponent,
    starting_board,
)
from .castling import CastlingRights
from .move import MoveRecord
from .zobrist import position_key

if TYPE_CHECKING:  # pragma: no cover
    from .position import Position


logger = logging.getLogger(__name__)


FIFTY_MOVE_PLIES = 100
# Prior occurrences needed; the position about to recur is the third.
REPETITION_PRIOR_MATCHES = 2


class DrawStatus(IntEnum):
    NO_DRAW = 0
    FIFTY_MOVE = 1
    REPETITION = 2


def draw_status(position: "Position") -> DrawStatus:
    """Classify the claimable draw available in ``position``.

    The fifty-move rule is checked first. Repetition is checked last because
    it only holds for the side to move.
    """
    logger.debug("retrieving draw status")
    if fifty_move_draw(position.moves):
        return DrawStatus.FIFTY_MOVE
    if draw_by_repetition(position):
        return DrawStatus.REPETITION
    return DrawStatus.NO_DRAW


# --- Fifty-move rule ---
def halfmove_clock(moves: Sequence[MoveRecord]) -> int:
    """Plies since the last pawn move or capture."""
    board = starting_board()
    clock = 0
    for m in moves:
        if kind_of(board[m.from_sq]) == PAWN or board[m.to_sq] != NONE:
            clock = 0
        else:
            clock += 1
        execute_move(board, m.from_sq, m.to_sq, m.piece)
    return clock


def fifty_move_draw(moves: Sequence[MoveRecord]) -> bool:
    logger.debug("checking for fifty-move draw")
    return halfmove_clock(moves) >= FIFTY_MOVE_PLIES


# --- Threefold repetition ---
def _window_start(moves: Sequence[MoveRecord]) -> int:
    """First ply after the last pawn move, capture or castling."""
    board = starting_board()
    start = 0
    for i, m in enumerate(moves):
        moving = board[m.from_sq]
        if kind_of(moving) == PAWN or board[m.to_sq] != NONE:
            start = i + 1
        elif kind_of(moving) == KING and abs(m.from_sq - m.to_sq) == 2:
            start = i + 1
        execute_move(board, m.from_sq, m.to_sq, m.piece)
    return start


def _allows_en_passant(board: List[int], prior_from: int, prior_to: int) -> bool:
    """Whether the double step ``prior_from -> prior_to`` can be taken e.p. on ``board``."""
    pawn = board[prior_to]
    if kind_of(pawn) != PAWN or abs(prior_to - prior_from) != 2 * BOARD_SIZE:
        return False
    enemy_pawn = make_piece(opponent(color_of(pawn)), PAWN)
    if col_of(prior_to) < BOARD_SIZE - 1 and board[prior_to + 1] == enemy_pawn:
        return True
    if col_of(prior_to) > 0 and board[prior_to - 1] == enemy_pawn:
        return True
    return False


class _Replay:
    """Board, side to move and castling flags rebuilt from the start."""

    def __init__(self) -> None:
        self.board = starting_board()
        self.castling = CastlingRights()
        self.has_move = WHITE

    def apply(self, m: MoveRecord) -> None:
        self.castling.note_move(self.has_move, m.from_sq, m.piece)
        execute_move(self.board, m.from_sq, m.to_sq, m.piece)
        self.has_move = opponent(self.has_move)

    def key(self) -> int:
        return position_key(self.board, self.has_move, self.castling.flags())


def _window_keys(moves: Sequence[MoveRecord]) -> "Counter[int]":
    """Count position keys that may take part in a repetition claim.

    Positions from the window start up to, but not including, the one
    before the current ply; the latest positions are never counted.
    """
    start = _window_start(moves)
    replay = _Replay()
    for m in moves[:start]:
        replay.apply(m)

    # A position where e.p. is possible differs from its later twin
    if 0 < start < len(moves):
        prior = moves[start - 1]
        if _allows_en_passant(replay.board, prior.from_sq, prior.to_sq):
            replay.apply(moves[start])
            start += 1

    keys: Counter[int] = Counter()
    for m in moves[start : len(moves) - 1]:
        keys[replay.key()] += 1
        replay.apply(m)
    return keys


def draw_by_repetition(position: "Position") -> bool:
    """Whether the side to move can claim a threefold repetition.

    Holds when the current position already occurred twice, or when a
    non-pawn, non-capturing, non-castling move of the side to move would
    produce a position that already occurred twice. Castling flags of the
    live position are used for every comparison.
    """
    keys = _window_keys(position.moves)
    if not keys:
        return False
    flags = position.castling.flags()
    board = position.board
    has_move = position.has_move()

    if keys[position_key(board, has_move, flags)] >= REPETITION_PRIOR_MATCHES:
        logger.debug("current position occurred twice before")
        return True

    reply = opponent(has_move)
    for from_sq, piece in enumerate(board):
        if piece == NONE or color_of(piece) != has_move or kind_of(piece) == PAWN:
            continue
        for to_sq in destinations(board, from_sq):
            if board[to_sq] != NONE:
                continue
            board[to_sq] = piece
            board[from_sq] = NONE
            seen = keys[position_key(board, reply, flags)]
            board[from_sq] = piece
            board[to_sq] = NONE
            if seen >= REPETITION_PRIOR_MATCHES:
                logger.debug("repetition available via %d -> %d", from_sq, to_sq)
                return True
    return False


# --- Insufficient material ---
def _square_shade(square: int) -> int:
    # Row and column are taken against the square count rather than the
    # board width, which reduces the shade to the parity of the index.
    row = square // SQUARES
    col = square % SQUARES
    return (row + col) % 2


def checkmate_impossible(board: Sequence[int]) -> bool:
    """Whether neither side can ever deliver mate with the material left.

    True only when no rook, queen or pawn remains and the minor pieces are
    either one knight without bishops, or bishops that all share a shade.
    Pawn blockades are not considered.
    """
    bishop_shade = NONE
    knight_found = False
    for square, piece in enumerate(board):
        kind = kind_of(piece)
        if kind in (ROOK, QUEEN, PAWN):
            return False
        if kind == KNIGHT:
            if knight_found or bishop_shade != NONE:
                return False
            knight_found = True
        elif kind == BISHOP:
            if knight_found:
                return False
            shade = _square_shade(square)
            if bishop_shade == NONE:
                bishop_shade = shade
            elif bishop_shade != shade:
                return False
    return True
