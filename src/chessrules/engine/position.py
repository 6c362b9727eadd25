from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from . import draws
from .board import (
    BISHOP,
    BLACK,
    BOARD_SIZE,
    KING,
    KINGSIDE,
    KNIGHT,
    NONE,
    PAWN,
    PROMOTION_KINDS,
    QUEEN,
    QUEENSIDE,
    ROOK,
    SQUARES,
    WHITE,
    castling_side,
    col_of,
    color_of,
    destinations,
    execute_move,
    is_in_check,
    kind_of,
    make_piece,
    opponent,
    path_clear,
    pawn_direction,
    pawn_start_row,
    placement_fen,
    promotion_row,
    row_of,
    starting_board,
)
from .castling import CastlingRights, original_king_square
from .move import MoveRecord, square_to_str


logger = logging.getLogger(__name__)


class Position:
    """One game's rules state: board, side to move, castling flags and history.

    A position is either a fresh game or the replay of a recorded move list
    through :meth:`move`, so reconstruction and live play share one code
    path. The move list is the only history kept; side to move, castling
    flags and en-passant eligibility all follow from it.

    Queries never raise for bad input: an illegal or malformed move is simply
    not a move. :meth:`move` trusts its caller and must only receive moves
    that passed :meth:`is_move` (or verified history).

    Not thread-safe: callers serialize access to one instance.
    """

    def __init__(self, moves: Optional[Iterable[MoveRecord]] = None) -> None:
        self._board: List[int] = starting_board()
        self._castling = CastlingRights()
        self._moves: List[MoveRecord] = []
        self._has_move = WHITE
        if moves is not None:
            for m in moves:
                self.move(m.from_sq, m.to_sq, m.piece)
            logger.debug("replayed %d moves", len(self._moves))

    # --- Accessors ---
    def has_move(self) -> int:
        return self._has_move

    def white_to_move(self) -> bool:
        return self._has_move == WHITE

    def get_piece(self, square: int) -> int:
        """Piece on ``square``, ``NONE`` when empty or off the board."""
        if not 0 <= square < SQUARES:
            return NONE
        return self._board[square]

    @property
    def board(self) -> List[int]:
        return list(self._board)

    @property
    def moves(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._moves)

    @property
    def castling(self) -> CastlingRights:
        return self._castling.copy()

    def copy(self) -> "Position":
        """Independent copy sharing no mutable state with this position."""
        clone = Position()
        clone._board = list(self._board)
        clone._castling = self._castling.copy()
        clone._moves = list(self._moves)
        clone._has_move = self._has_move
        return clone

    # --- Mutation ---
    def move(self, from_sq: int, to_sq: int, piece: int) -> None:
        """Apply a trusted move.

        No legality check happens here. ``piece`` is the piece that lands on
        ``to_sq`` (the promoted piece for promotions).
        """
        self._moves.append(MoveRecord(piece, from_sq, to_sq))
        self._castling.note_move(self._has_move, from_sq, piece)
        execute_move(self._board, from_sq, to_sq, piece)
        self._has_move = opponent(self._has_move)

    # --- Legality ---
    def is_move(self, from_sq: int, to_sq: int) -> bool:
        """Return True if moving from ``from_sq`` to ``to_sq`` is legal now."""
        if not 0 <= from_sq < SQUARES or not 0 <= to_sq < SQUARES:
            return False
        if from_sq == to_sq:
            return False
        moving = self._board[from_sq]
        if moving == NONE or color_of(moving) != self._has_move:
            return False
        target = self._board[to_sq]
        if target != NONE and color_of(target) == self._has_move:
            return False
        # Covers the castling destination too; only the pass-through square
        # is tested separately in _is_king_move.
        if self.is_in_check_after_move(self._has_move, from_sq, to_sq, moving):
            return False

        kind = kind_of(moving)
        if kind == QUEEN:
            return self._is_rook_move(from_sq, to_sq) or self._is_bishop_move(from_sq, to_sq)
        if kind == ROOK:
            return self._is_rook_move(from_sq, to_sq)
        if kind == BISHOP:
            return self._is_bishop_move(from_sq, to_sq)
        if kind == KING:
            return self._is_king_move(from_sq, to_sq)
        if kind == KNIGHT:
            return self._is_knight_move(from_sq, to_sq)
        if kind == PAWN:
            return self._is_pawn_move(from_sq, to_sq)
        return False

    def _is_rook_move(self, from_sq: int, to_sq: int) -> bool:
        if row_of(from_sq) != row_of(to_sq) and col_of(from_sq) != col_of(to_sq):
            return False
        return path_clear(self._board, from_sq, to_sq)

    def _is_bishop_move(self, from_sq: int, to_sq: int) -> bool:
        if abs(row_of(to_sq) - row_of(from_sq)) != abs(col_of(to_sq) - col_of(from_sq)):
            return False
        return path_clear(self._board, from_sq, to_sq)

    def _is_knight_move(self, from_sq: int, to_sq: int) -> bool:
        drow = abs(row_of(to_sq) - row_of(from_sq))
        dcol = abs(col_of(to_sq) - col_of(from_sq))
        return (drow, dcol) in ((1, 2), (2, 1))

    def _is_king_move(self, from_sq: int, to_sq: int) -> bool:
        color = self._has_move
        side = castling_side(color, from_sq, to_sq)
        if side == 0:
            return (
                abs(row_of(to_sq) - row_of(from_sq)) <= 1
                and abs(col_of(to_sq) - col_of(from_sq)) <= 1
            )

        if not self._castling.may_castle(color, side):
            return False
        if self.is_in_check(color):
            return False
        between = (from_sq + 1, from_sq + 2) if side == KINGSIDE else (
            from_sq - 1,
            from_sq - 2,
            from_sq - 3,
        )
        if any(self._board[sq] != NONE for sq in between):
            return False
        # Only the square the king crosses; the destination is covered by
        # the general check test in is_move().
        return not self.is_in_check_after_move(
            color, from_sq, from_sq + side, make_piece(color, KING)
        )

    def _is_pawn_move(self, from_sq: int, to_sq: int) -> bool:
        direction = pawn_direction(self._has_move)
        drow = row_of(to_sq) - row_of(from_sq)
        dcol = col_of(to_sq) - col_of(from_sq)

        if dcol == 0:
            if self._board[to_sq] != NONE:
                return False
            if drow == direction:
                return True
            if row_of(from_sq) == pawn_start_row(self._has_move) and drow == 2 * direction:
                return self._board[from_sq + direction * BOARD_SIZE] == NONE
            return False

        if abs(dcol) == 1:
            if drow != direction:
                return False
            if to_sq == self.en_passant_square():
                return True
            return self._board[to_sq] != NONE
        return False

    def en_passant_square(self) -> Optional[int]:
        """Square a pawn may capture onto en passant this ply, if any.

        Derived from the last history entry only, so it vanishes after one
        ply.
        """
        if not self._moves:
            return None
        last = self._moves[-1]
        if kind_of(last.piece) != PAWN:
            return None
        if last.to_sq - last.from_sq == 2 * BOARD_SIZE:
            return last.from_sq + BOARD_SIZE
        if last.from_sq - last.to_sq == 2 * BOARD_SIZE:
            return last.to_sq + BOARD_SIZE
        return None

    # --- Check detection ---
    def is_in_check(self, color: int) -> bool:
        return is_in_check(self._board, color)

    def is_in_check_after_move(self, color: int, from_sq: int, to_sq: int, piece: int) -> bool:
        """Whether ``color``'s king is attacked once the move is played.

        The move is executed on a scratch copy of the board; this position is
        never touched. Works for a move by either side, so it also answers
        "does this move give check".
        """
        scratch = list(self._board)
        execute_move(scratch, from_sq, to_sq, piece)
        return is_in_check(scratch, color)

    # --- Terminal detection ---
    def legal_move_exists(self) -> bool:
        # Castling is never the only legal move, so it is not generated here.
        ep = self.en_passant_square()
        for from_sq, piece in enumerate(self._board):
            if piece == NONE or color_of(piece) != self._has_move:
                continue
            for to_sq in destinations(self._board, from_sq, ep):
                if not self.is_in_check_after_move(self._has_move, from_sq, to_sq, piece):
                    return True
        return False

    def checkmate(self) -> bool:
        if not self.is_in_check(self._has_move):
            return False
        return not self.legal_move_exists()

    def stalemate(self) -> bool:
        if self.is_in_check(self._has_move):
            return False
        return not self.legal_move_exists()

    def checkmate_impossible(self) -> bool:
        return draws.checkmate_impossible(self._board)

    def draw_status(self) -> draws.DrawStatus:
        return draws.draw_status(self)

    def legal_moves(self) -> List[MoveRecord]:
        """Every legal move for the side to move, castling included.

        A promoting pawn move yields one record per promotion piece.
        """
        color = self._has_move
        ep = self.en_passant_square()
        king_home = original_king_square(color)
        moves: List[MoveRecord] = []
        for from_sq, piece in enumerate(self._board):
            if piece == NONE or color_of(piece) != color:
                continue
            targets = destinations(self._board, from_sq, ep)
            if piece == make_piece(color, KING) and from_sq == king_home:
                targets = targets + [from_sq + 2, from_sq - 2]
            for to_sq in targets:
                if not self.is_move(from_sq, to_sq):
                    continue
                if self.is_promotion(from_sq, to_sq):
                    moves.extend(
                        MoveRecord(make_piece(color, kind), from_sq, to_sq)
                        for kind in PROMOTION_KINDS
                    )
                else:
                    moves.append(MoveRecord(piece, from_sq, to_sq))
        return moves

    # --- Move classification helpers ---
    def is_promotion(self, from_sq: int, to_sq: int) -> bool:
        """A pawn of the side to move reaching its last rank."""
        if not 0 <= from_sq < SQUARES or not 0 <= to_sq < SQUARES:
            return False
        piece = self._board[from_sq]
        if piece != make_piece(self._has_move, PAWN):
            return False
        return row_of(to_sq) == promotion_row(self._has_move)

    def is_en_passant(self, from_sq: int, to_sq: int) -> bool:
        if not 0 <= from_sq < SQUARES or not 0 <= to_sq < SQUARES:
            return False
        return (
            kind_of(self._board[from_sq]) == PAWN
            and self._board[to_sq] == NONE
            and col_of(from_sq) != col_of(to_sq)
        )

    def is_castling(self, from_sq: int, to_sq: int) -> bool:
        if not 0 <= from_sq < SQUARES or not 0 <= to_sq < SQUARES:
            return False
        piece = self._board[from_sq]
        if kind_of(piece) != KING:
            return False
        return castling_side(color_of(piece), from_sq, to_sq) != 0

    # --- Notation ---
    def to_fen(self) -> str:
        """Serialize the current state into a FEN string.

        Castling availability reflects the monotonic flags only; it does not
        check that the rook is still on its square.
        """
        rights = "".join(
            ch
            for ch, color, side in (
                ("K", WHITE, KINGSIDE),
                ("Q", WHITE, QUEENSIDE),
                ("k", BLACK, KINGSIDE),
                ("q", BLACK, QUEENSIDE),
            )
            if self._castling.may_castle(color, side)
        )
        ep = self.en_passant_square()
        stm = "w" if self._has_move == WHITE else "b"
        return (
            f"{placement_fen(self._board)} {stm} {rights or '-'} "
            f"{square_to_str(ep) if ep is not None else '-'} "
            f"{draws.halfmove_clock(self._moves)} {len(self._moves) // 2 + 1}"
        )

    def __repr__(self) -> str:
        return f"Position({self.to_fen()!r})"
