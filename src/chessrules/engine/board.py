from __future__ import annotations

from typing import Iterator, List, Optional, Tuple


# Colors and piece kinds. A piece is encoded as ``color * PIECES + kind``;
# the kind order doubles as the promotion menu order.
WHITE, BLACK = 0, 1
QUEEN, ROOK, KNIGHT, BISHOP, PAWN, KING = range(6)
PIECES = 6
NONE = -1

BOARD_SIZE = 8
SQUARES = BOARD_SIZE * BOARD_SIZE

PROMOTION_KINDS = (QUEEN, ROOK, KNIGHT, BISHOP)

# Castling side codes returned by castling_side()
KINGSIDE = 1
QUEENSIDE = -1

KIND_TO_CHAR = {
    QUEEN: "q",
    ROOK: "r",
    KNIGHT: "n",
    BISHOP: "b",
    PAWN: "p",
    KING: "k",
}
CHAR_TO_KIND = {v: k for k, v in KIND_TO_CHAR.items()}

_BACK_RANK = (ROOK, KNIGHT, BISHOP, QUEEN, KING, BISHOP, KNIGHT, ROOK)

# (row, col) offsets
KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))
STRAIGHT_DIRECTIONS = ((0, -1), (0, 1), (-1, 0), (1, 0))
DIAGONAL_DIRECTIONS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def make_piece(color: int, kind: int) -> int:
    return color * PIECES + kind


def color_of(piece: int) -> int:
    """Color of ``piece``, or ``NONE`` for an empty square."""
    if piece == NONE:
        return NONE
    return piece // PIECES


def kind_of(piece: int) -> int:
    """Kind of ``piece``, or ``NONE`` for an empty square.

    ``NONE % PIECES`` would be ``KING`` in Python, so empty squares are
    handled explicitly.
    """
    if piece == NONE:
        return NONE
    return piece % PIECES


def opponent(color: int) -> int:
    return (color + 1) % 2


def row_of(sq: int) -> int:
    return sq // BOARD_SIZE


def col_of(sq: int) -> int:
    return sq % BOARD_SIZE


def on_board(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def pawn_direction(color: int) -> int:
    return 1 if color == WHITE else -1


def pawn_start_row(color: int) -> int:
    return 1 if color == WHITE else BOARD_SIZE - 2


def back_row(color: int) -> int:
    return 0 if color == WHITE else BOARD_SIZE - 1


def promotion_row(color: int) -> int:
    return back_row((color + 1) % 2)


def starting_board() -> List[int]:
    """Return a fresh 64-cell array holding the standard starting layout.

    Returns:
        List[int]: Piece codes indexed by square (a1=0 .. h8=63), ``NONE``
            for empty squares.
    """
    board = [NONE] * SQUARES
    for col, kind in enumerate(_BACK_RANK):
        board[back_row(WHITE) * BOARD_SIZE + col] = make_piece(WHITE, kind)
        board[back_row(BLACK) * BOARD_SIZE + col] = make_piece(BLACK, kind)
        board[pawn_start_row(WHITE) * BOARD_SIZE + col] = make_piece(WHITE, PAWN)
        board[pawn_start_row(BLACK) * BOARD_SIZE + col] = make_piece(BLACK, PAWN)
    return board


def find_piece(board: List[int], piece: int) -> int:
    """Return the first square holding ``piece`` or ``NONE`` when absent."""
    for sq, p in enumerate(board):
        if p == piece:
            return sq
    return NONE


def castling_side(color: int, from_sq: int, to_sq: int) -> int:
    """Classify a king step by its squares only.

    Does not look at the board: the caller must know a king of ``color``
    stands on ``from_sq``.

    Returns:
        int: ``KINGSIDE``, ``QUEENSIDE`` or ``0`` when the squares do not
            describe a castling move.
    """
    orig_row = back_row(color)
    if row_of(from_sq) == orig_row and col_of(from_sq) == 4 and row_of(to_sq) == orig_row:
        if col_of(to_sq) - col_of(from_sq) == 2:
            return KINGSIDE
        if col_of(to_sq) - col_of(from_sq) == -2:
            return QUEENSIDE
    return 0


def execute_move(board: List[int], from_sq: int, to_sq: int, piece: int) -> None:
    """Apply a move to ``board`` in place without any validation.

    Handles en passant (a pawn stepping diagonally onto an empty square
    removes the pawn behind the destination) and castling (a king moving two
    columns from its original square drags the rook along). ``piece`` is the
    piece that lands on ``to_sq``, i.e. the promoted piece for promotions.
    """
    moving = board[from_sq]
    if kind_of(moving) == KING:
        color = color_of(moving)
        side = castling_side(color, from_sq, to_sq)
        board[to_sq] = piece
        board[from_sq] = NONE
        if side == KINGSIDE:
            board[to_sq - 1] = make_piece(color, ROOK)
            board[to_sq + 1] = NONE
        elif side == QUEENSIDE:
            board[to_sq + 1] = make_piece(color, ROOK)
            board[to_sq - 2] = NONE
        return

    if kind_of(moving) == PAWN and board[to_sq] == NONE and col_of(from_sq) != col_of(to_sq):
        # Diagonal step onto an empty square can only be en passant; for a
        # simulated backward step the captured square may be off the board
        captured = to_sq + BOARD_SIZE if color_of(piece) == BLACK else to_sq - BOARD_SIZE
        if 0 <= captured < SQUARES:
            board[captured] = NONE
    board[to_sq] = piece
    board[from_sq] = NONE


def squares_between(from_sq: int, to_sq: int) -> Iterator[int]:
    """Yield the squares strictly between two squares on a shared line.

    Yields nothing when the squares are not on a common row, column or
    diagonal.
    """
    drow = row_of(to_sq) - row_of(from_sq)
    dcol = col_of(to_sq) - col_of(from_sq)
    if drow != 0 and dcol != 0 and abs(drow) != abs(dcol):
        return
    steps = max(abs(drow), abs(dcol))
    if steps == 0:
        return
    step = (drow // steps) * BOARD_SIZE + dcol // steps
    for i in range(1, steps):
        yield from_sq + i * step


def path_clear(board: List[int], from_sq: int, to_sq: int) -> bool:
    return all(board[sq] == NONE for sq in squares_between(from_sq, to_sq))


def _first_piece_on_ray(board: List[int], row: int, col: int, drow: int, dcol: int) -> int:
    r, c = row + drow, col + dcol
    while on_board(r, c):
        piece = board[r * BOARD_SIZE + c]
        if piece != NONE:
            return piece
        r += drow
        c += dcol
    return NONE


def is_in_check(board: List[int], color: int) -> bool:
    """Return True if the king of ``color`` is attacked on ``board``.

    Covers: adjacent enemy king, enemy pawns, the eight slider rays
    (stopping at the first occupied square) and knight jumps.
    """
    king_sq = find_piece(board, make_piece(color, KING))
    if king_sq == NONE:
        return False
    enemy = opponent(color)
    row, col = row_of(king_sq), col_of(king_sq)

    enemy_king = make_piece(enemy, KING)
    for drow, dcol in KING_OFFSETS:
        r, c = row + drow, col + dcol
        if on_board(r, c) and board[r * BOARD_SIZE + c] == enemy_king:
            return True

    # Enemy pawns attack from the row in front of the king
    enemy_pawn = make_piece(enemy, PAWN)
    r = row + pawn_direction(color)
    for dcol in (-1, 1):
        c = col + dcol
        if on_board(r, c) and board[r * BOARD_SIZE + c] == enemy_pawn:
            return True

    straight = (make_piece(enemy, ROOK), make_piece(enemy, QUEEN))
    for drow, dcol in STRAIGHT_DIRECTIONS:
        if _first_piece_on_ray(board, row, col, drow, dcol) in straight:
            return True
    diagonal = (make_piece(enemy, BISHOP), make_piece(enemy, QUEEN))
    for drow, dcol in DIAGONAL_DIRECTIONS:
        if _first_piece_on_ray(board, row, col, drow, dcol) in diagonal:
            return True

    enemy_knight = make_piece(enemy, KNIGHT)
    for drow, dcol in KNIGHT_OFFSETS:
        r, c = row + drow, col + dcol
        if on_board(r, c) and board[r * BOARD_SIZE + c] == enemy_knight:
            return True
    return False


def _slides(
    board: List[int], from_sq: int, color: int, directions: Tuple[Tuple[int, int], ...]
) -> List[int]:
    targets: List[int] = []
    row, col = row_of(from_sq), col_of(from_sq)
    for drow, dcol in directions:
        r, c = row + drow, col + dcol
        while on_board(r, c):
            sq = r * BOARD_SIZE + c
            piece = board[sq]
            if piece == NONE:
                targets.append(sq)
            else:
                if color_of(piece) != color:
                    targets.append(sq)
                break
            r += drow
            c += dcol
    return targets


def _steps(
    board: List[int], from_sq: int, color: int, offsets: Tuple[Tuple[int, int], ...]
) -> List[int]:
    targets: List[int] = []
    row, col = row_of(from_sq), col_of(from_sq)
    for drow, dcol in offsets:
        r, c = row + drow, col + dcol
        if not on_board(r, c):
            continue
        sq = r * BOARD_SIZE + c
        if color_of(board[sq]) != color:
            targets.append(sq)
    return targets


def _pawn_targets(
    board: List[int], from_sq: int, color: int, ep_square: Optional[int]
) -> List[int]:
    targets: List[int] = []
    direction = pawn_direction(color)
    row, col = row_of(from_sq), col_of(from_sq)
    ahead = row + direction
    if not 0 <= ahead < BOARD_SIZE:
        return targets

    one = from_sq + direction * BOARD_SIZE
    if board[one] == NONE:
        targets.append(one)
        if row == pawn_start_row(color):
            two = one + direction * BOARD_SIZE
            if board[two] == NONE:
                targets.append(two)

    for dcol in (-1, 1):
        if not 0 <= col + dcol < BOARD_SIZE:
            continue
        sq = one + dcol
        target = board[sq]
        if target != NONE and color_of(target) != color:
            targets.append(sq)
        elif sq == ep_square:
            targets.append(sq)
    return targets


def destinations(board: List[int], from_sq: int, ep_square: Optional[int] = None) -> List[int]:
    """Return pseudo-legal destinations for the piece on ``from_sq``.

    Geometry and blocking only: moves that leave the mover's king in check
    are included and castling is never generated.

    Args:
        board (List[int]): Board array to read.
        from_sq (int): Square of the piece to move.
        ep_square (Optional[int]): Current en-passant target, if any.

    Returns:
        List[int]: Destination squares (empty for an empty ``from_sq``).
    """
    piece = board[from_sq]
    color = color_of(piece)
    kind = kind_of(piece)
    if kind == PAWN:
        return _pawn_targets(board, from_sq, color, ep_square)
    if kind == ROOK:
        return _slides(board, from_sq, color, STRAIGHT_DIRECTIONS)
    if kind == BISHOP:
        return _slides(board, from_sq, color, DIAGONAL_DIRECTIONS)
    if kind == QUEEN:
        return _slides(board, from_sq, color, STRAIGHT_DIRECTIONS) + _slides(
            board, from_sq, color, DIAGONAL_DIRECTIONS
        )
    if kind == KNIGHT:
        return _steps(board, from_sq, color, KNIGHT_OFFSETS)
    if kind == KING:
        return _steps(board, from_sq, color, KING_OFFSETS)
    return []


def piece_char(piece: int) -> Optional[str]:
    """FEN character for ``piece`` (uppercase = white), ``None`` if empty."""
    if piece == NONE:
        return None
    ch = KIND_TO_CHAR[kind_of(piece)]
    return ch.upper() if color_of(piece) == WHITE else ch


def placement_fen(board: List[int]) -> str:
    """Serialize the piece placement field of a FEN string."""
    ranks: List[str] = []
    for row in range(BOARD_SIZE - 1, -1, -1):
        run = 0
        out = []
        for col in range(BOARD_SIZE):
            ch = piece_char(board[row * BOARD_SIZE + col])
            if ch is None:
                run += 1
            else:
                if run > 0:
                    out.append(str(run))
                    run = 0
                out.append(ch)
        if run > 0:
            out.append(str(run))
        ranks.append("".join(out))
    return "/".join(ranks)
