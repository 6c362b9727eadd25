from __future__ import annotations

from chessrules.engine.board import (
    BISHOP,
    BLACK,
    KING,
    KNIGHT,
    NONE,
    PAWN,
    QUEEN,
    ROOK,
    SQUARES,
    WHITE,
    make_piece,
)
from chessrules.engine.draws import (
    DrawStatus,
    checkmate_impossible,
    fifty_move_draw,
    halfmove_clock,
)
from chessrules.engine.move import parse_uci
from chessrules.engine.move import str_to_square as sq
from chessrules.engine.position import Position

KNIGHT_SHUFFLE = ("g1f3", "g8f6", "f3g1", "f6g8")


def play(pos: Position, *ucis: str) -> Position:
    for uci in ucis:
        mv = parse_uci(uci)
        assert pos.is_move(mv.from_sq, mv.to_sq), uci
        pos.move(mv.from_sq, mv.to_sq, pos.get_piece(mv.from_sq))
    return pos


def shuffle(plies: int) -> tuple:
    return tuple(KNIGHT_SHUFFLE[i % 4] for i in range(plies))


def kings(*extra) -> list:
    board = [NONE] * SQUARES
    board[sq("e1")] = make_piece(WHITE, KING)
    board[sq("e8")] = make_piece(BLACK, KING)
    for name, piece in extra:
        board[sq(name)] = piece
    return board


# --- Repetition ---
def test_no_repetition_before_third_occurrence() -> None:
    for plies in (4, 5, 6):
        pos = play(Position(), *shuffle(plies))
        assert pos.draw_status() == DrawStatus.NO_DRAW, plies


def test_repetition_claimable_by_move_that_repeats() -> None:
    # Black's f6g8 would reach the position after 4 plies for the third time
    pos = play(Position(), *shuffle(7))
    assert pos.has_move() == BLACK
    assert pos.draw_status() == DrawStatus.REPETITION


def test_repetition_of_current_position() -> None:
    pos = play(Position(), *shuffle(8))
    assert pos.draw_status() == DrawStatus.REPETITION


def test_castling_flags_distinguish_positions() -> None:
    king_walk = ("e1e2", "e8e7", "e2e1", "e7e8")
    pos = play(Position(), "e2e4", "e7e5", *king_walk, *king_walk)
    # Same layout as after 1.e4 e5, but the kings have lost castling rights
    assert pos.draw_status() == DrawStatus.NO_DRAW
    play(pos, *king_walk)
    assert pos.draw_status() == DrawStatus.REPETITION


def test_repetition_counts_from_last_pawn_move() -> None:
    pos = play(Position(), *shuffle(4), "e2e3", "e7e6", *shuffle(6))
    assert pos.draw_status() == DrawStatus.NO_DRAW
    play(pos, "f3g1")
    assert pos.draw_status() == DrawStatus.REPETITION


def test_en_passant_chance_delays_repetition_window() -> None:
    # d7d5 lands next to the e5 pawn; the position right after it can be
    # taken en passant and never counts toward a repetition
    pos = play(Position(), "e2e4", "a7a6", "e4e5", "d7d5", *shuffle(7))
    assert pos.draw_status() == DrawStatus.NO_DRAW
    play(pos, "f6g8")
    assert pos.draw_status() == DrawStatus.REPETITION

    # Same shape with a double step nowhere near a white pawn
    pos = play(Position(), "e2e4", "a7a6", "e4e5", "h7h5", *shuffle(7))
    assert pos.draw_status() == DrawStatus.REPETITION


def test_window_starting_on_last_ply() -> None:
    assert play(Position(), "e2e4").draw_status() == DrawStatus.NO_DRAW
    assert play(Position(), "e2e4", "d7d5", "e4d5").draw_status() == DrawStatus.NO_DRAW
    pos = play(Position(), "e2e4", "a7a6", "e4e5", "d7d5")
    assert pos.draw_status() == DrawStatus.NO_DRAW


# --- Fifty-move rule ---
def test_fifty_move_rule_after_hundred_quiet_plies() -> None:
    pos = play(Position(), *shuffle(99))
    assert halfmove_clock(pos.moves) == 99
    assert not fifty_move_draw(pos.moves)
    play(pos, *shuffle(100)[99:])
    assert halfmove_clock(pos.moves) == 100
    assert pos.draw_status() == DrawStatus.FIFTY_MOVE


def test_capture_resets_fifty_move_count() -> None:
    pos = play(Position(), "b1c3", "d7d5", "c3d5")
    cycle = ("b8a6", "d5c3", "a6b8", "c3d5")
    for i in range(99):
        play(pos, cycle[i % 4])
    assert len(pos.moves) == 102
    assert halfmove_clock(pos.moves) == 99
    assert not fifty_move_draw(pos.moves)
    play(pos, cycle[99 % 4])
    assert fifty_move_draw(pos.moves)
    assert pos.draw_status() == DrawStatus.FIFTY_MOVE


def test_fen_reports_halfmove_clock() -> None:
    pos = play(Position(), *shuffle(6))
    assert pos.to_fen().split()[4:] == ["6", "4"]


# --- Insufficient material ---
def test_bare_kings() -> None:
    assert checkmate_impossible(kings())


def test_single_minor_piece() -> None:
    assert checkmate_impossible(kings(("b1", make_piece(WHITE, KNIGHT))))
    assert checkmate_impossible(kings(("c8", make_piece(BLACK, BISHOP))))


def test_mating_material_present() -> None:
    assert not checkmate_impossible(kings(("a2", make_piece(WHITE, PAWN))))
    assert not checkmate_impossible(kings(("a1", make_piece(WHITE, ROOK))))
    assert not checkmate_impossible(kings(("d8", make_piece(BLACK, QUEEN))))
    assert not checkmate_impossible(
        kings(("b1", make_piece(WHITE, KNIGHT)), ("g8", make_piece(BLACK, KNIGHT)))
    )
    assert not checkmate_impossible(
        kings(("b1", make_piece(WHITE, KNIGHT)), ("c1", make_piece(WHITE, BISHOP)))
    )


def test_bishop_shades_follow_square_index_parity() -> None:
    # c1 (2) and e2 (12) differ in board colour but both indices are even
    assert checkmate_impossible(
        kings(("c1", make_piece(WHITE, BISHOP)), ("e2", make_piece(BLACK, BISHOP)))
    )
    # c1 (2) and f8 (61) share a board colour but differ in index parity
    assert not checkmate_impossible(
        kings(("c1", make_piece(WHITE, BISHOP)), ("f8", make_piece(BLACK, BISHOP)))
    )


def test_position_checkmate_impossible_from_start() -> None:
    assert not Position().checkmate_impossible()
