from __future__ import annotations

from chessrules.engine.board import BLACK, KING, KINGSIDE, NONE, ROOK, WHITE, make_piece
from chessrules.engine.move import parse_uci
from chessrules.engine.move import str_to_square as sq
from chessrules.engine.position import Position

ITALIAN = ("e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "f8c5")
QUEENS_SIDE_CLEARED = ("d2d4", "d7d5", "b1c3", "b8c6", "c1f4", "c8f5", "d1d2", "d8d7")


def play(pos: Position, *ucis: str) -> Position:
    for uci in ucis:
        mv = parse_uci(uci)
        assert pos.is_move(mv.from_sq, mv.to_sq), uci
        pos.move(mv.from_sq, mv.to_sq, pos.get_piece(mv.from_sq))
    return pos


def legal(pos: Position, uci: str) -> bool:
    mv = parse_uci(uci)
    return pos.is_move(mv.from_sq, mv.to_sq)


def test_castling_blocked_in_start_position() -> None:
    pos = Position()
    assert not legal(pos, "e1g1")
    assert not legal(pos, "e1c1")


def test_kingside_castle_moves_rook() -> None:
    pos = play(Position(), *ITALIAN)
    assert legal(pos, "e1g1")
    assert not legal(pos, "e1c1")
    play(pos, "e1g1")
    assert pos.get_piece(sq("g1")) == make_piece(WHITE, KING)
    assert pos.get_piece(sq("f1")) == make_piece(WHITE, ROOK)
    assert pos.get_piece(sq("h1")) == NONE
    assert pos.get_piece(sq("e1")) == NONE
    assert not pos.castling.may_castle(WHITE, KINGSIDE)

    play(pos, "g8f6", "d2d3")
    assert legal(pos, "e8g8")
    play(pos, "e8g8")
    assert pos.get_piece(sq("g8")) == make_piece(BLACK, KING)
    assert pos.get_piece(sq("f8")) == make_piece(BLACK, ROOK)
    assert pos.get_piece(sq("h8")) == NONE


def test_queenside_castle_moves_rook() -> None:
    pos = play(Position(), *QUEENS_SIDE_CLEARED)
    assert legal(pos, "e1c1")
    play(pos, "e1c1")
    assert pos.get_piece(sq("c1")) == make_piece(WHITE, KING)
    assert pos.get_piece(sq("d1")) == make_piece(WHITE, ROOK)
    assert pos.get_piece(sq("a1")) == NONE

    assert legal(pos, "e8c8")
    play(pos, "e8c8")
    assert pos.get_piece(sq("c8")) == make_piece(BLACK, KING)
    assert pos.get_piece(sq("d8")) == make_piece(BLACK, ROOK)
    assert pos.get_piece(sq("a8")) == NONE


def test_no_castling_after_king_returns_home() -> None:
    pos = play(Position(), *ITALIAN, "e1e2", "g8f6", "e2e1", "f6g8")
    assert pos.get_piece(sq("e1")) == make_piece(WHITE, KING)
    assert not legal(pos, "e1g1")


def test_no_castling_after_rook_returns_home() -> None:
    pos = play(Position(), *ITALIAN, "h1g1", "g8f6", "g1h1", "f6g8")
    assert not legal(pos, "e1g1")
    assert not pos.castling.may_castle(WHITE, KINGSIDE)
    assert pos.castling.may_castle(BLACK, KINGSIDE)


def test_no_castling_out_of_check() -> None:
    pos = play(
        Position(), "e2e4", "d7d5", "e4d5", "d8d5", "g1f3", "e7e6", "f1c4", "d5e5"
    )
    assert pos.is_in_check(WHITE)
    assert not legal(pos, "e1g1")


def test_no_castling_through_attacked_square() -> None:
    # The a6 bishop covers f1
    pos = play(Position(), "e2e4", "b7b6", "g1f3", "c8a6", "g2g3", "b8c6", "f1g2", "g8f6")
    assert not pos.is_in_check(WHITE)
    assert pos.get_piece(sq("f1")) == NONE and pos.get_piece(sq("g1")) == NONE
    assert not legal(pos, "e1g1")


def test_no_castling_into_check() -> None:
    # The c5 bishop covers g1 once the f-pawn has moved
    pos = play(Position(), "e2e4", "e7e5", "g1h3", "f8c5", "f1e2", "a7a6", "f2f4", "a6a5")
    assert not legal(pos, "e1g1")


def test_legal_moves_include_castling() -> None:
    pos = play(Position(), *ITALIAN)
    targets = {(m.from_sq, m.to_sq) for m in pos.legal_moves()}
    assert (sq("e1"), sq("g1")) in targets
    assert (sq("e1"), sq("c1")) not in targets


def test_attacked_b1_does_not_stop_queenside_castling() -> None:
    # The knight on a3 covers b1 but neither c1 nor d1
    pos = play(
        Position(),
        "d2d4", "d7d5", "b1c3", "b8c6", "c1f4", "c6a5", "d1d2", "a5c4", "e2e3", "c4a3",
    )
    king = pos.get_piece(sq("e1"))
    assert pos.is_in_check_after_move(WHITE, sq("e1"), sq("b1"), king)
    assert not pos.is_in_check_after_move(WHITE, sq("e1"), sq("c1"), king)
    assert legal(pos, "e1c1")


def test_attacked_d1_stops_queenside_castling() -> None:
    # The g4 bishop covers d1 once the e-pawn has moved
    pos = play(
        Position(),
        "d2d4", "d7d5", "b1c3", "b8c6", "c1f4", "c8g4", "d1d2", "a7a6", "e2e3", "a6a5",
    )
    king = pos.get_piece(sq("e1"))
    assert not pos.is_in_check(WHITE)
    assert pos.is_in_check_after_move(WHITE, sq("e1"), sq("d1"), king)
    assert not pos.is_in_check_after_move(WHITE, sq("e1"), sq("c1"), king)
    assert not legal(pos, "e1c1")
