from __future__ import annotations

import pytest

from chessrules.engine.move import str_to_square as sq
from chessrules.engine.perft import divide, perft
from chessrules.engine.position import Position


def test_perft_startpos_depths_1_3() -> None:
    p = Position()
    assert perft(p, 0) == 1
    assert perft(p, 1) == 20
    assert perft(p, 2) == 400
    assert perft(p, 3) == 8902


def test_perft_leaves_position_untouched() -> None:
    p = Position()
    perft(p, 2)
    assert p.moves == ()
    assert p.board == Position().board


def test_divide_sums_to_perft() -> None:
    p = Position()
    counts = divide(p, 2)
    assert len(counts) == 20
    assert sum(counts.values()) == 400
    knight = p.get_piece(sq("g1"))
    assert counts[(sq("g1"), sq("f3"), knight)] == 20


def test_negative_depth_rejected() -> None:
    with pytest.raises(ValueError):
        perft(Position(), -1)
    with pytest.raises(ValueError):
        divide(Position(), 0)
