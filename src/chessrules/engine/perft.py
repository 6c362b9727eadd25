from __future__ import annotations

from .position import Position


def perft(position: Position, depth: int) -> int:
    """Compute perft node count for ``position`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Each promotion piece counts as its own child. Children are played on
    copies, so ``position`` is left untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = position.legal_moves()
    if depth == 1:
        return len(moves)

    nodes = 0
    for m in moves:
        child = position.copy()
        child.move(m.from_sq, m.to_sq, m.piece)
        nodes += perft(child, depth - 1)
    return nodes


def divide(position: Position, depth: int) -> dict:
    """Per-move perft counts at ``depth``, keyed by ``(from_sq, to_sq, piece)``."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out = {}
    for m in position.legal_moves():
        child = position.copy()
        child.move(m.from_sq, m.to_sq, m.piece)
        out[(m.from_sq, m.to_sq, m.piece)] = perft(child, depth - 1)
    return out
