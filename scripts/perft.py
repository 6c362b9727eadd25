#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import logging
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding `src/` to sys.path.
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from chessrules.engine.game import Game
from chessrules.engine.move import square_to_str
from chessrules.engine.perft import divide, perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft after a sequence of moves")
    parser.add_argument(
        "--moves",
        type=str,
        default="",
        help="Space-separated UCI moves played from the start (default: none)",
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument("--divide", action="store_true", help="Print per-move node counts")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        game = Game.from_uci(args.moves.split())
    except ValueError as e:
        parser.error(str(e))
    position = game.position

    start = time.perf_counter()
    if args.divide:
        counts = divide(position, args.depth)
        for (from_sq, to_sq, piece), n in sorted(counts.items()):
            print(f"{square_to_str(from_sq)}{square_to_str(to_sq)} piece={piece}: {n}")
        nodes = sum(counts.values())
    else:
        nodes = perft(position, args.depth)
    dt = time.perf_counter() - start
    print(f"fen={position.to_fen()!r}")
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
