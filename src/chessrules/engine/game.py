from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List, Optional

from .board import BLACK, NONE, PROMOTION_KINDS, WHITE, kind_of, make_piece
from .draws import DrawStatus
from .move import Move, MoveRecord, parse_uci
from .position import Position


logger = logging.getLogger(__name__)


class GameOutcome(IntEnum):
    IN_PROGRESS = 0
    WHITE_WINS_BY_CHECKMATE = 1
    BLACK_WINS_BY_CHECKMATE = 2
    DRAW_BY_STALEMATE = 3
    DRAW_BY_INSUFFICIENT_MATERIAL = 4
    DRAW_BY_REPETITION = 5
    DRAW_BY_FIFTY_MOVE_RULE = 6
    DRAW_BY_AGREEMENT = 7
    WHITE_RESIGNED = 8
    BLACK_RESIGNED = 9

    @property
    def is_over(self) -> bool:
        return self is not GameOutcome.IN_PROGRESS

    @property
    def is_draw(self) -> bool:
        return self in _DRAWS

    @property
    def winner(self) -> Optional[int]:
        """Winning color, or ``None`` for draws and unfinished games."""
        if self in (GameOutcome.WHITE_WINS_BY_CHECKMATE, GameOutcome.BLACK_RESIGNED):
            return WHITE
        if self in (GameOutcome.BLACK_WINS_BY_CHECKMATE, GameOutcome.WHITE_RESIGNED):
            return BLACK
        return None


_DRAWS = frozenset(
    {
        GameOutcome.DRAW_BY_STALEMATE,
        GameOutcome.DRAW_BY_INSUFFICIENT_MATERIAL,
        GameOutcome.DRAW_BY_REPETITION,
        GameOutcome.DRAW_BY_FIFTY_MOVE_RULE,
        GameOutcome.DRAW_BY_AGREEMENT,
    }
)

_CLAIMS = {
    DrawStatus.FIFTY_MOVE: GameOutcome.DRAW_BY_FIFTY_MOVE_RULE,
    DrawStatus.REPETITION: GameOutcome.DRAW_BY_REPETITION,
}


@dataclass
class Game:
    """Game wrapper around a position with result bookkeeping.

    Responsibility: validate moves before they reach the trusted
    ``Position.move``, classify the result after every move, and handle draw
    claims and resignations. Unlike ``Position`` queries, the entry points
    here raise ``ValueError`` on bad input.
    """

    position: Position = field(default_factory=Position)
    outcome: GameOutcome = GameOutcome.IN_PROGRESS

    @classmethod
    def new(cls) -> "Game":
        return cls()

    @classmethod
    def from_moves(cls, moves: Iterable[MoveRecord]) -> "Game":
        """Rebuild a game from stored history and classify where it stands."""
        game = cls(position=Position(moves))
        game._classify(check_material=True)
        return game

    @classmethod
    def from_uci(cls, moves: Iterable[str]) -> "Game":
        game = cls()
        for uci in moves:
            game.apply_uci(uci)
        return game

    def legal_moves(self) -> List[Move]:
        if self.outcome.is_over:
            return []
        moves: List[Move] = []
        for rec in self.position.legal_moves():
            promo = None
            if self.position.is_promotion(rec.from_sq, rec.to_sq):
                promo = kind_of(rec.piece)
            moves.append(Move(rec.from_sq, rec.to_sq, promo))
        return moves

    def apply_move(self, move: Move) -> GameOutcome:
        """Validate and play ``move``; return the outcome afterwards.

        Raises:
            ValueError: If the game is over, the move is illegal, or the
                promotion piece is missing or not allowed.
        """
        if self.outcome.is_over:
            raise ValueError("game is over")
        pos = self.position
        if not pos.is_move(move.from_sq, move.to_sq):
            raise ValueError("illegal move")

        color = pos.has_move()
        piece = pos.get_piece(move.from_sq)
        if pos.is_promotion(move.from_sq, move.to_sq):
            if move.promotion is None:
                raise ValueError("promotion piece required")
            if move.promotion not in PROMOTION_KINDS:
                raise ValueError(f"invalid promotion piece: {move.promotion!r}")
            piece = make_piece(color, move.promotion)
        elif move.promotion is not None:
            raise ValueError("promotion not allowed for this move")

        captures = pos.get_piece(move.to_sq) != NONE or pos.is_en_passant(
            move.from_sq, move.to_sq
        )
        pos.move(move.from_sq, move.to_sq, piece)
        self._classify(check_material=captures or move.promotion is not None)
        return self.outcome

    def apply_uci(self, uci: str) -> GameOutcome:
        return self.apply_move(parse_uci(uci))

    def _classify(self, check_material: bool) -> None:
        pos = self.position
        if not pos.legal_move_exists():
            if pos.is_in_check(pos.has_move()):
                if pos.has_move() == WHITE:
                    self._finish(GameOutcome.BLACK_WINS_BY_CHECKMATE)
                else:
                    self._finish(GameOutcome.WHITE_WINS_BY_CHECKMATE)
            else:
                self._finish(GameOutcome.DRAW_BY_STALEMATE)
        elif check_material and pos.checkmate_impossible():
            self._finish(GameOutcome.DRAW_BY_INSUFFICIENT_MATERIAL)

    def _finish(self, outcome: GameOutcome) -> None:
        self.outcome = outcome
        logger.info("game over after %d plies: %s", len(self.position.moves), outcome.name)

    # --- Claims and agreements ---
    def claim_draw(self) -> bool:
        """End the game as a draw if the side to move may claim one."""
        if self.outcome.is_over:
            return False
        status = self.position.draw_status()
        if status == DrawStatus.NO_DRAW:
            return False
        self._finish(_CLAIMS[status])
        return True

    def agree_draw(self) -> None:
        if self.outcome.is_over:
            raise ValueError("game is over")
        self._finish(GameOutcome.DRAW_BY_AGREEMENT)

    def resign(self, color: int) -> None:
        if self.outcome.is_over:
            raise ValueError("game is over")
        if color not in (WHITE, BLACK):
            raise ValueError(f"invalid color: {color!r}")
        self._finish(GameOutcome.WHITE_RESIGNED if color == WHITE else GameOutcome.BLACK_RESIGNED)

    # --- State flags ---
    def in_check(self) -> bool:
        return self.position.is_in_check(self.position.has_move())

    def checkmate(self) -> bool:
        return self.position.checkmate()

    def stalemate(self) -> bool:
        return self.position.stalemate()

    def draw_status(self) -> DrawStatus:
        return self.position.draw_status()

    def to_fen(self) -> str:
        return self.position.to_fen()

    def move_history_uci(self) -> List[str]:
        """History in UCI form; promotions are recovered by replaying."""
        replay = Position()
        out: List[str] = []
        for rec in self.position.moves:
            promo = None
            if replay.is_promotion(rec.from_sq, rec.to_sq):
                promo = kind_of(rec.piece)
            out.append(Move(rec.from_sq, rec.to_sq, promo).to_uci())
            replay.move(rec.from_sq, rec.to_sq, rec.piece)
        return out
