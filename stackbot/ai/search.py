"""
Placement search for stackbot.
Enumerates every (rotation, column) landing, scores it, and picks the best move
with an optional one-piece lookahead.
"""

import logging
from typing import List, Optional
import numpy as np
from dataclasses import dataclass

from ..core.board import Board
from ..core.pieces import NUM_ROTATIONS, PieceType, Placement
from .evaluation import BoardEvaluator

logger = logging.getLogger(__name__)

DEFAULT_TOP_OUT_PENALTY = -10000.0


@dataclass
class Candidate:
    """A legal landing and the grid it produces before line clearing."""
    placement: Placement
    grid: np.ndarray
    score: float


@dataclass
class ScoredPlacement:
    """A landing with its own score plus the lookahead term, if any."""
    placement: Placement
    score: float
    lookahead: float = 0.0

    @property
    def total(self) -> float:
        return self.score + self.lookahead


class PlacementSearch:
    """Exhaustive single-piece search over rotations and columns.

    Ties between equal totals go to the first candidate in enumeration order:
    rotation ascending, then column ascending.
    """

    def __init__(self, evaluator: Optional[BoardEvaluator] = None,
                 top_out_penalty: float = DEFAULT_TOP_OUT_PENALTY):
        self.evaluator = evaluator or BoardEvaluator()
        self.top_out_penalty = top_out_penalty

    def enumerate(self, board: Board, piece: PieceType) -> List[Candidate]:
        """All legal resting placements of ``piece``, scored against the current grid."""
        candidates = []
        for rotation in range(NUM_ROTATIONS):
            for column in range(board.width):
                row = board.landing_row(piece, rotation, column)
                if row is None:
                    continue
                grid = board.stamped(piece, rotation, (row, column))
                score = self.evaluator.score(grid, board.grid)
                candidates.append(Candidate(Placement(piece, rotation, row, column), grid, score))
        return candidates

    def best_score(self, board: Board, piece: PieceType) -> Optional[float]:
        """Best score ``piece`` can reach on ``board``, None if it has no legal placement."""
        candidates = self.enumerate(board, piece)
        if not candidates:
            return None
        return max(candidate.score for candidate in candidates)

    def score_moves(self, board: Board, piece: PieceType,
                    next_piece: Optional[PieceType] = None) -> List[ScoredPlacement]:
        """Score every legal move of ``piece`` in enumeration order."""
        moves = []
        for candidate in self.enumerate(board, piece):
            lookahead = 0.0
            if next_piece is not None:
                after = board.clone()
                after.grid = candidate.grid.copy()
                after.clear_lines()
                follow_up = self.best_score(after, next_piece)
                lookahead = follow_up if follow_up is not None else self.top_out_penalty
            moves.append(ScoredPlacement(candidate.placement, candidate.score, lookahead))
        return moves

    def select_best(self, board: Board, piece: PieceType,
                    next_piece: Optional[PieceType] = None) -> Optional[Placement]:
        """Best placement for ``piece``, or None when no legal placement exists."""
        best = None
        for move in self.score_moves(board, piece, next_piece):
            if best is None or move.total > best.total:
                best = move

        if best is None:
            logger.debug("No legal placement for %s", piece.name)
            return None

        logger.debug("Selected %r (score=%.1f, lookahead=%.1f)",
                     best.placement, best.score, best.lookahead)
        return best.placement
