"""
Rollout planner for stackbot.
Monte Carlo evaluation of each first move: simulate several randomized
continuations with the greedy search and keep the move with the best average outcome.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass
import numpy as np

from ..core.board import Board
from ..core.pieces import PieceGenerator, PieceType, Placement
from .search import DEFAULT_TOP_OUT_PENALTY, PlacementSearch, ScoredPlacement

logger = logging.getLogger(__name__)


@dataclass
class RolloutConfig:
    """Configuration for rollout planning."""
    rollouts: int = 50  # Trials per first move
    depth: int = 4  # Simulated pieces per trial
    workers: Optional[int] = None  # Processes for trials; None runs in-process
    top_out_penalty: float = DEFAULT_TOP_OUT_PENALTY

    def __post_init__(self):
        if self.rollouts < 1:
            raise ValueError(f"rollouts must be at least 1, got {self.rollouts}")
        if self.depth < 0:
            raise ValueError(f"depth must be non-negative, got {self.depth}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


def run_trial(search: PlacementSearch, grid: np.ndarray, pieces: Sequence[PieceType]) -> float:
    """Play ``pieces`` greedily from ``grid`` and score the final board.

    A trial that runs out of legal placements stops there and takes the
    search's top-out penalty on top of the board score.
    """
    board = Board.from_grid(grid)
    for piece in pieces:
        placement = search.select_best(board, piece)
        if placement is None:
            return search.evaluator.score(board.grid) + search.top_out_penalty
        board.drop(piece, placement.rotation, placement.column)
    return search.evaluator.score(board.grid)


def _run_trial_job(args: Tuple[PlacementSearch, np.ndarray, Sequence[PieceType]]) -> float:
    """Worker function for parallel trials."""
    search, grid, pieces = args
    return run_trial(search, grid, pieces)


class RolloutPlanner:
    """Chooses a first move by averaging randomized rollouts.

    The piece sequences for every trial are drawn from the generator up front,
    in enumeration order, so the outcome does not depend on ``workers``.
    """

    def __init__(self, search: Optional[PlacementSearch] = None, workers: Optional[int] = None):
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.search = search or PlacementSearch()
        self.workers = workers

    @classmethod
    def from_config(cls, config: RolloutConfig, search: Optional[PlacementSearch] = None) -> 'RolloutPlanner':
        search = search or PlacementSearch(top_out_penalty=config.top_out_penalty)
        return cls(search, workers=config.workers)

    def evaluate_first_moves(self, board: Board, piece: PieceType, generator: PieceGenerator,
                             rollouts: int, depth: int) -> List[ScoredPlacement]:
        """Average rollout score of every legal first move, in enumeration order."""
        if rollouts < 1:
            raise ValueError(f"rollouts must be at least 1, got {rollouts}")
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")

        first_moves = self.search.enumerate(board, piece)
        jobs = []
        for candidate in first_moves:
            after = board.clone()
            after.grid = candidate.grid.copy()
            after.clear_lines()
            for _ in range(rollouts):
                pieces = tuple(generator() for _ in range(depth))
                jobs.append((self.search, after.grid, pieces))

        scores = self._run(jobs)

        results = []
        for index, candidate in enumerate(first_moves):
            trial_scores = scores[index * rollouts:(index + 1) * rollouts]
            average = sum(trial_scores) / rollouts
            logger.debug("First move %r averaged %.1f over %d rollouts",
                         candidate.placement, average, rollouts)
            results.append(ScoredPlacement(candidate.placement, average))
        return results

    def plan(self, board: Board, piece: PieceType, generator: PieceGenerator,
             rollouts: int, depth: int) -> Optional[Placement]:
        """First move with the best average rollout score, None if ``piece`` cannot be placed."""
        best = None
        for move in self.evaluate_first_moves(board, piece, generator, rollouts, depth):
            if best is None or move.total > best.total:
                best = move

        if best is None:
            logger.debug("No legal first move for %s", piece.name)
            return None
        return best.placement

    def _run(self, jobs: List[Tuple[PlacementSearch, np.ndarray, Sequence[PieceType]]]) -> List[float]:
        if self.workers is None or self.workers == 1 or len(jobs) < 2:
            return [_run_trial_job(job) for job in jobs]

        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            chunksize = max(1, len(jobs) // (self.workers * 4))
            return list(executor.map(_run_trial_job, jobs, chunksize=chunksize))
