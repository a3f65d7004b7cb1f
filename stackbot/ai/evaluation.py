"""
Board evaluation functions for stackbot.
Provides the heuristic sub-metrics and the weighted board score used by the searches.
"""

from typing import Dict, Optional
import numpy as np
from dataclasses import dataclass

from ..core.board import Board


@dataclass
class HeuristicWeights:
    """Weights for the board evaluation heuristics (score is maximized)."""
    lines_cleared: float = 1500.0
    hole_fills: float = 200.0
    holes: float = -150.0
    bumpiness: float = -5.0
    aggregate_height: float = -1.0


def column_heights(grid: np.ndarray) -> np.ndarray:
    """Height of each column: rows from the topmost occupied cell to the floor."""
    rows = grid.shape[0]
    occupied = grid.any(axis=0)
    first = np.where(occupied, np.argmax(grid, axis=0), rows)
    return rows - first


def hole_mask(grid: np.ndarray) -> np.ndarray:
    """Empty cells with at least one occupied cell above them in the same column."""
    covered = np.logical_or.accumulate(grid, axis=0)
    return covered & ~grid


def count_holes(grid: np.ndarray) -> int:
    return int(hole_mask(grid).sum())


def count_hole_fills(grid: np.ndarray, prior_grid: Optional[np.ndarray]) -> int:
    """Holes of ``prior_grid`` that are occupied in ``grid``."""
    if prior_grid is None:
        return 0
    return int((hole_mask(prior_grid) & grid).sum())


def aggregate_height(grid: np.ndarray) -> int:
    return int(column_heights(grid).sum())


def bumpiness(grid: np.ndarray) -> int:
    """Sum of absolute height differences between adjacent columns."""
    return int(np.abs(np.diff(column_heights(grid))).sum())


def count_full_lines(grid: np.ndarray) -> int:
    """Full rows in the grid, i.e. the lines the last placement is about to clear."""
    return int(grid.all(axis=1).sum())


class BoardEvaluator:
    """Weighted five-term heuristic over occupancy grids.

    Candidate grids are scored before line clearing, so the full-row count is
    the number of lines the candidate placement clears. Passing the grid the
    placement was made on as ``prior_grid`` credits previously buried holes
    that the candidate fills.
    """

    def __init__(self, weights: HeuristicWeights = None):
        self.weights = weights or HeuristicWeights()

    def score(self, grid: np.ndarray, prior_grid: Optional[np.ndarray] = None) -> float:
        """Scalar desirability of ``grid``; higher is better."""
        w = self.weights
        return float(
            w.lines_cleared * count_full_lines(grid)
            + w.hole_fills * count_hole_fills(grid, prior_grid)
            + w.holes * count_holes(grid)
            + w.bumpiness * bumpiness(grid)
            + w.aggregate_height * aggregate_height(grid)
        )

    def evaluate_board(self, board: Board) -> float:
        """Evaluate the current state of the board."""
        return self.score(board.grid)

    def get_detailed_evaluation(self, grid: np.ndarray,
                                prior_grid: Optional[np.ndarray] = None) -> Dict[str, float]:
        """Raw metrics alongside the combined score."""
        heights = column_heights(grid)
        return {
            'lines_cleared': count_full_lines(grid),
            'hole_fills': count_hole_fills(grid, prior_grid),
            'holes': count_holes(grid),
            'bumpiness': bumpiness(grid),
            'aggregate_height': aggregate_height(grid),
            'max_height': int(heights.max()) if heights.size else 0,
            'overall_score': self.score(grid, prior_grid),
        }
