"""
Tests for the stackbot board evaluator.
"""

import unittest
import numpy as np
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stackbot.core.board import Board
from stackbot.ai.evaluation import (
    BoardEvaluator, HeuristicWeights, column_heights, count_holes, count_hole_fills,
    aggregate_height, bumpiness, count_full_lines,
)


def empty_grid():
    return np.zeros((20, 10), dtype=bool)


class TestMetrics(unittest.TestCase):
    """Test the individual sub-metrics."""

    def setUp(self):
        # Column 3: block, hole, block
        self.grid = empty_grid()
        self.grid[19, 3] = True
        self.grid[17, 3] = True

    def test_column_heights(self):
        heights = column_heights(self.grid)
        self.assertEqual(heights.tolist(), [0, 0, 0, 3, 0, 0, 0, 0, 0, 0])
        self.assertEqual(column_heights(empty_grid()).tolist(), [0] * 10)

    def test_holes(self):
        self.assertEqual(count_holes(self.grid), 1)
        self.assertEqual(count_holes(empty_grid()), 0)

    def test_holes_count_every_covered_cell(self):
        grid = empty_grid()
        grid[15, 0] = True  # Four empty cells below it
        self.assertEqual(count_holes(grid), 4)

    def test_hole_fills(self):
        filled = self.grid.copy()
        filled[18, 3] = True
        self.assertEqual(count_hole_fills(filled, self.grid), 1)
        self.assertEqual(count_hole_fills(filled, None), 0)
        self.assertEqual(count_hole_fills(self.grid, self.grid), 0)

    def test_aggregate_height(self):
        self.assertEqual(aggregate_height(self.grid), 3)

    def test_bumpiness(self):
        self.assertEqual(bumpiness(self.grid), 6)
        flat = empty_grid()
        flat[19, :] = True
        self.assertEqual(bumpiness(flat), 0)

    def test_full_lines(self):
        grid = empty_grid()
        grid[19, :] = True
        grid[18, :9] = True
        grid[17, :] = True
        self.assertEqual(count_full_lines(grid), 2)
        self.assertEqual(count_full_lines(self.grid), 0)


class TestBoardEvaluator(unittest.TestCase):
    """Test the weighted score."""

    def setUp(self):
        self.evaluator = BoardEvaluator()

    def test_evaluator_initialization(self):
        self.assertIsNotNone(self.evaluator.weights)
        self.assertEqual(self.evaluator.weights, HeuristicWeights())

    def test_empty_board_scores_zero(self):
        self.assertEqual(self.evaluator.score(empty_grid()), 0.0)
        self.assertEqual(self.evaluator.evaluate_board(Board()), 0.0)

    def test_score_combines_metrics(self):
        grid = empty_grid()
        grid[19, 3] = True
        grid[17, 3] = True
        # 1 hole, height 3, bumpiness 6
        self.assertEqual(self.evaluator.score(grid), -150.0 - 3.0 - 30.0)

    def test_hole_fill_is_rewarded(self):
        prior = empty_grid()
        prior[17, 3] = True
        prior[19, 3] = True
        filled = prior.copy()
        filled[18, 3] = True
        with_prior = self.evaluator.score(filled, prior)
        without_prior = self.evaluator.score(filled)
        self.assertEqual(with_prior - without_prior, 200.0)

    def test_line_clear_dominates(self):
        clearing = empty_grid()
        clearing[19, :] = True
        clearing[15:19, 0] = True  # Tall column on top of the cleared row
        flat = empty_grid()
        flat[19, :9] = True
        self.assertGreater(self.evaluator.score(clearing), self.evaluator.score(flat))

    def test_custom_weights(self):
        evaluator = BoardEvaluator(HeuristicWeights(lines_cleared=0, hole_fills=0, holes=0,
                                                    bumpiness=0, aggregate_height=-2.0))
        grid = empty_grid()
        grid[18:, 0] = True
        self.assertEqual(evaluator.score(grid), -4.0)

    def test_score_is_pure(self):
        grid = empty_grid()
        grid[19, 2] = True
        before = grid.copy()
        self.evaluator.score(grid, before)
        np.testing.assert_array_equal(grid, before)

    def test_detailed_evaluation(self):
        grid = empty_grid()
        grid[19, :] = True
        metrics = self.evaluator.get_detailed_evaluation(grid)
        for key in ['lines_cleared', 'hole_fills', 'holes', 'bumpiness',
                    'aggregate_height', 'max_height', 'overall_score']:
            self.assertIn(key, metrics)
            self.assertIsInstance(metrics[key], (int, float))
        self.assertEqual(metrics['lines_cleared'], 1)
        self.assertEqual(metrics['aggregate_height'], 10)
        self.assertEqual(metrics['overall_score'], 1500.0 - 10.0)


if __name__ == '__main__':
    unittest.main()
