"""
Tests for the stackbot headless autoplayer.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stackbot.config import BotConfig
from stackbot.core.board import Board
from stackbot.core.pieces import PieceType, SequencePieceGenerator
from stackbot.ai.player import Autoplayer, GameStats, TurnResult
from stackbot.ai.rollout import RolloutConfig


class TestAutoplayer(unittest.TestCase):
    """Test the turn loop."""

    def test_initial_queue(self):
        player = Autoplayer(generator=SequencePieceGenerator([PieceType.T, PieceType.I]))
        self.assertEqual(player.current_piece, PieceType.T)
        self.assertEqual(player.next_piece, PieceType.I)
        self.assertEqual(player.stats, GameStats())

    def test_play_turn_commits_and_advances(self):
        player = Autoplayer(generator=SequencePieceGenerator([PieceType.O, PieceType.I, PieceType.T]))
        result = player.play_turn()
        self.assertIsInstance(result, TurnResult)
        self.assertEqual(result.piece, PieceType.O)
        self.assertIsNotNone(result.placement)
        self.assertEqual(player.board.occupied_count(), 4)
        self.assertEqual(player.current_piece, PieceType.I)
        self.assertEqual(player.next_piece, PieceType.T)
        self.assertEqual(player.stats.pieces_placed, 1)

    def test_line_count_matches_turns(self):
        results = []
        player = Autoplayer(BotConfig(seed=5))
        player.on_turn = results.append
        stats = player.play(60)
        self.assertEqual(stats.pieces_placed, len([r for r in results if r.placement]))
        self.assertEqual(stats.lines_cleared, sum(r.lines_cleared for r in results))
        self.assertFalse(player.board.grid.all(axis=1).any())

    def test_i_pieces_clear_lines(self):
        player = Autoplayer(generator=SequencePieceGenerator([PieceType.I]))
        stats = player.play(10)
        self.assertEqual(stats.pieces_placed, 10)
        self.assertGreater(stats.lines_cleared, 0)

    def test_top_out_ends_game(self):
        board = Board.from_grid([
            [0, 0, 0, 0, 0],
            [1, 1, 1, 1, 0],
            [1, 1, 1, 0, 1],
            [1, 1, 0, 1, 1],
        ])
        player = Autoplayer(BotConfig(width=5, height=4), board=board,
                            generator=SequencePieceGenerator([PieceType.O]))
        result = player.play_turn()
        self.assertIsNone(result.placement)
        self.assertTrue(player.stats.game_over)
        stats = player.play(10)
        self.assertEqual(stats.pieces_placed, 0)
        self.assertIsNone(player.play_turn().placement)

    def test_choose_does_not_mutate_board(self):
        player = Autoplayer(BotConfig(seed=2))
        player.play(5)
        before = player.board.grid.copy()
        player.choose(PieceType.Z, PieceType.S)
        self.assertTrue((player.board.grid == before).all())

    def test_rollout_mode(self):
        config = BotConfig(seed=3, use_rollouts=True, rollout=RolloutConfig(rollouts=1, depth=1))
        player = Autoplayer(config)
        stats = player.play(3)
        self.assertEqual(stats.pieces_placed, 3)
        self.assertEqual(player.board.occupied_count() % 2, 0)

    def test_seeded_games_repeat(self):
        a = Autoplayer(BotConfig(seed=9))
        b = Autoplayer(BotConfig(seed=9))
        a.play(25)
        b.play(25)
        self.assertTrue((a.board.grid == b.board.grid).all())


if __name__ == '__main__':
    unittest.main()
