"""
Headless autoplayer for stackbot.
Runs the turn loop without screen or keyboard: pick a move, commit it, draw the next piece.
"""

import logging
from typing import Callable, Optional
from dataclasses import dataclass

from ..config import BotConfig
from ..core.board import Board
from ..core.pieces import PieceGenerator, PieceType, Placement, make_generator
from .evaluation import BoardEvaluator
from .rollout import RolloutPlanner
from .search import PlacementSearch

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Outcome of a single turn."""
    piece: PieceType
    placement: Optional[Placement]  # None when the board has topped out
    lines_cleared: int = 0


@dataclass
class GameStats:
    """Totals for a played game."""
    pieces_placed: int = 0
    lines_cleared: int = 0
    game_over: bool = False


class Autoplayer:
    """Plays pieces onto a board using the configured planner."""

    def __init__(self, config: Optional[BotConfig] = None, board: Optional[Board] = None,
                 generator: Optional[PieceGenerator] = None):
        self.config = config or BotConfig()
        self.board = board or Board(self.config.width, self.config.height)
        self.generator = generator or make_generator(self.config.generator, self.config.seed)
        # Rollouts draw from their own stream so planning never changes the game's pieces
        rollout_seed = None if self.config.seed is None else self.config.seed + 1
        self.rollout_generator = make_generator(self.config.generator, rollout_seed)

        self.search = PlacementSearch(BoardEvaluator(self.config.weights),
                                      top_out_penalty=self.config.rollout.top_out_penalty)
        self.planner = RolloutPlanner(self.search, workers=self.config.rollout.workers)

        self.current_piece = self.generator()
        self.next_piece = self.generator()
        self.stats = GameStats()

        self.on_turn: Optional[Callable[[TurnResult], None]] = None

    def choose(self, piece: PieceType, next_piece: Optional[PieceType] = None) -> Optional[Placement]:
        """Pick a placement for ``piece`` without touching the board."""
        if self.config.use_rollouts:
            return self.planner.plan(self.board, piece, self.rollout_generator,
                                     self.config.rollout.rollouts, self.config.rollout.depth)
        return self.search.select_best(self.board, piece,
                                       next_piece if self.config.lookahead else None)

    def play_turn(self) -> TurnResult:
        """Place the current piece and advance the queue."""
        if self.stats.game_over:
            return TurnResult(self.current_piece, None)

        piece = self.current_piece
        placement = self.choose(piece, self.next_piece)
        if placement is None:
            logger.warning("No valid placement found for %s, game over after %d pieces",
                           piece.name, self.stats.pieces_placed)
            self.stats.game_over = True
            result = TurnResult(piece, None)
        else:
            lines = self.board.commit(piece, placement.rotation, placement.origin)
            self.stats.pieces_placed += 1
            self.stats.lines_cleared += lines
            logger.debug("Placed %s at col %d, rot %d (%d lines)",
                         piece.name, placement.column, placement.rotation, lines)
            result = TurnResult(piece, placement, lines)
            self.current_piece = self.next_piece
            self.next_piece = self.generator()

        if self.on_turn:
            self.on_turn(result)
        return result

    def play(self, max_pieces: int) -> GameStats:
        """Play until the board tops out or ``max_pieces`` have been placed."""
        while not self.stats.game_over and self.stats.pieces_placed < max_pieces:
            self.play_turn()
        return self.stats
