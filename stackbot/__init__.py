"""
stackbot: tetromino placement engine.
Chooses where to drop each piece using a board heuristic, lookahead and rollouts.
"""

from .config import BotConfig, load_config, save_config
from .core import Board, PieceType, Placement
from .ai import BoardEvaluator, HeuristicWeights, PlacementSearch, RolloutPlanner, RolloutConfig
from .ai.player import Autoplayer

__version__ = "0.1.0"

__all__ = ['BotConfig', 'load_config', 'save_config', 'Board', 'PieceType', 'Placement',
           'BoardEvaluator', 'HeuristicWeights', 'PlacementSearch', 'RolloutPlanner',
           'RolloutConfig', 'Autoplayer']
