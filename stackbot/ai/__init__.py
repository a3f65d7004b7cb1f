"""
AI module for stackbot.
Contains the board evaluator, the placement search and the rollout planner.
"""

from .evaluation import BoardEvaluator, HeuristicWeights
from .search import PlacementSearch
from .rollout import RolloutPlanner, RolloutConfig

__all__ = ['BoardEvaluator', 'HeuristicWeights', 'PlacementSearch', 'RolloutPlanner', 'RolloutConfig']
