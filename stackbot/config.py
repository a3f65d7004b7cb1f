"""
Configuration for stackbot.
Bundles board size, heuristic weights and planner settings, with JSON load/save.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from .ai.evaluation import HeuristicWeights
from .ai.rollout import RolloutConfig
from .core.pieces import GENERATOR_KINDS


@dataclass
class BotConfig:
    """Top-level configuration for the bot."""
    width: int = 10
    height: int = 20
    weights: HeuristicWeights = field(default_factory=HeuristicWeights)
    lookahead: bool = True  # Use the known next piece in the greedy search
    use_rollouts: bool = False  # Plan with rollouts instead of the greedy search
    rollout: RolloutConfig = field(default_factory=RolloutConfig)
    generator: str = 'bag'  # 'bag' or 'random'
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width < 4 or self.height < 4:
            raise ValueError(f"Board must be at least 4x4, got {self.width}x{self.height}")
        if self.generator not in GENERATOR_KINDS:
            raise ValueError(f"generator must be one of {GENERATOR_KINDS}, got {self.generator!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BotConfig':
        data = dict(data)
        _check_keys(cls, data)
        if 'weights' in data:
            _check_keys(HeuristicWeights, data['weights'])
            data['weights'] = HeuristicWeights(**data['weights'])
        if 'rollout' in data:
            _check_keys(RolloutConfig, data['rollout'])
            data['rollout'] = RolloutConfig(**data['rollout'])
        return cls(**data)


def _check_keys(config_cls, data: Dict[str, Any]):
    known = {f.name for f in fields(config_cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {config_cls.__name__} keys: {', '.join(sorted(unknown))}")


def load_config(path: str) -> BotConfig:
    """Read a BotConfig from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return BotConfig.from_dict(json.load(f))


def save_config(config: BotConfig, path: str):
    """Write a BotConfig to a JSON file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
