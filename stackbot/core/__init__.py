"""
Core module for stackbot.
Contains the piece catalog and the board model.
"""

from .board import Board
from .pieces import (
    PieceType, Placement, cells_at, make_generator,
    RandomPieceGenerator, BagPieceGenerator, SequencePieceGenerator,
)

__all__ = ['Board', 'PieceType', 'Placement', 'cells_at', 'make_generator',
           'RandomPieceGenerator', 'BagPieceGenerator', 'SequencePieceGenerator']
