"""
Tetromino catalog for stackbot.
Defines the 7 piece kinds, their rotation states, placements and next-piece sources.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
import numpy as np


Cell = Tuple[int, int]  # (row, col), row 0 is the top of the board


class PieceType(Enum):
    """The 7 standard Tetris pieces."""
    I = 0
    O = 1
    T = 2
    S = 3
    Z = 4
    J = 5
    L = 6

    @classmethod
    def from_name(cls, name: str) -> 'PieceType':
        """Look up a piece kind by its letter (case-insensitive)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown piece kind: {name!r}") from None

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional['PieceType']:
        """Map a classifier label to a piece kind, None when it is not one of the seven."""
        if not label:
            return None
        try:
            return cls.from_name(label)
        except ValueError:
            return None


# Relative (drow, dcol) offsets from the origin cell.
# Rotation 0 is the spawn orientation, each step is one clockwise turn.
SHAPES: Dict[PieceType, List[List[Cell]]] = {
    PieceType.I: [
        [(0, -1), (0, 0), (0, 1), (0, 2)],
        [(-1, 0), (0, 0), (1, 0), (2, 0)],
        [(0, -1), (0, 0), (0, 1), (0, 2)],
        [(-1, 0), (0, 0), (1, 0), (2, 0)],
    ],
    PieceType.O: [
        [(0, 0), (0, 1), (1, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 0), (1, 1)],
    ],
    PieceType.T: [
        [(-1, 0), (0, -1), (0, 0), (0, 1)],
        [(-1, 0), (0, 0), (0, 1), (1, 0)],
        [(0, -1), (0, 0), (0, 1), (1, 0)],
        [(-1, 0), (0, -1), (0, 0), (1, 0)],
    ],
    PieceType.S: [
        [(0, 0), (0, 1), (1, -1), (1, 0)],
        [(-1, 0), (0, 0), (0, 1), (1, 1)],
        [(0, 0), (0, 1), (1, -1), (1, 0)],
        [(-1, 0), (0, 0), (0, 1), (1, 1)],
    ],
    PieceType.Z: [
        [(0, -1), (0, 0), (1, 0), (1, 1)],
        [(-1, 1), (0, 0), (0, 1), (1, 0)],
        [(0, -1), (0, 0), (1, 0), (1, 1)],
        [(-1, 1), (0, 0), (0, 1), (1, 0)],
    ],
    PieceType.J: [
        [(-1, -1), (0, -1), (0, 0), (0, 1)],
        [(-1, 0), (-1, 1), (0, 0), (1, 0)],
        [(0, -1), (0, 0), (0, 1), (1, 1)],
        [(-1, 0), (0, 0), (1, -1), (1, 0)],
    ],
    PieceType.L: [
        [(-1, 1), (0, -1), (0, 0), (0, 1)],
        [(-1, 0), (0, 0), (1, 0), (1, 1)],
        [(0, -1), (0, 0), (0, 1), (1, -1)],
        [(-1, -1), (-1, 0), (0, 0), (1, 0)],
    ],
}

NUM_ROTATIONS = 4


def offsets(piece_type: PieceType, rotation: int) -> List[Cell]:
    """Relative offsets for a rotation state (rotation is taken modulo 4)."""
    return SHAPES[piece_type][rotation % NUM_ROTATIONS]


def cells_at(piece_type: PieceType, rotation: int, origin: Cell) -> List[Cell]:
    """Absolute cells covered by a piece with the given rotation at origin."""
    row, col = origin
    return [(row + dr, col + dc) for dr, dc in offsets(piece_type, rotation)]


def row_span(piece_type: PieceType, rotation: int) -> Tuple[int, int]:
    """(min_drow, max_drow) of a rotation state."""
    rows = [dr for dr, _ in offsets(piece_type, rotation)]
    return min(rows), max(rows)


@dataclass(frozen=True)
class Placement:
    """A candidate or committed (piece, rotation, origin) triple."""
    piece: PieceType
    rotation: int
    row: int
    column: int

    @property
    def origin(self) -> Cell:
        return (self.row, self.column)

    @property
    def cells(self) -> List[Cell]:
        return cells_at(self.piece, self.rotation, self.origin)

    @property
    def move(self) -> Tuple[int, int]:
        """(rotation count, destination column) as handed to the input layer."""
        return (self.rotation % NUM_ROTATIONS, self.column)

    def __repr__(self):
        return f"Placement({self.piece.name}, r={self.rotation}, row={self.row}, col={self.column})"


def get_all_piece_types() -> List[PieceType]:
    """Get all piece types."""
    return list(PieceType)


# Any zero-argument callable returning a PieceType can feed the planners.
PieceGenerator = Callable[[], PieceType]


class RandomPieceGenerator:
    """Uniformly random pieces from a seedable numpy generator."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)
        self._pieces = get_all_piece_types()

    def __call__(self) -> PieceType:
        return self._pieces[int(self.rng.integers(len(self._pieces)))]


class BagPieceGenerator:
    """7-bag randomizer: every kind appears once per bag, bags are shuffled."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)
        self._bag: List[PieceType] = []

    def _refill(self):
        bag = get_all_piece_types()
        self.rng.shuffle(bag)
        self._bag = bag

    def __call__(self) -> PieceType:
        if not self._bag:
            self._refill()
        return self._bag.pop(0)


class SequencePieceGenerator:
    """Replays a fixed sequence of pieces, wrapping around at the end."""

    def __init__(self, pieces: Iterable[PieceType]):
        self.pieces: Sequence[PieceType] = tuple(pieces)
        if not self.pieces:
            raise ValueError("SequencePieceGenerator needs at least one piece")
        self.index = 0

    def __call__(self) -> PieceType:
        piece = self.pieces[self.index % len(self.pieces)]
        self.index += 1
        return piece


GENERATOR_KINDS = ('random', 'bag')


def make_generator(kind: str = 'bag', seed: Optional[int] = None) -> PieceGenerator:
    """Build a named piece generator ('random' or 'bag')."""
    if kind == 'random':
        return RandomPieceGenerator(seed)
    elif kind == 'bag':
        return BagPieceGenerator(seed)
    raise ValueError(f"Unknown generator kind: {kind!r} (expected one of {GENERATOR_KINDS})")
