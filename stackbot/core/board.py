"""
Board state management for stackbot.
Handles the occupancy grid, collision and overhang checks, placement commits and line clearing.
"""

from typing import Dict, List, Optional
import numpy as np
from .pieces import Cell, PieceType, cells_at, row_span


class Board:
    """Occupancy grid for a Tetris playfield.

    The grid is a ``height x width`` boolean numpy array, ``True`` meaning
    occupied. Row 0 is the top of the playfield. The grid is only meant to
    change through :meth:`commit` (and :meth:`drop`, which commits); every
    simulation works on a :meth:`clone`.
    """

    DEFAULT_WIDTH = 10
    DEFAULT_HEIGHT = 20

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        self.width = width
        self.height = height
        self.grid = np.zeros((height, width), dtype=bool)

    @classmethod
    def from_grid(cls, grid) -> 'Board':
        """Build a board from an occupancy snapshot (any 2-D boolean-like array)."""
        array = np.asarray(grid)
        if array.ndim != 2 or array.shape[0] == 0 or array.shape[1] == 0:
            raise ValueError(f"Expected a non-empty 2-D grid, got shape {array.shape}")
        board = cls(width=array.shape[1], height=array.shape[0])
        board.grid = array.astype(bool)
        return board

    def is_occupied(self, row: int, col: int) -> bool:
        """Occupancy of a cell; anything outside the playfield counts as a wall."""
        if row < 0 or row >= self.height or col < 0 or col >= self.width:
            return True
        return bool(self.grid[row, col])

    def has_vertical_access(self, piece_type: PieceType, rotation: int, origin: Cell) -> bool:
        """True if every column the piece covers is empty above its topmost cell there."""
        tops: Dict[int, int] = {}
        for row, col in cells_at(piece_type, rotation, origin):
            if col not in tops or row < tops[col]:
                tops[col] = row
        for col, top in tops.items():
            if not 0 <= col < self.width:
                return False
            if top > 0 and self.grid[:top, col].any():
                return False
        return True

    def can_place(self, piece_type: PieceType, rotation: int, origin: Cell) -> bool:
        """Check that all four cells are free and the piece can drop in from above."""
        for row, col in cells_at(piece_type, rotation, origin):
            if self.is_occupied(row, col):
                return False
        return self.has_vertical_access(piece_type, rotation, origin)

    def stamped(self, piece_type: PieceType, rotation: int, origin: Cell) -> np.ndarray:
        """Copy of the grid with the piece written in, before any line clearing."""
        grid = self.grid.copy()
        for row, col in cells_at(piece_type, rotation, origin):
            if 0 <= row < self.height and 0 <= col < self.width:
                grid[row, col] = True
        return grid

    def commit(self, piece_type: PieceType, rotation: int, origin: Cell) -> int:
        """Write the piece into the grid and clear full lines.

        Out-of-bounds cells are dropped; callers validate with :meth:`can_place`.
        Returns the number of lines cleared.
        """
        self.grid = self.stamped(piece_type, rotation, origin)
        return self.clear_lines()

    def clear_lines(self) -> int:
        """Remove full rows, inserting empty rows at the top. Returns the count removed."""
        full = self.grid.all(axis=1)
        cleared = int(full.sum())
        if cleared:
            remaining = self.grid[~full]
            self.grid = np.vstack([np.zeros((cleared, self.width), dtype=bool), remaining])
        return cleared

    def landing_row(self, piece_type: PieceType, rotation: int, column: int) -> Optional[int]:
        """Resting origin row for a piece dropped in ``column``.

        Every in-bounds origin row is tried, bottom-most first; the first one
        that passes :meth:`can_place` is the landing row.
        """
        min_dr, max_dr = row_span(piece_type, rotation)
        for row in range(self.height - 1 - max_dr, -min_dr - 1, -1):
            if self.can_place(piece_type, rotation, (row, column)):
                return row
        return None

    def drop(self, piece_type: PieceType, rotation: int, column: int) -> bool:
        """Drop a piece into ``column`` and commit it. Returns False if it fits nowhere."""
        row = self.landing_row(piece_type, rotation, column)
        if row is None:
            return False
        self.commit(piece_type, rotation, (row, column))
        return True

    def clone(self) -> 'Board':
        """Independent deep copy of this board."""
        board = Board(self.width, self.height)
        board.grid = self.grid.copy()
        return board

    def column_heights(self) -> List[int]:
        """Height of each column (0 for an empty column)."""
        occupied = self.grid.any(axis=0)
        first = np.argmax(self.grid, axis=0)
        return [int(self.height - first[c]) if occupied[c] else 0 for c in range(self.width)]

    def occupied_count(self) -> int:
        """Number of occupied cells."""
        return int(self.grid.sum())

    def __str__(self):
        """String representation of the board."""
        return "\n".join(
            "".join("█" if cell else "·" for cell in row) for row in self.grid
        )

    def __repr__(self):
        return f"Board(width={self.width}, height={self.height}, occupied={self.occupied_count()})"
