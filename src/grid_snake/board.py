"""Immutable board of numbered cells for the snake game."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

MIN_BOARD_SIZE = 4


class Coordinate(NamedTuple):
    """A (row, col) board position, 0-indexed."""

    row: int
    col: int


class OutOfBoundsError(IndexError):
    """Raised when a coordinate or cell lies outside the board."""


class Board:
    """Square grid mapping every coordinate to a unique cell number.

    Cells are numbered 1..size² in row-major order and stored in a
    read-only NumPy array, so ``cells[row, col]`` is the cell at
    ``(row, col)``. A board never changes after creation.
    """

    def __init__(self, size: int = 20) -> None:
        if size < MIN_BOARD_SIZE:
            raise ValueError(
                f"Board size must be at least {MIN_BOARD_SIZE}×{MIN_BOARD_SIZE}."
            )
        self.size = size
        cells = np.arange(1, size * size + 1, dtype=np.int32).reshape(size, size)
        cells.setflags(write=False)
        self.cells = cells

    @classmethod
    def create(cls, size: int) -> Board:
        """Build a board with cells numbered row-major from 1."""
        return cls(size)

    @property
    def max_cell(self) -> int:
        return self.size * self.size

    def is_out_of_bounds(self, coord: tuple[int, int]) -> bool:
        """Check whether a coordinate falls outside the board."""
        row, col = coord
        return row < 0 or col < 0 or row >= self.size or col >= self.size

    def cell_at(self, coord: tuple[int, int]) -> int:
        """Return the cell number at *coord*."""
        if self.is_out_of_bounds(coord):
            raise OutOfBoundsError(f"Coordinate {tuple(coord)} is off the board.")
        row, col = coord
        return int(self.cells[row, col])

    def coord_of(self, cell: int) -> Coordinate:
        """Return the coordinate holding *cell*."""
        if not 1 <= cell <= self.max_cell:
            raise OutOfBoundsError(f"Cell {cell} is off the board.")
        row, col = divmod(cell - 1, self.size)
        return Coordinate(row, col)

    def start_coord(self) -> Coordinate:
        """Return the canonical starting position, one third into the board."""
        offset = round(self.size / 3)
        return Coordinate(offset, offset)

    def to_dict(self) -> dict:
        """Serialize board dimensions to a dictionary."""
        return {"size": self.size, "max_cell": self.max_cell}
