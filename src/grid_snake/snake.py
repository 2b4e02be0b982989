"""Snake body representation and movement logic."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grid_snake.board import Coordinate
from grid_snake.direction import Direction, direction_between, opposite, step

if TYPE_CHECKING:
    from grid_snake.board import Board


@dataclass(frozen=True)
class Segment:
    """One unit of snake body bound to a board position."""

    coord: Coordinate
    cell: int


class Snake:
    """A snake represented as an ordered deque of segments.

    The head is ``body[0]``; the tail is ``body[-1]``. A set of occupied
    cells mirrors the deque so membership tests are O(1); every mutation
    updates both together.
    """

    def __init__(self, segments: list[Segment]) -> None:
        if not segments:
            raise ValueError("Snake length must be at least 1.")
        self.body: deque[Segment] = deque(segments)
        self._occupied: set[int] = {seg.cell for seg in segments}
        if len(self._occupied) != len(self.body):
            raise ValueError("Snake segments must occupy distinct cells.")

    @classmethod
    def init_at(cls, coord: tuple[int, int], cell: int) -> Snake:
        """Create a single-segment snake at the given position."""
        return cls([Segment(Coordinate(*coord), cell)])

    @property
    def head(self) -> Segment:
        return self.body[0]

    @property
    def tail(self) -> Segment:
        return self.body[-1]

    @property
    def occupied(self) -> frozenset[int]:
        """Read-only view of the occupied cells."""
        return frozenset(self._occupied)

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.body)

    def __contains__(self, cell: object) -> bool:
        return cell in self._occupied

    def contains(self, cell: int) -> bool:
        """Check whether the snake occupies *cell*."""
        return cell in self._occupied

    def cells(self) -> list[int]:
        """Return the occupied cells ordered head to tail."""
        return [seg.cell for seg in self.body]

    def advance(self, coord: tuple[int, int], cell: int) -> Segment:
        """Move one step: push a new head and drop the old tail.

        Returns the vacated tail segment.
        """
        self.body.appendleft(Segment(Coordinate(*coord), cell))
        vacated = self.body.pop()
        self._occupied.discard(vacated.cell)
        self._occupied.add(cell)
        return vacated

    def grow(self, board: Board, heading: Direction) -> Segment | None:
        """Append one segment behind the tail, away from the body.

        The tail's travel direction is inferred from its neighbour towards
        the head, or taken from *heading* for a single-segment snake.
        Growth is skipped when the new position is off the board or
        already part of the snake. Returns the new tail, or ``None``.
        """
        tail = self.tail
        travel = None
        if len(self.body) > 1:
            travel = direction_between(tail.coord, self.body[-2].coord)
        if travel is None:
            travel = heading

        coord = step(tail.coord, opposite(travel))
        if board.is_out_of_bounds(coord):
            return None
        cell = board.cell_at(coord)
        if cell in self._occupied:
            return None

        segment = Segment(coord, cell)
        self.body.append(segment)
        self._occupied.add(cell)
        return segment

    def is_consistent(self) -> bool:
        """Check that the occupied set mirrors the body exactly."""
        cells = self.cells()
        return len(cells) == len(set(cells)) and set(cells) == self._occupied

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg.coord) for seg in self.body],
            "cells": self.cells(),
            "length": len(self.body),
        }
