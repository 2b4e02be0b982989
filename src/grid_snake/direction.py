"""Cardinal directions and coordinate arithmetic."""

from __future__ import annotations

import enum

from grid_snake.board import Coordinate


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    RIGHT = (0, 1)
    DOWN = (1, 0)
    LEFT = (0, -1)

    @classmethod
    def from_name(cls, name: str) -> Direction | None:
        """Parse ``"up"``, ``"UP"`` or an ``"ArrowUp"`` key name.

        Returns ``None`` for anything else.
        """
        key = name.strip().lower()
        if key.startswith("arrow"):
            key = key[len("arrow"):]
        return _BY_NAME.get(key)


_BY_NAME: dict[str, Direction] = {d.name.lower(): d for d in Direction}

_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_BY_DELTA: dict[tuple[int, int], Direction] = {d.value: d for d in Direction}


def step(coord: tuple[int, int], direction: Direction) -> Coordinate:
    """Return the coordinate adjacent to *coord* in *direction*."""
    dr, dc = direction.value
    return Coordinate(coord[0] + dr, coord[1] + dc)


def opposite(direction: Direction) -> Direction:
    """Return the 180° reversal of *direction*."""
    return _OPPOSITES[direction]


def direction_between(
    from_coord: tuple[int, int], to_coord: tuple[int, int],
) -> Direction | None:
    """Infer the direction of travel between two 4-adjacent coordinates.

    Returns ``None`` when the coordinates are not neighbours.
    """
    delta = (to_coord[0] - from_coord[0], to_coord[1] - from_coord[1])
    return _BY_DELTA.get(delta)
