"""Food placement and reward-tier policy."""

from __future__ import annotations

import enum
import logging
from collections.abc import Collection

import numpy as np

logger = logging.getLogger(__name__)

RARE_THRESHOLD = 0.05
UNCOMMON_THRESHOLD = 0.20


class RewardTier(enum.Enum):
    """Probability bucket deciding how many points a food is worth."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"

    @property
    def points(self) -> int:
        return _POINTS[self]

    @property
    def color(self) -> str:
        """Colour the presentation layer paints this food with."""
        return _COLORS[self]


_POINTS: dict[RewardTier, int] = {
    RewardTier.COMMON: 1,
    RewardTier.UNCOMMON: 5,
    RewardTier.RARE: 10,
}

_COLORS: dict[RewardTier, str] = {
    RewardTier.COMMON: "red",
    RewardTier.UNCOMMON: "purple",
    RewardTier.RARE: "blue",
}


class BoardFullError(RuntimeError):
    """Raised when no cell is left to place food on."""


def place_food(
    excluded: Collection[int],
    max_cell: int,
    previous: int | None,
    rng: np.random.Generator,
) -> int:
    """Pick a random cell in ``[1, max_cell]`` for the next food.

    The result is never in *excluded* and never equal to *previous*.
    Raises :class:`BoardFullError` if every cell is blocked.
    """
    blocked = set(excluded)
    if previous is not None:
        blocked.add(previous)
    free = max_cell - sum(1 for c in blocked if 1 <= c <= max_cell)
    if free <= 0:
        raise BoardFullError("No free cell left for food.")

    while True:
        cell = int(rng.integers(1, max_cell, endpoint=True))
        if cell not in blocked:
            return cell


def tier_for(value: float) -> RewardTier:
    """Map a uniform draw in ``[0, 1)`` onto a reward tier."""
    if value < RARE_THRESHOLD:
        return RewardTier.RARE
    if value < UNCOMMON_THRESHOLD:
        return RewardTier.UNCOMMON
    return RewardTier.COMMON


def roll_reward_tier(rng: np.random.Generator) -> RewardTier:
    """Draw a reward tier: 5% rare, 15% uncommon, 80% common."""
    tier = tier_for(float(rng.random()))
    logger.debug("Rolled %s food.", tier.value)
    return tier
