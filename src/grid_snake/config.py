"""Game configuration."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from grid_snake.board import MIN_BOARD_SIZE

logger = logging.getLogger(__name__)

DEFAULT_LEADERBOARD_URL = "https://backend-test-ednt.onrender.com/adduser"

_ENV_LEADERBOARD_URL = "GRID_SNAKE_LEADERBOARD_URL"
_ENV_BOARD_SIZE = "GRID_SNAKE_BOARD_SIZE"


@dataclass(frozen=True)
class GameConfig:
    """Tunable game parameters.

    Supports JSON serialization so a setup can be saved and replayed.
    """

    # Board
    board_size: int = 20
    food_offset: int = 5

    # Speed progression
    initial_interval_ms: int = 150
    interval_step_ms: int = 20
    min_interval_ms: int = 50
    speed_threshold: int = 50

    # Player
    max_name_length: int = 10

    # Leaderboard
    leaderboard_url: str = DEFAULT_LEADERBOARD_URL
    leaderboard_timeout: float = 10.0

    # Randomness
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.board_size < MIN_BOARD_SIZE:
            raise ValueError(f"board_size must be at least {MIN_BOARD_SIZE}.")
        if self.food_offset < 1:
            raise ValueError("food_offset must be at least 1.")
        start = round(self.board_size / 3)
        start_cell = start * self.board_size + start + 1
        if start_cell + self.food_offset > self.board_size ** 2:
            raise ValueError("food_offset places the first food off the board.")
        if self.min_interval_ms < 1:
            raise ValueError("min_interval_ms must be at least 1.")
        if self.initial_interval_ms < self.min_interval_ms:
            raise ValueError("initial_interval_ms must be >= min_interval_ms.")
        if self.interval_step_ms < 0:
            raise ValueError("interval_step_ms must be >= 0.")
        if self.speed_threshold < 1:
            raise ValueError("speed_threshold must be at least 1.")
        if self.max_name_length < 1:
            raise ValueError("max_name_length must be at least 1.")
        if self.leaderboard_timeout <= 0:
            raise ValueError("leaderboard_timeout must be positive.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def with_overrides(self, **overrides) -> GameConfig:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)

    @classmethod
    def from_env(cls, base: GameConfig | None = None) -> GameConfig:
        """Apply ``GRID_SNAKE_*`` environment overrides to *base*."""
        config = base if base is not None else cls()
        overrides: dict = {}
        url = os.getenv(_ENV_LEADERBOARD_URL)
        if url:
            overrides["leaderboard_url"] = url
        size = os.getenv(_ENV_BOARD_SIZE)
        if size:
            overrides["board_size"] = int(size)
        return config.with_overrides(**overrides) if overrides else config
