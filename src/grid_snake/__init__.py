"""Grid Snake: single-player game engine with a remote leaderboard."""

from grid_snake.board import Board, Coordinate, OutOfBoundsError
from grid_snake.config import GameConfig
from grid_snake.direction import Direction, direction_between, opposite, step
from grid_snake.engine import (
    FoodEaten,
    GameEngine,
    GameOver,
    GameState,
    Phase,
    StartRejectedError,
    TierChanged,
)
from grid_snake.food import BoardFullError, RewardTier, place_food, roll_reward_tier
from grid_snake.leaderboard import LeaderboardClient, LeaderboardEntry
from grid_snake.snake import Segment, Snake

__all__ = [
    "Board",
    "BoardFullError",
    "Coordinate",
    "Direction",
    "FoodEaten",
    "GameConfig",
    "GameEngine",
    "GameOver",
    "GameState",
    "LeaderboardClient",
    "LeaderboardEntry",
    "OutOfBoundsError",
    "Phase",
    "RewardTier",
    "Segment",
    "Snake",
    "StartRejectedError",
    "TierChanged",
    "direction_between",
    "opposite",
    "place_food",
    "roll_reward_tier",
    "step",
]
