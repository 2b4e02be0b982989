"""Tick-based game engine composing board, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from grid_snake.board import Board
from grid_snake.config import GameConfig
from grid_snake.direction import Direction, opposite, step
from grid_snake.food import (
    BoardFullError,
    RewardTier,
    place_food,
    roll_reward_tier,
)
from grid_snake.snake import Snake

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    """Lifecycle phases of a game."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class StartRejectedError(ValueError):
    """Raised when a game is started without an acceptable player name."""


@dataclass(frozen=True)
class FoodEaten:
    score: int
    points: int
    tier: RewardTier

    def to_dict(self) -> dict:
        return {
            "type": "food_eaten",
            "score": self.score,
            "points": self.points,
            "tier": self.tier.value,
        }


@dataclass(frozen=True)
class GameOver:
    final_score: int
    reason: str

    def to_dict(self) -> dict:
        return {
            "type": "game_over",
            "final_score": self.final_score,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class TierChanged:
    tier: RewardTier

    def to_dict(self) -> dict:
        return {
            "type": "tier_changed",
            "tier": self.tier.value,
            "color": self.tier.color,
        }


GameEvent = FoodEaten | GameOver | TierChanged


@dataclass
class GameState:
    """Everything that changes during a game, owned by the engine."""

    board: Board
    snake: Snake
    food_cell: int
    food_tier: RewardTier
    direction: Direction
    interval_ms: int
    score: int = 0
    speed_tier: int = 0
    phase: Phase = Phase.NOT_STARTED
    player_name: str = ""
    tick: int = 0
    heading: Direction = Direction.RIGHT

    def to_dict(self) -> dict:
        """Return a JSON-serializable snapshot."""
        food_row, food_col = self.board.coord_of(self.food_cell)
        return {
            "phase": self.phase.value,
            "player_name": self.player_name,
            "tick": self.tick,
            "score": self.score,
            "speed_tier": self.speed_tier,
            "interval_ms": self.interval_ms,
            "direction": self.direction.name.lower(),
            "board": self.board.to_dict(),
            "snake": self.snake.to_dict(),
            "food": {
                "cell": self.food_cell,
                "coord": [food_row, food_col],
                "tier": self.food_tier.value,
                "points": self.food_tier.points,
                "color": self.food_tier.color,
            },
        }


class GameEngine:
    """Single-player, tick-based game engine.

    The engine owns the board and the :class:`GameState`. Commands
    (:meth:`start`, :meth:`change_direction`, :meth:`pause`,
    :meth:`resume`, :meth:`reset`) mutate the state synchronously; each
    call to :meth:`step` advances the game by one tick and returns the
    events it produced.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.board = Board.create(self.config.board_size)
        self.state = self._new_state(Phase.NOT_STARTED)
        self._stepping = False

    def _new_state(self, phase: Phase, player_name: str = "") -> GameState:
        start = self.board.start_coord()
        start_cell = self.board.cell_at(start)
        return GameState(
            board=self.board,
            snake=Snake.init_at(start, start_cell),
            food_cell=start_cell + self.config.food_offset,
            food_tier=RewardTier.COMMON,
            direction=Direction.RIGHT,
            interval_ms=self.config.initial_interval_ms,
            phase=phase,
            player_name=player_name,
        )

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def interval_seconds(self) -> float:
        """Current tick interval in seconds."""
        return self.state.interval_ms / 1000.0

    # --- commands ---

    def start(self, name: str) -> None:
        """Begin the game for *name*.

        Raises :class:`StartRejectedError` if the name is empty or too long.
        """
        if self.state.phase != Phase.NOT_STARTED:
            logger.debug("Start ignored in phase %s.", self.state.phase.value)
            return
        limit = self.config.max_name_length
        if not name or len(name) > limit:
            raise StartRejectedError(
                f"Please enter your name (max {limit} characters)."
            )
        self.state.player_name = name
        self.state.phase = Phase.RUNNING
        logger.info("Game started for '%s'.", name)

    def change_direction(self, direction: Direction) -> bool:
        """Request a new heading for the next tick.

        Returns False if the request was ignored: while paused or over,
        or when it would reverse a snake longer than one segment. Reversal
        is judged against the heading of the last move.
        """
        state = self.state
        if state.phase in (Phase.PAUSED, Phase.GAME_OVER):
            return False
        if len(state.snake) > 1 and direction == opposite(state.heading):
            logger.debug("Reversal to %s rejected.", direction.name)
            return False
        state.direction = direction
        return True

    def pause(self) -> None:
        if self.state.phase == Phase.RUNNING:
            self.state.phase = Phase.PAUSED

    def resume(self) -> None:
        if self.state.phase == Phase.PAUSED:
            self.state.phase = Phase.RUNNING

    def toggle_pause(self) -> None:
        """Flip between running and paused; other phases are unaffected."""
        if self.state.phase == Phase.PAUSED:
            self.resume()
        else:
            self.pause()

    def reset(self) -> None:
        """Start a fresh round for the same player after a game over."""
        if self.state.phase != Phase.GAME_OVER:
            logger.debug("Reset ignored in phase %s.", self.state.phase.value)
            return
        self.state = self._new_state(Phase.RUNNING, self.state.player_name)
        logger.info("Game reset for '%s'.", self.state.player_name)

    # --- ticking ---

    def step(self) -> list[GameEvent]:
        """Advance the game by one tick.

        A no-op unless the game is running.
        """
        if self._stepping:
            raise RuntimeError("step() re-entered while a tick is in progress.")
        if self.state.phase != Phase.RUNNING:
            return []
        self._stepping = True
        try:
            return self._apply_tick()
        finally:
            self._stepping = False

    def _apply_tick(self) -> list[GameEvent]:
        state = self.state
        state.tick += 1
        next_coord = step(state.snake.head.coord, state.direction)

        # --- boundary check ---
        if self.board.is_out_of_bounds(next_coord):
            return [self._end_game("wall")]

        # --- self-collision check ---
        next_cell = self.board.cell_at(next_coord)
        if state.snake.contains(next_cell):
            return [self._end_game("self")]

        # --- move ---
        state.snake.advance(next_coord, next_cell)
        state.heading = state.direction
        if next_cell != state.food_cell:
            return []
        return self._consume_food()

    def _consume_food(self) -> list[GameEvent]:
        state = self.state
        eaten = state.food_tier
        state.snake.grow(self.board, state.direction)
        state.score += eaten.points
        events: list[GameEvent] = [
            FoodEaten(score=state.score, points=eaten.points, tier=eaten),
        ]
        self._update_speed()

        try:
            state.food_cell = place_food(
                state.snake.occupied,
                self.board.max_cell,
                previous=state.food_cell,
                rng=self.rng,
            )
        except BoardFullError:
            events.append(self._end_game("board_full"))
            return events

        state.food_tier = roll_reward_tier(self.rng)
        events.append(TierChanged(tier=state.food_tier))
        return events

    def _update_speed(self) -> None:
        """Shorten the tick interval each time the score passes a threshold."""
        state = self.state
        cfg = self.config
        while state.score >= cfg.speed_threshold * (state.speed_tier + 1):
            state.speed_tier += 1
            state.interval_ms = max(
                state.interval_ms - cfg.interval_step_ms, cfg.min_interval_ms,
            )
            logger.info(
                "Speed tier %d reached; interval now %d ms.",
                state.speed_tier, state.interval_ms,
            )

    def _end_game(self, reason: str) -> GameOver:
        """Mark the game as over and build the event."""
        self.state.phase = Phase.GAME_OVER
        logger.info(
            "Game over (%s) at tick %d with score %d.",
            reason, self.state.tick, self.state.score,
        )
        return GameOver(final_score=self.state.score, reason=reason)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return self.state.to_dict()
