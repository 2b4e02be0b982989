"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from grid_snake.engine import Phase


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    seed: int | None = Field(default=None, ge=0)


class StartRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/start."""

    name: str = ""


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: str


class DirectionResponse(BaseModel):
    accepted: bool


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    phase: Phase
    player_name: str
    score: int


class LeaderboardRow(BaseModel):
    """One ranked leaderboard line."""

    rank: int
    player_name: str
    score: int
