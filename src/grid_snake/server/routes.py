"""REST API route handlers for session commands and the leaderboard."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from grid_snake.direction import Direction
from grid_snake.engine import StartRejectedError
from grid_snake.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    DirectionResponse,
    LeaderboardRow,
    SessionSummary,
    StartRequest,
)
from grid_snake.server.session_manager import GameSession, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])
leaderboard_router = APIRouter(tags=["leaderboard"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _get_session(request: Request, session_id: str) -> GameSession:
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return session


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new session waiting for a player name."""
    session = _get_manager(request).create_session(seed=body.seed)
    return SessionSummary(
        session_id=session.session_id,
        phase=session.engine.phase,
        player_name="",
        score=0,
    )


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get the full state snapshot of a session."""
    return _get_session(request, session_id).engine.get_state()


@router.post("/{session_id}/start")
async def start_session(
    session_id: str, body: StartRequest, request: Request,
) -> dict:
    session = _get_session(request, session_id)
    try:
        await _get_manager(request).start(session, body.name)
    except StartRejectedError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.engine.get_state()


@router.post("/{session_id}/direction")
async def change_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> DirectionResponse:
    session = _get_session(request, session_id)
    direction = Direction.from_name(body.direction)
    if direction is None:
        raise HTTPException(
            status_code=422, detail=f"Unknown direction '{body.direction}'.",
        )
    accepted = await _get_manager(request).change_direction(session, direction)
    return DirectionResponse(accepted=accepted)


@router.post("/{session_id}/pause")
async def pause_session(session_id: str, request: Request) -> dict:
    session = _get_session(request, session_id)
    await _get_manager(request).pause(session)
    return session.engine.get_state()


@router.post("/{session_id}/resume")
async def resume_session(session_id: str, request: Request) -> dict:
    session = _get_session(request, session_id)
    await _get_manager(request).resume(session)
    return session.engine.get_state()


@router.post("/{session_id}/reset")
async def reset_session(session_id: str, request: Request) -> dict:
    """Start a new round after a game over."""
    session = _get_session(request, session_id)
    await _get_manager(request).reset(session)
    return session.engine.get_state()


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    if not await _get_manager(request).close_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found.")
    return Response(status_code=204)


@leaderboard_router.get("/leaderboard")
async def get_leaderboard(request: Request) -> list[LeaderboardRow]:
    """Ranks 1..N in the order the leaderboard service returns them."""
    entries = await _get_manager(request).fetch_leaderboard()
    return [
        LeaderboardRow(rank=i, player_name=e.player_name, score=e.score)
        for i, e in enumerate(entries, start=1)
    ]
