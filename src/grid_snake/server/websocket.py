"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from grid_snake.direction import Direction
from grid_snake.engine import StartRejectedError
from grid_snake.server.session_manager import GameSession, SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


async def _dispatch(
    manager: SessionManager, session: GameSession, msg: dict,
) -> dict | None:
    """Apply one client command. Returns a reply frame, if any."""
    command = msg.get("command")
    if command == "direction":
        name = msg.get("direction")
        direction = Direction.from_name(name) if isinstance(name, str) else None
        if direction is not None:
            await manager.change_direction(session, direction)
    elif command == "start":
        name = msg.get("name")
        try:
            await manager.start(session, name if isinstance(name, str) else "")
        except StartRejectedError as exc:
            return {"error": str(exc)}
    elif command == "pause":
        await manager.pause(session)
    elif command == "resume":
        await manager.resume(session)
    elif command == "toggle_pause":
        await manager.toggle_pause(session)
    elif command == "reset":
        await manager.reset(session)
    return None


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send commands, receive state and events each tick."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.sockets.append(websocket)
    logger.info("Player connected to session %s.", session_id)

    # Send initial state snapshot so the client can render immediately.
    await websocket.send_text(
        json.dumps(
            {"state": session.engine.get_state(), "events": []},
            separators=(",", ":"),
        ),
    )

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            reply = await _dispatch(manager, session, msg)
            if reply is not None:
                await websocket.send_text(json.dumps(reply))
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        if websocket in session.sockets:
            session.sockets.remove(websocket)
