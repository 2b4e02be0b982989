"""In-memory session registry, command dispatch, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from grid_snake.config import GameConfig
from grid_snake.direction import Direction
from grid_snake.engine import GameEngine, GameEvent, GameOver, Phase
from grid_snake.leaderboard import LeaderboardClient, LeaderboardEntry
from grid_snake.server.models import SessionSummary

logger = logging.getLogger(__name__)

_MAX_IDLE_SESSIONS = 100


@dataclass
class GameSession:
    """One engine plus the sockets watching it."""

    session_id: str
    engine: GameEngine
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def ticking(self) -> bool:
        return self._task is not None and not self._task.done()


class SessionManager:
    """Central registry managing all game sessions.

    Every command and every tick runs under the session lock, so a
    command never observes a half-applied tick.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        leaderboard: LeaderboardClient | None = None,
        max_idle_sessions: int = _MAX_IDLE_SESSIONS,
    ) -> None:
        if max_idle_sessions < 0:
            raise ValueError("max_idle_sessions must be >= 0.")
        self.config = config if config is not None else GameConfig()
        self.leaderboard = leaderboard
        self._sessions: dict[str, GameSession] = {}
        self._max_idle_sessions = max_idle_sessions
        self._pending: set[asyncio.Task] = set()

    # --- registry ---

    def create_session(self, seed: int | None = None) -> GameSession:
        """Create a session waiting for its player to start."""
        config = self.config
        if seed is not None:
            config = config.with_overrides(seed=seed)
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(session_id=session_id, engine=GameEngine(config))
        self._sessions[session_id] = session
        logger.info("Session %s created.", session_id)
        self._prune_idle_sessions()
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        return [
            SessionSummary(
                session_id=s.session_id,
                phase=s.engine.phase,
                player_name=s.engine.state.player_name,
                score=s.engine.state.score,
            )
            for s in self._sessions.values()
        ]

    async def close_session(self, session_id: str) -> bool:
        """Stop a session's tick loop and forget it."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.ticking:
            session._task.cancel()
            await asyncio.gather(session._task, return_exceptions=True)
        await self._close_sockets(session)
        logger.info("Session %s closed.", session_id)
        return True

    def _prune_idle_sessions(self) -> None:
        """Bound retained sessions whose loop is not running."""
        idle = [s for s in self._sessions.values() if not s.ticking]
        overflow = len(idle) - self._max_idle_sessions
        if overflow <= 0:
            return
        idle.sort(key=lambda s: s.created_at)
        for stale in idle[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d idle sessions (retaining up to %d).",
            overflow,
            self._max_idle_sessions,
        )

    # --- commands ---

    async def start(self, session: GameSession, name: str) -> None:
        """Start the game. Propagates ``StartRejectedError``."""
        async with session.lock:
            session.engine.start(name)
            self._ensure_loop(session)

    async def change_direction(
        self, session: GameSession, direction: Direction,
    ) -> bool:
        async with session.lock:
            return session.engine.change_direction(direction)

    async def pause(self, session: GameSession) -> None:
        async with session.lock:
            session.engine.pause()

    async def resume(self, session: GameSession) -> None:
        async with session.lock:
            session.engine.resume()

    async def toggle_pause(self, session: GameSession) -> None:
        async with session.lock:
            session.engine.toggle_pause()

    async def reset(self, session: GameSession) -> None:
        async with session.lock:
            session.engine.reset()
            if session.engine.phase == Phase.RUNNING:
                self._ensure_loop(session)

    # --- ticking ---

    def _ensure_loop(self, session: GameSession) -> None:
        if not session.ticking:
            session._task = asyncio.create_task(self._tick_loop(session))

    async def _tick_loop(self, session: GameSession) -> None:
        """Step the engine, re-arming the timer only after each tick lands."""
        engine = session.engine
        try:
            while engine.phase in (Phase.RUNNING, Phase.PAUSED):
                await asyncio.sleep(engine.interval_seconds)
                async with session.lock:
                    events = engine.step()
                    state = engine.get_state()
                await self._broadcast(session, state, events)
                for event in events:
                    if isinstance(event, GameOver):
                        self._report_game_over(
                            engine.state.player_name, event.final_score,
                        )
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)
            engine.state.phase = Phase.GAME_OVER

    def _report_game_over(self, name: str, score: int) -> None:
        """Submit the score and refresh the leaderboard in the background."""
        if self.leaderboard is None:
            return
        task = asyncio.create_task(self._submit_then_refresh(name, score))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _submit_then_refresh(self, name: str, score: int) -> None:
        assert self.leaderboard is not None  # noqa: S101
        try:
            await self.leaderboard.submit_score(name, score)
            await self.leaderboard.fetch_leaderboard()
        except Exception as exc:
            logger.warning("Leaderboard report for '%s' failed: %s", name, exc)

    async def wait_for_reports(self) -> None:
        """Wait until queued leaderboard reports have finished."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def fetch_leaderboard(self) -> list[LeaderboardEntry]:
        if self.leaderboard is None:
            return []
        return await self.leaderboard.fetch_leaderboard()

    # --- sockets ---

    async def _broadcast(
        self, session: GameSession, state: dict, events: list[GameEvent],
    ) -> None:
        """Send the tick's state and events to every connected socket."""
        payload = json.dumps(
            {"state": state, "events": [e.to_dict() for e in events]},
            separators=(",", ":"),
        )
        dead: list[WebSocket] = []
        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            if ws in session.sockets:
                session.sockets.remove(ws)

    async def _close_sockets(self, session: GameSession) -> None:
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", session.session_id,
                )
        session.sockets.clear()

    async def cleanup(self) -> None:
        """Cancel tick loops and pending reports, then close the client."""
        tasks = [s._task for s in self._sessions.values() if s.ticking]
        tasks.extend(self._pending)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self.leaderboard is not None:
            await self.leaderboard.aclose()
        logger.info("SessionManager cleanup complete.")
