"""HTTP client for the remote leaderboard service."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from grid_snake.config import DEFAULT_LEADERBOARD_URL

logger = logging.getLogger(__name__)


class ScoreSubmission(BaseModel):
    """Body posted to the leaderboard for a finished game."""

    player_name: str
    score: int = Field(ge=0)


class LeaderboardEntry(BaseModel):
    """One record returned by the leaderboard service."""

    id: int | str | None = None
    player_name: str
    score: int


_ENTRIES = TypeAdapter(list[LeaderboardEntry])


class LeaderboardClient:
    """Submits scores and fetches the ranked leaderboard.

    Network and decoding failures never propagate: they are logged and
    the caller gets ``False`` from :meth:`submit_score` or the last
    successfully fetched entries from :meth:`fetch_leaderboard`. The
    service owns the ordering; entries are kept in the order received.
    """

    def __init__(
        self,
        url: str = DEFAULT_LEADERBOARD_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.entries: list[LeaderboardEntry] = []

    async def submit_score(self, name: str, score: int) -> bool:
        """POST a score. Returns True on a 2xx response."""
        body = ScoreSubmission(player_name=name, score=score)
        try:
            response = await self._client.post(self.url, json=body.model_dump())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to submit score for '%s': %s", name, exc)
            return False
        logger.info("Submitted score %d for '%s'.", score, name)
        return True

    async def fetch_leaderboard(self) -> list[LeaderboardEntry]:
        """GET the leaderboard, falling back to the last good result."""
        try:
            response = await self._client.get(self.url)
            response.raise_for_status()
            entries = _ENTRIES.validate_python(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.warning("Failed to fetch leaderboard: %s", exc)
            return list(self.entries)
        self.entries = entries
        return list(entries)

    def ranked(self) -> list[tuple[int, LeaderboardEntry]]:
        """Return the cached entries paired with ranks starting at 1."""
        return list(enumerate(self.entries, start=1))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> LeaderboardClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
