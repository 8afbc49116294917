"""Game server telemetry client.

The game server reports live connection/match counts at ``/api/stats``.
It is a best-effort source: a failed poll never fails the caller, it
yields a zeroed snapshot flagged as unavailable.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from gamedata.models import LiveSnapshot

logger = logging.getLogger(__name__)

DEFAULT_GAME_SERVER_URL = "https://impostor.me"

_LIVE_FIELDS = {
    "connectedUsers": "connected_users",
    "activeMatches": "active_matches",
    "usersInLobby": "users_in_lobby",
    "usersInMatch": "users_in_match",
}


@dataclass
class TelemetryResult:
    """Result of a live stats poll.

    ``snapshot`` is always usable; it is all zeros when ``available`` is
    False, in which case ``error`` says why.
    """

    snapshot: LiveSnapshot = field(default_factory=LiveSnapshot.zero)
    available: bool = False
    error: str | None = None

    @classmethod
    def unavailable(cls, error: str) -> "TelemetryResult":
        return cls(snapshot=LiveSnapshot.zero(), available=False, error=error)


def parse_live_snapshot(data: Any) -> LiveSnapshot:
    """Build a LiveSnapshot from the game server's JSON body.

    Raises ValueError when a field is missing, not an integer, or negative.
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    values: dict[str, int] = {}
    for key, attr in _LIVE_FIELDS.items():
        value = data.get(key)
        # bool is an int subclass but never a valid count
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"field '{key}' is not an integer: {value!r}")
        if value < 0:
            raise ValueError(f"field '{key}' is negative: {value}")
        values[attr] = value
    return LiveSnapshot(**values)


class TelemetryClient:
    """Client for the game server's live stats endpoint.

    Manages a shared httpx client for connection reuse. One attempt per
    call, bounded by ``timeout``; no retries.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_GAME_SERVER_URL,
        timeout: float = 5.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # Shared HTTP client — reuses TCP connections across requests
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    @property
    def stats_url(self) -> str:
        return f"{self.base_url}/api/stats"

    async def fetch_live_snapshot(self) -> TelemetryResult:
        """Poll the game server once. Never raises for transport or payload errors."""
        try:
            response = await self._http.get(self.stats_url)
        except httpx.HTTPError as e:
            return self._fail(f"{type(e).__name__}: {e or 'request failed'}")

        if not response.is_success:
            return self._fail(f"HTTP {response.status_code}")

        try:
            snapshot = parse_live_snapshot(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            return self._fail(f"malformed body: {e}")

        return TelemetryResult(snapshot=snapshot, available=True)

    def _fail(self, reason: str) -> TelemetryResult:
        logger.warning(f"Could not fetch live stats from game server ({self.stats_url}): {reason}")
        return TelemetryResult.unavailable(reason)
