"""Repository for peak_stats, matches, and player_stats tables."""

from __future__ import annotations

import logging
from datetime import datetime

import asyncpg

from gamedata.models import (
    MatchRecord,
    PeakStatSnapshot,
    PlayerParticipation,
    PlayerStatRecord,
    WinningTeam,
)

from .base import load_json, store_operation

logger = logging.getLogger(__name__)

# Column names cannot be bound as parameters, so callers pick from these.
# camelCase keys are the names the dashboard has always used.
_RANKING_COLUMNS = {
    "points": "points",
    "games_played": "games_played",
    "gamesPlayed": "games_played",
}
_TIMESTAMP_COLUMNS = {
    "last_played_at": "last_played_at",
    "lastPlayedAt": "last_played_at",
    "first_seen_at": "first_seen_at",
    "firstSeenAt": "first_seen_at",
}


def _column(mapping: dict[str, str], field: str) -> str:
    try:
        return mapping[field]
    except KeyError:
        raise ValueError(f"Unsupported field {field!r}, expected one of {sorted(mapping)}") from None


def _match_from_row(row: asyncpg.Record) -> MatchRecord:
    players = load_json(row["players"])
    if not isinstance(players, list):
        players = []
    return MatchRecord(
        id=str(row["id"]),
        started_at=row["started_at"],
        ended_at=row["ended_at"],
        winning_team=WinningTeam.parse(row["winning_team"]),
        players=[PlayerParticipation.from_dict(p) for p in players if isinstance(p, dict)],
    )


def _player_from_row(row: asyncpg.Record) -> PlayerStatRecord:
    return PlayerStatRecord(
        uid=row["uid"],
        name=row["name"],
        points=row["points"] or 0,
        games_played=row["games_played"] or 0,
        last_played_at=row["last_played_at"],
        first_seen_at=row["first_seen_at"],
    )


class HistoryRepository:
    """Read queries over the persisted game history.

    Owns query shape only. Every method is a single independent read that
    raises ``RepositoryError`` when the store fails; nothing is cached.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    # ==================== Peak Stats ====================

    @store_operation("list_recent_peak_stats")
    async def list_recent_peak_stats(self, limit: int = 7) -> list[PeakStatSnapshot]:
        """Most recent ``limit`` daily rollups, oldest first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT date, peak_connected_users, peak_active_matches,
                       peak_users_in_lobby, peak_users_in_match
                FROM peak_stats
                ORDER BY date DESC
                LIMIT $1
                """,
                limit,
            )
        history = [
            PeakStatSnapshot(
                date=row["date"],
                peak_connected_users=row["peak_connected_users"] or 0,
                peak_active_matches=row["peak_active_matches"] or 0,
                peak_users_in_lobby=row["peak_users_in_lobby"] or 0,
                peak_users_in_match=row["peak_users_in_match"] or 0,
            )
            for row in rows
        ]
        history.reverse()
        return history

    # ==================== Counters ====================

    @store_operation("count_players")
    async def count_players(self) -> int:
        async with self.pool.acquire() as conn:
            count = await conn.fetchval("SELECT COUNT(*) FROM player_stats")
        return int(count or 0)

    @store_operation("count_matches")
    async def count_matches(self) -> int:
        async with self.pool.acquire() as conn:
            count = await conn.fetchval("SELECT COUNT(*) FROM matches")
        return int(count or 0)

    @store_operation("count_where")
    async def count_where(self, field: str, threshold: datetime) -> int:
        """Count player_stats rows whose ``field`` is at or after ``threshold``."""
        column = _column(_TIMESTAMP_COLUMNS, field)
        async with self.pool.acquire() as conn:
            count = await conn.fetchval(
                f"SELECT COUNT(*) FROM player_stats WHERE {column} >= $1",
                threshold,
            )
        return int(count or 0)

    # ==================== Matches ====================

    @store_operation("sample_recent_matches")
    async def sample_recent_matches(self, limit: int = 1000) -> list[MatchRecord]:
        """Most recently ended matches, newest first.

        This is a bounded sample for cost control; rates derived from it
        are sample statistics, not population statistics.
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, started_at, ended_at, winning_team, players
                FROM matches
                ORDER BY ended_at DESC NULLS LAST
                LIMIT $1
                """,
                limit,
            )
        return [_match_from_row(row) for row in rows]

    # ==================== Players ====================

    @store_operation("top_players_by")
    async def top_players_by(self, field: str, limit: int = 10) -> list[PlayerStatRecord]:
        """Top ``limit`` players ordered by ``points`` or ``games_played``."""
        column = _column(_RANKING_COLUMNS, field)
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT uid, name, points, games_played, last_played_at, first_seen_at
                FROM player_stats
                ORDER BY {column} DESC
                LIMIT $1
                """,
                limit,
            )
        return [_player_from_row(row) for row in rows]
