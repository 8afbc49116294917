"""Analytics service for game balance, players and engagement"""

import asyncio
import logging
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from gamedata.models import ActivityMetrics, BalanceMetrics, PlayerLeaderboards
from gamedata.repositories import HistoryRepository

from . import analytics_engine as engine

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Pull raw records from the history repository and derive metrics.

    Telemetry is not involved; repository failures propagate as
    ``RepositoryError``.
    """

    def __init__(
        self,
        history: HistoryRepository,
        tz: tzinfo | None = None,
        sample_size: int = 1000,
        leaderboard_size: int = engine.DEFAULT_LEADERBOARD_SIZE,
    ):
        self.history = history
        self.tz = tz or ZoneInfo("UTC")
        self.sample_size = sample_size
        self.leaderboard_size = leaderboard_size

    async def get_balance_analytics(self) -> BalanceMetrics:
        """Balance metrics over the most recent matches (a sample, not all matches)"""
        matches = await self.history.sample_recent_matches(self.sample_size)
        metrics = engine.compute_balance(matches)
        logger.debug(
            f"Balance: sample={metrics.sample_size}, impostor_win_rate={metrics.impostor_win_rate}"
        )
        return metrics

    async def get_player_analytics(self) -> PlayerLeaderboards:
        """Top players by points and by games played"""
        by_points, by_games = await asyncio.gather(
            self.history.top_players_by("points", self.leaderboard_size),
            self.history.top_players_by("games_played", self.leaderboard_size),
        )
        return engine.build_leaderboards(by_points, by_games, self.leaderboard_size)

    async def get_activity_analytics(self, now: datetime | None = None) -> ActivityMetrics:
        """
        Daily/weekly active users, new users today and total users

        Args:
            now: Reference time (default: current time in the service time zone)
        """
        if now is None:
            now = datetime.now(self.tz)
        today_start, week_ago_start = engine.activity_window(now, self.tz)

        dau, wau, new_users_today, total_users = await asyncio.gather(
            self.history.count_where("last_played_at", today_start),
            self.history.count_where("last_played_at", week_ago_start),
            self.history.count_where("first_seen_at", today_start),
            self.history.count_players(),
        )
        return engine.build_activity(dau, wau, new_users_today, total_users)
