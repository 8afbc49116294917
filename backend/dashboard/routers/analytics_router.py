"""Game analytics API routes"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from dashboard.core.dependencies import get_analytics_service
from dashboard.core.schemas import CamelModel
from dashboard.services import AnalyticsService
from gamedata.errors import RepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


# ============================================
# Response Models
# ============================================


class BalanceAnalytics(CamelModel):
    impostor_win_rate: float
    avg_duration_minutes: float
    abandonment_rate: float
    sample_size: int


class PlayerStat(CamelModel):
    uid: str
    name: str | None
    points: int
    games_played: int
    last_played_at: datetime | None
    first_seen_at: datetime | None


class PlayerAnalytics(CamelModel):
    top_by_points: list[PlayerStat]
    top_by_games: list[PlayerStat]


class ActivityAnalytics(CamelModel):
    dau: int
    wau: int
    new_users_today: int
    total_users: int
    dau_wau_ratio: int


# ============================================
# Endpoints
# ============================================


@router.get("/balance", response_model=BalanceAnalytics)
async def get_balance_analytics(
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> BalanceAnalytics:
    """Impostor win rate, average match length and abandonment over recent matches"""
    try:
        metrics = await analytics_service.get_balance_analytics()
        return BalanceAnalytics.model_validate(metrics)

    except RepositoryError as e:
        logger.exception(f"Failed to get balance analytics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch balance analytics") from None


@router.get("/players", response_model=PlayerAnalytics)
async def get_player_analytics(
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> PlayerAnalytics:
    """Top players by points and by games played"""
    try:
        leaderboards = await analytics_service.get_player_analytics()
        return PlayerAnalytics.model_validate(leaderboards)

    except RepositoryError as e:
        logger.exception(f"Failed to get player analytics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch player analytics") from None


@router.get("/activity", response_model=ActivityAnalytics)
async def get_activity_analytics(
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> ActivityAnalytics:
    """Daily/weekly active users and new users today"""
    try:
        activity = await analytics_service.get_activity_analytics()
        return ActivityAnalytics.model_validate(activity)

    except RepositoryError as e:
        logger.exception(f"Failed to get activity analytics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch activity analytics") from None
