"""Dashboard stats API routes"""

import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException

from dashboard.core.dependencies import get_stats_aggregator
from dashboard.core.schemas import CamelModel
from dashboard.services import AggregationError, StatsAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


# ============================================
# Response Models
# ============================================


class LiveStats(CamelModel):
    connected_users: int
    active_matches: int
    users_in_lobby: int
    users_in_match: int


class PeakStat(CamelModel):
    date: datetime.date
    peak_connected_users: int
    peak_active_matches: int
    peak_users_in_lobby: int
    peak_users_in_match: int


class DashboardStats(CamelModel):
    live: LiveStats
    history: list[PeakStat]
    total_users: int
    total_matches: int
    # Legacy fields kept for older dashboard builds
    active_users: int
    avg_time: str
    win_ratio: str


# ============================================
# Endpoints
# ============================================


@router.get("", response_model=DashboardStats)
async def get_dashboard_stats(
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
) -> DashboardStats:
    """Live game server stats merged with stored history and totals"""
    try:
        stats = await aggregator.get_aggregated_stats()
        return DashboardStats.model_validate(stats)

    except AggregationError as e:
        logger.exception(f"Failed to aggregate dashboard stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard stats") from None
