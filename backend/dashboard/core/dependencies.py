"""Dependency injection utilities for FastAPI

Process-wide handles (database manager, telemetry client) are created in
the app lifespan and stored on ``app.state``; everything request-scoped is
built from them here, so tests can swap any layer via
``app.dependency_overrides``.
"""

import logging

import asyncpg
from fastapi import Depends, HTTPException, Request

from dashboard.core.config import Settings
from dashboard.core.database import DatabaseManager
from dashboard.services import AnalyticsService, StatsAggregator, TelemetryClient
from gamedata.repositories import FeedbackRepository, HistoryRepository

logger = logging.getLogger(__name__)


# ============================================
# Process-wide Handles
# ============================================


def get_database_manager(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_telemetry_client(request: Request) -> TelemetryClient:
    return request.app.state.telemetry


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with"""
    return request.app.state.settings


def get_db_pool(db_manager: DatabaseManager = Depends(get_database_manager)) -> asyncpg.Pool:
    if not db_manager.is_connected:
        raise HTTPException(status_code=503, detail="Database not ready")
    return db_manager.pool


# ============================================
# Repository Dependencies
# ============================================


def get_history_repository(pool: asyncpg.Pool = Depends(get_db_pool)) -> HistoryRepository:
    """Get HistoryRepository instance (dependency injection)"""
    return HistoryRepository(pool)


def get_feedback_repository(pool: asyncpg.Pool = Depends(get_db_pool)) -> FeedbackRepository:
    """Get FeedbackRepository instance (dependency injection)"""
    return FeedbackRepository(pool)


# ============================================
# Service Dependencies
# ============================================


def get_stats_aggregator(
    telemetry: TelemetryClient = Depends(get_telemetry_client),
    history: HistoryRepository = Depends(get_history_repository),
    settings: Settings = Depends(get_app_settings),
) -> StatsAggregator:
    """Get StatsAggregator instance (dependency injection)"""
    return StatsAggregator(telemetry, history, history_limit=settings.history_days)


def get_analytics_service(
    history: HistoryRepository = Depends(get_history_repository),
    settings: Settings = Depends(get_app_settings),
) -> AnalyticsService:
    """Get AnalyticsService instance (dependency injection)"""
    return AnalyticsService(
        history,
        tz=settings.tzinfo,
        sample_size=settings.match_sample_size,
        leaderboard_size=settings.leaderboard_size,
    )
