"""Services layer - Business logic

This module provides service classes for handling business logic.
Services are initialized with their dependencies and accessed through dependency injection.
"""

from .analytics_service import AnalyticsService
from .stats_aggregator import AggregationError, AggregationState, StatsAggregator
from .telemetry import TelemetryClient, TelemetryResult

__all__ = [
    "AggregationError",
    "AggregationState",
    "AnalyticsService",
    "StatsAggregator",
    "TelemetryClient",
    "TelemetryResult",
]
