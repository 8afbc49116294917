"""API Routers package

This package contains all API route handlers.
Routers are organized by feature domain.
"""

from . import analytics_router, feedback_router, stats_router

__all__ = [
    "analytics_router",
    "feedback_router",
    "stats_router",
]
