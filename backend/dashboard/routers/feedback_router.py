"""Feedback API routes"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from dashboard.core.config import Settings
from dashboard.core.dependencies import get_app_settings, get_feedback_repository
from gamedata.errors import RepositoryError
from gamedata.models import FeedbackEntry
from gamedata.repositories import FeedbackRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


def serialize_feedback(entry: FeedbackEntry) -> dict[str, Any]:
    """Flatten the free-form payload next to ``id`` and ``createdAt``."""
    return {
        "id": entry.id,
        **entry.payload,
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
    }


@router.get("")
async def get_feedback(
    limit: int | None = Query(default=None, gt=0),
    repo: FeedbackRepository = Depends(get_feedback_repository),
    settings: Settings = Depends(get_app_settings),
) -> list[dict[str, Any]]:
    """
    List player feedback, newest first

    Args:
        limit: Maximum number of entries (default: FEEDBACK_LIMIT setting, or all)
    """
    try:
        entries = await repo.list_feedback(limit or settings.feedback_limit)
        return [serialize_feedback(entry) for entry in entries]

    except RepositoryError as e:
        logger.exception(f"Failed to get feedback: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch feedback") from None
