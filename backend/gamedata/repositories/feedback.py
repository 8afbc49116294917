"""Repository for the feedback table."""

from __future__ import annotations

import logging

import asyncpg

from gamedata.models import FeedbackEntry

from .base import load_json, store_operation

logger = logging.getLogger(__name__)


class FeedbackRepository:
    """Plain passthrough reads of player feedback, newest first."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    @store_operation("list_feedback")
    async def list_feedback(self, limit: int | None = None) -> list[FeedbackEntry]:
        """List feedback by ``created_at`` descending; ``limit=None`` returns all."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, created_at, payload
                FROM feedback
                ORDER BY created_at DESC NULLS LAST
                LIMIT $1
                """,
                limit,
            )
        return [
            FeedbackEntry(
                id=str(row["id"]),
                created_at=row["created_at"],
                payload=load_json(row["payload"]) or {},
            )
            for row in rows
        ]
