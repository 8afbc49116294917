"""Data model for the feedback table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class FeedbackEntry:
    """Player-submitted feedback; ``payload`` holds the free-form fields."""

    id: str
    created_at: datetime | None = None
    payload: dict[str, Any] = field(default_factory=dict)
