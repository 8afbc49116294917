"""Data model for the player_stats table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PlayerStatRecord:
    """Per-player running totals, keyed by ``uid``."""

    uid: str
    name: str | None = None
    points: int = 0
    games_played: int = 0
    last_played_at: datetime | None = None
    first_seen_at: datetime | None = None
