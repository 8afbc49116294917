"""Data models for the matches table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class WinningTeam(str, Enum):
    """Recorded outcome of a finished match."""

    IMPOSTOR = "impostor"
    FRIENDS = "friends"

    @classmethod
    def parse(cls, value: Any) -> WinningTeam | None:
        """Map a stored value to a team; anything unrecognised is ``None``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class PlayerParticipation:
    """One player's seat in a match."""

    abandoned: bool = False
    uid: str | None = None
    name: str | None = None
    team: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerParticipation:
        return cls(
            abandoned=bool(data.get("abandoned", False)),
            uid=data.get("uid"),
            name=data.get("name"),
            team=data.get("team"),
        )


@dataclass
class MatchRecord:
    """A played match.

    Duration only means something when both timestamps are set.
    """

    id: str
    started_at: datetime | None = None
    ended_at: datetime | None = None
    winning_team: WinningTeam | None = None
    players: list[PlayerParticipation] = field(default_factory=list)

    @property
    def has_duration(self) -> bool:
        return self.started_at is not None and self.ended_at is not None
