"""Data models for live telemetry and daily peak rollups."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LiveSnapshot:
    """Current counts reported by the game server. Never persisted."""

    connected_users: int = 0
    active_matches: int = 0
    users_in_lobby: int = 0
    users_in_match: int = 0

    @classmethod
    def zero(cls) -> LiveSnapshot:
        return cls()


@dataclass
class PeakStatSnapshot:
    """Daily peak rollup written by the nightly batch job."""

    date: date
    peak_connected_users: int = 0
    peak_active_matches: int = 0
    peak_users_in_lobby: int = 0
    peak_users_in_match: int = 0
