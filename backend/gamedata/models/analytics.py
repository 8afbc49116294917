"""Derived payloads returned by the stats and analytics operations."""

from __future__ import annotations

from dataclasses import dataclass, field

from .player import PlayerStatRecord
from .stats import LiveSnapshot, PeakStatSnapshot


@dataclass
class BalanceMetrics:
    """Win-rate balance over a recent match sample.

    Rates are percentages rounded to one decimal place. ``sample_size`` is
    the number of matches looked at, not the population size.
    """

    impostor_win_rate: float = 0
    avg_duration_minutes: float = 0
    abandonment_rate: float = 0
    sample_size: int = 0


@dataclass
class PlayerLeaderboards:
    """Two independently ranked top-N views over player_stats."""

    top_by_points: list[PlayerStatRecord] = field(default_factory=list)
    top_by_games: list[PlayerStatRecord] = field(default_factory=list)


@dataclass
class ActivityMetrics:
    dau: int = 0
    wau: int = 0
    new_users_today: int = 0
    total_users: int = 0
    dau_wau_ratio: int = 0


@dataclass
class AggregateStats:
    """Merged live + historical dashboard payload.

    ``active_users``, ``avg_time`` and ``win_ratio`` mirror the legacy
    dashboard fields; the latter two are static placeholders.
    """

    live: LiveSnapshot
    history: list[PeakStatSnapshot]
    total_users: int
    total_matches: int
    active_users: int
    avg_time: str = "12m"
    win_ratio: str = "48%"
