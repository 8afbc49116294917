"""Data models for matches, players, stat rollups and feedback."""

from .analytics import ActivityMetrics, AggregateStats, BalanceMetrics, PlayerLeaderboards
from .feedback import FeedbackEntry
from .match import MatchRecord, PlayerParticipation, WinningTeam
from .player import PlayerStatRecord
from .stats import LiveSnapshot, PeakStatSnapshot

__all__ = [
    "ActivityMetrics",
    "AggregateStats",
    "BalanceMetrics",
    "FeedbackEntry",
    "LiveSnapshot",
    "MatchRecord",
    "PeakStatSnapshot",
    "PlayerLeaderboards",
    "PlayerParticipation",
    "PlayerStatRecord",
    "WinningTeam",
]
