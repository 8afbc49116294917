"""Derived game analytics: balance, leaderboards, engagement.

Pure functions over records already fetched from the store. Nothing here
does I/O, so every result is reproducible from its inputs.

Rounding is half-up (``x.x5`` goes up), which is how the dashboard has
always displayed these numbers. Python's ``round`` rounds half to even,
so it is not used.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, tzinfo

from gamedata.models import (
    ActivityMetrics,
    BalanceMetrics,
    MatchRecord,
    PlayerLeaderboards,
    PlayerStatRecord,
    WinningTeam,
)

MS_PER_MINUTE = 60_000
DEFAULT_LEADERBOARD_SIZE = 10
RANKING_KEYS = ("points", "games_played")


def round_one_decimal(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def round_percent(value: float) -> int:
    """Round half-up to a whole number."""
    return int(math.floor(value + 0.5))


# ============================================
# Balance
# ============================================


def _win_rate(matches: Sequence[MatchRecord]) -> float:
    impostor_wins = sum(1 for m in matches if m.winning_team is WinningTeam.IMPOSTOR)
    friends_wins = sum(1 for m in matches if m.winning_team is WinningTeam.FRIENDS)
    valid_matches = impostor_wins + friends_wins
    if valid_matches == 0:
        return 0
    return impostor_wins / valid_matches * 100


def _avg_duration_minutes(matches: Sequence[MatchRecord]) -> float:
    durations_ms = [
        (m.ended_at - m.started_at).total_seconds() * 1000
        for m in matches
        if m.has_duration
    ]
    if not durations_ms:
        return 0
    return sum(durations_ms) / len(durations_ms) / MS_PER_MINUTE


def _abandonment_rate(matches: Sequence[MatchRecord]) -> float:
    # Unknown-outcome matches still count towards participations
    total = 0
    abandoned = 0
    for match in matches:
        for player in match.players:
            total += 1
            if player.abandoned:
                abandoned += 1
    if total == 0:
        return 0
    return abandoned / total * 100


def compute_balance(matches: Sequence[MatchRecord]) -> BalanceMetrics:
    """Win rate, average duration and abandonment over a match sample."""
    if not matches:
        return BalanceMetrics(
            impostor_win_rate=0, avg_duration_minutes=0, abandonment_rate=0, sample_size=0
        )

    return BalanceMetrics(
        impostor_win_rate=round_one_decimal(_win_rate(matches)),
        avg_duration_minutes=round_one_decimal(_avg_duration_minutes(matches)),
        abandonment_rate=round_one_decimal(_abandonment_rate(matches)),
        sample_size=len(matches),
    )


# ============================================
# Leaderboards
# ============================================


def rank_players(
    players: Iterable[PlayerStatRecord],
    key: str,
    limit: int = DEFAULT_LEADERBOARD_SIZE,
) -> list[PlayerStatRecord]:
    """Sort players descending on ``key`` and keep the first ``limit``.

    The sort is stable, so ties keep the order the store returned them in.
    """
    if key not in RANKING_KEYS:
        raise ValueError(f"Unsupported ranking key {key!r}, expected one of {RANKING_KEYS}")
    ranked = sorted(players, key=lambda p: getattr(p, key) or 0, reverse=True)
    return ranked[:limit]


def build_leaderboards(
    by_points: Iterable[PlayerStatRecord],
    by_games: Iterable[PlayerStatRecord],
    limit: int = DEFAULT_LEADERBOARD_SIZE,
) -> PlayerLeaderboards:
    """Assemble the two independent top-N views."""
    return PlayerLeaderboards(
        top_by_points=rank_players(by_points, "points", limit),
        top_by_games=rank_players(by_games, "games_played", limit),
    )


# ============================================
# Activity
# ============================================


def activity_window(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return ``(today_start, week_ago_start)`` for ``now`` in zone ``tz``.

    ``today_start`` is local midnight of ``now``'s calendar day; a naive
    ``now`` is taken to already be local time in ``tz``.
    """
    local_now = now.replace(tzinfo=tz) if now.tzinfo is None else now.astimezone(tz)
    today_start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago_start = today_start - timedelta(days=7)
    return today_start, week_ago_start


def dau_wau_ratio(dau: int, wau: int) -> int:
    """DAU as a whole-number percentage of WAU; 0 when there is no WAU."""
    if wau <= 0:
        return 0
    return round_percent(dau / wau * 100)


def build_activity(dau: int, wau: int, new_users_today: int, total_users: int) -> ActivityMetrics:
    return ActivityMetrics(
        dau=dau,
        wau=wau,
        new_users_today=new_users_today,
        total_users=total_users,
        dau_wau_ratio=dau_wau_ratio(dau, wau),
    )
