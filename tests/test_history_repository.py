"""
Tests for the read-only repositories.

Run against a fake asyncpg pool: checks query shape, row mapping and the
wrapping of store failures into RepositoryError.
"""

import json
from datetime import date, datetime, timezone

import asyncpg
import pytest

from conftest import FakePool, run
from gamedata.errors import RepositoryError
from gamedata.models import WinningTeam
from gamedata.repositories import FeedbackRepository, HistoryRepository

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def peak_row(day: int, users: int) -> dict:
    return {
        "date": date(2026, 10, day),
        "peak_connected_users": users,
        "peak_active_matches": users // 4,
        "peak_users_in_lobby": None,
        "peak_users_in_match": users // 2,
    }


class TestPeakStats:
    def test_returned_oldest_first(self):
        # Store answers newest first (ORDER BY date DESC)
        pool = FakePool([("FROM peak_stats", [peak_row(18, 90), peak_row(17, 80), peak_row(16, 70)])])
        history = run(HistoryRepository(pool).list_recent_peak_stats())

        assert [h.date.day for h in history] == [16, 17, 18]
        assert history[0].peak_users_in_lobby == 0

    def test_query_orders_desc_and_limits(self):
        pool = FakePool([("FROM peak_stats", [])])
        run(HistoryRepository(pool).list_recent_peak_stats(limit=3))

        query, args = pool.queries[0]
        assert "ORDER BY date DESC" in query
        assert args == (3,)

    def test_default_limit_is_seven(self):
        pool = FakePool([("FROM peak_stats", [])])
        run(HistoryRepository(pool).list_recent_peak_stats())
        assert pool.queries[0][1] == (7,)


class TestCounters:
    def test_count_players_and_matches(self):
        pool = FakePool([("FROM player_stats", 120), ("FROM matches", 3400)])
        repo = HistoryRepository(pool)
        assert run(repo.count_players()) == 120
        assert run(repo.count_matches()) == 3400

    @pytest.mark.parametrize(
        "field, column",
        [
            ("last_played_at", "last_played_at"),
            ("lastPlayedAt", "last_played_at"),
            ("firstSeenAt", "first_seen_at"),
        ],
    )
    def test_count_where(self, field, column):
        pool = FakePool([("FROM player_stats", 7)])
        assert run(HistoryRepository(pool).count_where(field, NOW)) == 7

        query, args = pool.queries[0]
        assert f"WHERE {column} >= $1" in query
        assert args == (NOW,)

    def test_count_where_rejects_unknown_field(self):
        pool = FakePool()
        with pytest.raises(ValueError):
            run(HistoryRepository(pool).count_where("points; DROP TABLE x", NOW))
        assert pool.queries == []


class TestMatches:
    def test_sample_maps_rows(self):
        rows = [
            {
                "id": 1,
                "started_at": NOW,
                "ended_at": NOW,
                "winning_team": "impostor",
                # asyncpg returns jsonb as text unless a codec is registered
                "players": json.dumps([{"uid": "a", "abandoned": True}, {"uid": "b"}]),
            },
            {
                "id": 2,
                "started_at": None,
                "ended_at": None,
                "winning_team": None,
                "players": [{"uid": "c", "abandoned": False}],
            },
        ]
        pool = FakePool([("FROM matches", rows)])
        matches = run(HistoryRepository(pool).sample_recent_matches())

        assert matches[0].id == "1"
        assert matches[0].winning_team is WinningTeam.IMPOSTOR
        assert [p.abandoned for p in matches[0].players] == [True, False]
        assert matches[1].winning_team is None
        assert matches[1].has_duration is False

    @pytest.mark.parametrize("players", ["5", "true", '{"uid": "a"}', 5, None])
    def test_non_array_players_read_as_empty(self, players):
        row = {
            "id": 3,
            "started_at": NOW,
            "ended_at": NOW,
            "winning_team": "friends",
            "players": players,
        }
        pool = FakePool([("FROM matches", [row])])
        matches = run(HistoryRepository(pool).sample_recent_matches())

        assert matches[0].players == []
        assert matches[0].winning_team is WinningTeam.FRIENDS

    def test_sample_is_bounded(self):
        pool = FakePool([("FROM matches", [])])
        run(HistoryRepository(pool).sample_recent_matches())

        query, args = pool.queries[0]
        assert "ORDER BY ended_at DESC" in query
        assert args == (1000,)


class TestTopPlayers:
    ROW = {
        "uid": "ana",
        "name": "Ana",
        "points": 50,
        "games_played": None,
        "last_played_at": NOW,
        "first_seen_at": None,
    }

    @pytest.mark.parametrize(
        "field, column",
        [("points", "points"), ("games_played", "games_played"), ("gamesPlayed", "games_played")],
    )
    def test_orders_by_field(self, field, column):
        pool = FakePool([("FROM player_stats", [self.ROW])])
        players = run(HistoryRepository(pool).top_players_by(field))

        query, args = pool.queries[0]
        assert f"ORDER BY {column} DESC" in query
        assert args == (10,)
        assert players[0].uid == "ana"
        assert players[0].games_played == 0

    def test_rejects_unknown_field(self):
        with pytest.raises(ValueError):
            run(HistoryRepository(FakePool()).top_players_by("name"))


class TestFailures:
    @pytest.mark.parametrize(
        "error",
        [
            ConnectionRefusedError("connection refused"),
            TimeoutError(),
            asyncpg.InterfaceError("pool is closing"),
        ],
    )
    def test_store_errors_wrapped(self, error):
        pool = FakePool([("FROM", error)])
        with pytest.raises(RepositoryError) as exc_info:
            run(HistoryRepository(pool).count_players())

        assert exc_info.value.operation == "count_players"
        assert exc_info.value.__cause__ is error

    def test_every_operation_wraps(self):
        pool = FakePool([("FROM", OSError("unreachable"))])
        repo = HistoryRepository(pool)
        calls = [
            repo.list_recent_peak_stats(),
            repo.count_players(),
            repo.count_matches(),
            repo.sample_recent_matches(),
            repo.top_players_by("points"),
            repo.count_where("last_played_at", NOW),
            FeedbackRepository(pool).list_feedback(),
        ]
        for call in calls:
            with pytest.raises(RepositoryError):
                run(call)


class TestFeedback:
    def test_lists_newest_first_with_payload(self):
        rows = [
            {"id": "f2", "created_at": NOW, "payload": json.dumps({"message": "gg", "rating": 5})},
            {"id": "f1", "created_at": None, "payload": None},
        ]
        pool = FakePool([("FROM feedback", rows)])
        entries = run(FeedbackRepository(pool).list_feedback(limit=2))

        query, args = pool.queries[0]
        assert "ORDER BY created_at DESC" in query
        assert args == (2,)
        assert entries[0].payload == {"message": "gg", "rating": 5}
        assert entries[1].created_at is None
        assert entries[1].payload == {}

    def test_unlimited_by_default(self):
        pool = FakePool([("FROM feedback", [])])
        run(FeedbackRepository(pool).list_feedback())
        assert pool.queries[0][1] == (None,)

    def test_repeated_reads_identical(self):
        rows = [{"id": "f1", "created_at": NOW, "payload": {"message": "hi"}}]
        repo = FeedbackRepository(FakePool([("FROM feedback", rows)]))
        assert run(repo.list_feedback()) == run(repo.list_feedback())
