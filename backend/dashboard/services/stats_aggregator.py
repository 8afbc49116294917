"""Aggregated dashboard stats: live telemetry merged with stored history.

Per request the aggregator moves through ``FETCHING -> MERGING -> DONE``
or ``FAILED``. Telemetry and the three history queries run as concurrent
tasks; the merge step then applies the partial-failure policy:

- telemetry is a ``TelemetryResult`` and is always absorbed
- any history failure fails the whole request with one ``AggregationError``
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from gamedata.models import AggregateStats, PeakStatSnapshot

from .telemetry import TelemetryResult

logger = logging.getLogger(__name__)

# Legacy dashboard fields, static since live computation moved elsewhere
LEGACY_AVG_TIME = "12m"
LEGACY_WIN_RATIO = "48%"


class TelemetrySource(Protocol):
    async def fetch_live_snapshot(self) -> TelemetryResult: ...


class HistorySource(Protocol):
    async def list_recent_peak_stats(self, limit: int = 7) -> list[PeakStatSnapshot]: ...

    async def count_players(self) -> int: ...

    async def count_matches(self) -> int: ...


class AggregationState(str, Enum):
    FETCHING = "fetching"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


class AggregationError(Exception):
    """One or more history queries failed; no partial payload is produced."""

    def __init__(self, failures: dict[str, BaseException]):
        self.failures = failures
        self.state = AggregationState.FAILED
        names = ", ".join(sorted(failures))
        super().__init__(f"Stats aggregation failed ({names})")


@dataclass
class _Fetched:
    """Raw fan-out results, each either a value or the exception it raised."""

    telemetry: TelemetryResult | BaseException
    history: list[PeakStatSnapshot] | BaseException
    total_users: int | BaseException
    total_matches: int | BaseException


class StatsAggregator:
    """Builds the merged live + history payload for one dashboard request."""

    def __init__(self, telemetry: TelemetrySource, history: HistorySource, history_limit: int = 7):
        self.telemetry = telemetry
        self.history = history
        self.history_limit = history_limit

    async def get_aggregated_stats(self) -> AggregateStats:
        state = AggregationState.FETCHING
        logger.debug(f"Stats aggregation: {state.value}")
        fetched = await self._fetch()

        state = AggregationState.MERGING
        logger.debug(f"Stats aggregation: {state.value}")
        try:
            result = self._merge(fetched)
        except AggregationError:
            logger.debug(f"Stats aggregation: {AggregationState.FAILED.value}")
            raise

        state = AggregationState.DONE
        logger.debug(f"Stats aggregation: {state.value}")
        return result

    async def _fetch(self) -> _Fetched:
        tasks = [
            asyncio.create_task(self.telemetry.fetch_live_snapshot()),
            asyncio.create_task(self.history.list_recent_peak_stats(self.history_limit)),
            asyncio.create_task(self.history.count_players()),
            asyncio.create_task(self.history.count_matches()),
        ]
        # Sub-queries are cheap; let every one finish rather than cancel siblings
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return _Fetched(*results)

    def _merge(self, fetched: _Fetched) -> AggregateStats:
        failures: dict[str, BaseException] = {}
        for name in ("history", "total_users", "total_matches"):
            value: Any = getattr(fetched, name)
            if isinstance(value, BaseException):
                failures[name] = value

        telemetry = fetched.telemetry
        if isinstance(telemetry, BaseException):
            # The client never raises, but a substituted source might
            logger.warning(f"Telemetry source raised {type(telemetry).__name__}: {telemetry}")
            telemetry = TelemetryResult.unavailable(str(telemetry))

        if failures:
            for name, exc in failures.items():
                logger.error(f"Stats aggregation sub-query '{name}' failed: {exc}")
            raise AggregationError(failures) from next(iter(failures.values()))

        live = telemetry.snapshot
        history: list[PeakStatSnapshot] = fetched.history  # type: ignore[assignment]
        logger.info(
            f"Stats: history={len(history)}, users={fetched.total_users}, "
            f"matches={fetched.total_matches}, live={'ok' if telemetry.available else 'down'}"
        )
        if history:
            logger.debug(f"Stats: oldest history date {history[0].date}")

        return AggregateStats(
            live=live,
            history=history,
            total_users=fetched.total_users,  # type: ignore[arg-type]
            total_matches=fetched.total_matches,  # type: ignore[arg-type]
            active_users=live.connected_users,
            avg_time=LEGACY_AVG_TIME,
            win_ratio=LEGACY_WIN_RATIO,
        )
