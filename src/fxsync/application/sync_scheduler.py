# src/fxsync/application/sync_scheduler.py
"""
Sync Scheduler - Daily Rate Snapshot Job

This module takes one snapshot of all rates per day: it fetches the latest
rates from the provider and replaces that day's rows in the store. Because
the store replaces a whole day at once, re-running a cycle (after a restart
or on a short test interval) overwrites the day instead of duplicating it.

A cycle moves IDLE -> FETCHING -> PERSISTING -> IDLE, or to FAILED and
back to IDLE on any error. Failures are logged and not retried; the next
attempt is the next scheduled run, and missed days are not backfilled.

Timing is owned by the bot's JobQueue (see fxsync.adapters.telegram.jobs);
this class only runs cycles and keeps track of when the next one is due.

Files that USE this module:
- fxsync.app (creates the scheduler)
- fxsync.adapters.telegram.jobs (registers its cycles as JobQueue jobs)
- fxsync.adapters.telegram.handlers (/status reads status())
- tests.test_sync_scheduler (unit tests)

Files that this module USES:
- fxsync.adapters.providers.base (RateProvider contract)
- fxsync.adapters.persistence.rate_store (RateStore.upsert_day)
"""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fxsync.adapters.persistence.rate_store import RateStore
from fxsync.adapters.providers.base import RateProvider

logger = logging.getLogger(__name__)

# Daily snapshot time
SYNC_TIME_UTC = time(0, 0, tzinfo=timezone.utc)

# A timer run this close to its scheduled time stores under the scheduled day
SCHEDULE_TOLERANCE = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_utc_midnight(now: datetime) -> datetime:
    """Return the first UTC midnight strictly after ``now``."""
    now = now.astimezone(timezone.utc)
    today = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)
    return today + timedelta(days=1)


class SyncState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PERSISTING = "persisting"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of one sync cycle."""
    day: date
    rows: int = 0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


class SyncScheduler:
    """Single background job that owns all writes to the rate store."""

    def __init__(
        self,
        provider: RateProvider,
        store: RateStore,
        interval: Optional[timedelta] = None,
        run_on_start: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            provider: Source of rate snapshots
            store: Rate store to write into
            interval: Fixed delay between cycles; None runs daily at 00:00 UTC
            run_on_start: Take a snapshot as soon as the bot starts
            clock: Returns the current aware UTC datetime (injectable for tests)
        """
        if interval is not None and interval <= timedelta(0):
            raise ValueError("Sync interval must be positive")
        self.provider = provider
        self.store = store
        self.interval = interval
        self.run_on_start = run_on_start
        self._clock = clock

        self.state = SyncState.IDLE
        self.last_success_at: Optional[datetime] = None
        self.last_outcome: Optional[SyncOutcome] = None
        self.last_error: Optional[str] = None
        self.next_run_at: Optional[datetime] = None

    @property
    def cadence(self) -> str:
        return str(self.interval) if self.interval else "daily 00:00 UTC"

    def _next_after(self, moment: datetime) -> datetime:
        if self.interval is not None:
            return moment + self.interval
        return next_utc_midnight(moment)

    def mark_scheduled(self, now: Optional[datetime] = None) -> datetime:
        """Record the first timer run after ``now`` (called when jobs are registered)."""
        self.next_run_at = self._next_after(now or self._clock())
        return self.next_run_at

    async def run_cycle(self, day: Optional[date] = None) -> SyncOutcome:
        """
        Fetch the latest rates and replace the snapshot for ``day``.

        ``day`` defaults to today's UTC date. Never raises for provider or
        store failures: they are logged and returned in the outcome.
        """
        if day is None:
            day = self._clock().astimezone(timezone.utc).date()
        try:
            self.state = SyncState.FETCHING
            snapshot = await asyncio.to_thread(self.provider.fetch_rates)

            self.state = SyncState.PERSISTING
            rows = await asyncio.to_thread(self.store.upsert_day, day, snapshot.rates)
        except asyncio.CancelledError:
            self.state = SyncState.IDLE
            raise
        except Exception as e:
            self.state = SyncState.FAILED
            logger.error("Rate sync for %s failed: %s", day.isoformat(), e, exc_info=True)
            outcome = SyncOutcome(day=day, error=str(e) or type(e).__name__)
            self.last_error = outcome.error
            self.last_outcome = outcome
            self.state = SyncState.IDLE
            return outcome

        outcome = SyncOutcome(day=day, rows=rows)
        self.last_outcome = outcome
        self.last_success_at = self._clock()
        self.last_error = None
        self.state = SyncState.IDLE
        logger.info("Rate sync for %s stored %d rates", day.isoformat(), rows)
        return outcome

    async def run_scheduled(self) -> SyncOutcome:
        """
        Run the cycle the timer fired for.

        In daily mode the snapshot day is the day of the scheduled run, so a
        wake-up slightly before midnight still stores under the new day.
        """
        now = self._clock()
        scheduled = self.next_run_at
        day: Optional[date] = None
        base = now
        if self.interval is None and scheduled is not None and abs(now - scheduled) <= SCHEDULE_TOLERANCE:
            day = scheduled.astimezone(timezone.utc).date()
            base = max(now, scheduled)
        self.next_run_at = self._next_after(base)
        outcome = await self.run_cycle(day)
        logger.info("Next rate sync at %s", self.next_run_at.isoformat())
        return outcome

    def status(self) -> Dict[str, Any]:
        """Snapshot of scheduler state for status reporting."""
        outcome = self.last_outcome
        return {
            "state": self.state.value,
            "cadence": self.cadence,
            "last_success_at": self.last_success_at,
            "last_day": outcome.day if outcome else None,
            "last_rows": outcome.rows if outcome else 0,
            "last_error": self.last_error,
            "next_run_at": self.next_run_at,
        }
