# src/fxsync/adapters/telegram/jobs.py
"""
Telegram Jobs - Scheduled Rate Sync

This module registers the rate sync with the bot's JobQueue: a daily job at
00:00 UTC (or a repeating job when a fixed interval is configured) and an
optional one-off job at startup. The JobQueue stops these jobs when the
application shuts down.

Files that USE this module:
- fxsync.adapters.telegram.bot (schedule_sync_jobs is called while building the app)
- tests.test_jobs (unit tests)

Files that this module USES:
- fxsync.application.sync_scheduler (SyncScheduler runs the cycles)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations
import logging  # Standard library for logging messages

from telegram.ext import ContextTypes, JobQueue  # Job callback context and scheduler

from fxsync.application.sync_scheduler import SYNC_TIME_UTC, SyncScheduler  # Sync cycles and daily time

logger = logging.getLogger(__name__)

SYNC_JOB_NAME = "rate_sync"
STARTUP_SYNC_JOB_NAME = "rate_sync_startup"


async def rate_sync_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Timer job: take the scheduled snapshot."""
    scheduler: SyncScheduler = context.job.data
    await scheduler.run_scheduled()


async def startup_sync_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """One-off job at boot: snapshot today's rates right away."""
    scheduler: SyncScheduler = context.job.data
    await scheduler.run_cycle()


def schedule_sync_jobs(job_queue: JobQueue, scheduler: SyncScheduler) -> None:
    """
    Register the sync jobs for ``scheduler`` on ``job_queue``.

    Args:
        job_queue: The application's JobQueue
        scheduler: Scheduler whose cycles the jobs run
    """
    if scheduler.interval is not None:
        job_queue.run_repeating(
            callback=rate_sync_job,
            interval=scheduler.interval,
            first=scheduler.interval,
            name=SYNC_JOB_NAME,
            data=scheduler,
        )
    else:
        job_queue.run_daily(
            callback=rate_sync_job,
            time=SYNC_TIME_UTC,
            name=SYNC_JOB_NAME,
            data=scheduler,
        )

    if scheduler.run_on_start:
        job_queue.run_once(
            callback=startup_sync_job,
            when=0,  # as soon as the bot starts
            name=STARTUP_SYNC_JOB_NAME,
            data=scheduler,
        )

    next_run = scheduler.mark_scheduled()
    logger.info(
        "Rate sync scheduled (cadence=%s, run_on_start=%s, next run %s)",
        scheduler.cadence,
        scheduler.run_on_start,
        next_run.isoformat(),
    )
