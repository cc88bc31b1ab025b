# src/fxsync/adapters/telegram/bot.py
"""
Telegram Bot - Application Builder

This module builds the bot application, registers the command handlers and
schedules the rate sync on the application's JobQueue.

Files that USE this module:
- fxsync.app (build_application)
- tests.test_jobs (unit tests)

Files that this module USES:
- fxsync.adapters.telegram.handlers (command handlers, bot_data keys)
- fxsync.adapters.telegram.jobs (schedule_sync_jobs)
"""

from __future__ import annotations

from telegram.ext import Application

from fxsync.adapters.telegram.handlers import (
    QUERY_SERVICE_KEY,
    SCHEDULER_KEY,
    build_handlers,
    on_error,
)
from fxsync.adapters.telegram.jobs import schedule_sync_jobs
from fxsync.application.query_service import QueryService
from fxsync.application.sync_scheduler import SyncScheduler


def build_application(bot_token: str, query_service: QueryService, scheduler: SyncScheduler) -> Application:
    """
    Build Telegram bot application with handlers and the scheduled rate sync.

    Args:
        bot_token: Telegram bot token
        query_service: Service used by /convert and /history
        scheduler: Scheduler whose cycles run as JobQueue jobs

    Returns:
        Configured Application instance

    Raises:
        RuntimeError: If python-telegram-bot was installed without the job-queue extra
    """
    application = Application.builder().token(bot_token).build()
    if application.job_queue is None:
        raise RuntimeError('JobQueue is unavailable; install "python-telegram-bot[job-queue]"')

    application.bot_data[QUERY_SERVICE_KEY] = query_service
    application.bot_data[SCHEDULER_KEY] = scheduler
    for handler in build_handlers():
        application.add_handler(handler)
    application.add_error_handler(on_error)

    schedule_sync_jobs(application.job_queue, scheduler)
    return application
