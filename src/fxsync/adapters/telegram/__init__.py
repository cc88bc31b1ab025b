# src/fxsync/adapters/telegram/__init__.py
"""
Telegram Adapters - Bot Interface

This package contains Telegram bot adapters:
- Bot application builder
- Scheduled rate sync jobs
- Command handlers
"""

from fxsync.adapters.telegram.bot import build_application
from fxsync.adapters.telegram.handlers import build_handlers
from fxsync.adapters.telegram.jobs import schedule_sync_jobs

__all__ = [
    "build_application",
    "build_handlers",
    "schedule_sync_jobs",
]
