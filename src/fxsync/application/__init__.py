# src/fxsync/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains application services that orchestrate domain logic:
the query service used by front ends and the background sync scheduler.
"""

from fxsync.application.query_service import QueryService
from fxsync.application.sync_scheduler import SyncOutcome, SyncScheduler, SyncState

__all__ = [
    "QueryService",
    "SyncOutcome",
    "SyncScheduler",
    "SyncState",
]
