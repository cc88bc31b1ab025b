# src/fxsync/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- Relational rate store (SQLAlchemy, SQLite by default)
"""

from fxsync.adapters.persistence.rate_store import ExchangeRate, RateStore

__all__ = [
    "ExchangeRate",
    "RateStore",
]
