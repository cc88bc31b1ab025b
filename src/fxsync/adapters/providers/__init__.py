# src/fxsync/adapters/providers/__init__.py
"""
Provider Adapters - External API Clients

This package contains adapters for external exchange rate APIs.
All providers implement the RateProvider interface.
"""

from fxsync.adapters.providers.base import RateProvider
from fxsync.adapters.providers.fixer import FixerProvider

__all__ = [
    "RateProvider",
    "FixerProvider",
]
