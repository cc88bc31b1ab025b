# src/fxsync/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for all exchange rate providers.
It establishes the contract that all provider implementations must follow.

Files that USE this module:
- fxsync.adapters.providers.fixer (FixerProvider implements RateProvider)
- fxsync.application.query_service (depends on the RateProvider contract)
- fxsync.application.sync_scheduler (depends on the RateProvider contract)

Files that this module USES:
- fxsync.domain.models (RateSnapshot)
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from fxsync.domain.models import RateSnapshot


class RateProvider(ABC):
    @abstractmethod
    def fetch_rates(self, day: Optional[date] = None) -> RateSnapshot:
        """
        Return all rates against the upstream base currency.

        Latest rates when ``day`` is None, otherwise the snapshot for that day.
        Raises ProviderUnavailableError or ProviderRejectedError; never returns
        a partial snapshot.
        """
        raise NotImplementedError
