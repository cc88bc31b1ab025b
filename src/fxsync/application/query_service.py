# src/fxsync/application/query_service.py
"""
Query Service - Conversions and Historical Range Lookups

This module contains the use cases exposed to callers: converting an amount
with live or historical provider rates, and listing stored rates for a
currency over a date range. Every domain error is turned into a result with
a readable message and a stable error code, so front ends never see raw
exceptions.

Files that USE this module:
- fxsync.app (creates the service)
- fxsync.adapters.telegram.handlers (/convert and /history)
- tests.test_query_service (unit tests)

Files that this module USES:
- fxsync.adapters.providers.base (RateProvider contract)
- fxsync.adapters.persistence.rate_store (RateStore.query_range)
- fxsync.domain (models, convert, errors)
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from fxsync.adapters.persistence.rate_store import RateStore
from fxsync.adapters.providers.base import RateProvider
from fxsync.domain.conversion import convert, to_decimal
from fxsync.domain.errors import (
    DomainError,
    InvalidAmountError,
    NotFoundError,
    UnknownCurrencyError,
)
from fxsync.domain.models import (
    ConversionRequest,
    ConversionResult,
    RangeResult,
    RatePoint,
    RateSnapshot,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal_error"


def _check_amount(amount) -> Decimal:
    try:
        value = to_decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidAmountError(f"Amount must be a number, got {amount!r}") from e
    if not value.is_finite() or value <= 0:
        raise InvalidAmountError(f"Amount must be greater than zero, got {amount}")
    return value


class QueryService:
    """Use cases for converting amounts and reading stored rate history."""

    def __init__(self, provider: RateProvider, store: RateStore):
        self.provider = provider
        self.store = store

    def _convert_with(self, snapshot: RateSnapshot, from_currency: str, to_currency: str, amount: Decimal) -> Decimal:
        from_rate = snapshot.rate_for(from_currency)
        if from_rate is None:
            raise UnknownCurrencyError(from_currency.upper())
        to_rate = snapshot.rate_for(to_currency)
        if to_rate is None:
            raise UnknownCurrencyError(to_currency.upper())
        return convert(from_rate, to_rate, amount)

    def _convert(self, from_currency: str, to_currency: str, amount, day: Optional[date]) -> ConversionResult:
        label = day.isoformat() if day else "latest"
        try:
            value = _check_amount(amount)
            snapshot = self.provider.fetch_rates(day)
            result = self._convert_with(snapshot, from_currency, to_currency, value)
        except DomainError as e:
            logger.info("Conversion %s->%s (%s) failed: %s", from_currency, to_currency, label, e)
            return ConversionResult.failure(e.code, str(e))
        except Exception as e:
            logger.exception("Unexpected error converting %s->%s (%s)", from_currency, to_currency, label)
            return ConversionResult.failure(INTERNAL_ERROR, f"Error converting currency: {e}")

        logger.debug("Converted %s %s -> %s %s (%s)", value, from_currency, result, to_currency, label)
        return ConversionResult(amount=result)

    def convert_live(self, from_currency: str, to_currency: str, amount) -> ConversionResult:
        """Convert using the provider's latest rates."""
        return self._convert(from_currency, to_currency, amount, None)

    def convert_historical(self, from_currency: str, to_currency: str, amount, day: date) -> ConversionResult:
        """Convert using the provider's rates for ``day``."""
        return self._convert(from_currency, to_currency, amount, day)

    def convert(self, request: ConversionRequest) -> ConversionResult:
        """Dispatch a request to live or historical conversion by its date."""
        if request.date is None:
            return self.convert_live(request.from_currency, request.to_currency, request.amount)
        return self.convert_historical(request.from_currency, request.to_currency, request.amount, request.date)

    def _points(self, currency_code: str, start: date, end: date) -> List[RatePoint]:
        points = self.store.query_range(currency_code, start, end)
        if not points:
            raise NotFoundError(
                f"No rates found for {currency_code.upper()} between "
                f"{start.isoformat()} and {end.isoformat()}"
            )
        return points

    def get_range(self, currency_code: str, start: date, end: date) -> RangeResult:
        """
        List stored rates for a currency between two days, inclusive.

        Returns a failure with code ``invalid_range`` when start is after end,
        and ``not_found`` when the range is valid but holds no rates.
        """
        try:
            points = self._points(currency_code, start, end)
        except DomainError as e:
            logger.info("Range query %s %s..%s failed: %s", currency_code, start, end, e)
            return RangeResult.failure(e.code, str(e))
        except Exception as e:
            logger.exception("Unexpected error reading rates for %s", currency_code)
            return RangeResult.failure(INTERNAL_ERROR, f"Error retrieving historical rates: {e}")
        return RangeResult(rates=points)
