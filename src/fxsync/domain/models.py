# src/fxsync/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Rate snapshots fetched from the provider
- Stored rate points returned by range queries
- Conversion requests and their results
- Range query results

Files that USE this module:
- fxsync.application.* (services produce and consume these models)
- fxsync.adapters.* (providers build snapshots, the store returns rate points)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import date  # Calendar days without a time component
from decimal import Decimal  # Arbitrary-precision rates and amounts
from typing import Any, Dict, List, Mapping, Optional  # Type hints


@dataclass(frozen=True)
class RateSnapshot:
    """
    Point-in-time set of exchange rates against one base currency.

    Attributes:
        date: Day the rates apply to
        rates: Currency code -> units of that currency per 1 base unit
        base: Base currency reported upstream (e.g. "EUR")
    """
    date: date
    rates: Mapping[str, Decimal]
    base: Optional[str] = None

    def rate_for(self, currency_code: str) -> Optional[Decimal]:
        """Return the rate for a code, or None when the snapshot lacks it."""
        return self.rates.get(currency_code.upper())


@dataclass(frozen=True)
class RatePoint:
    """One stored rate for a currency on a day."""
    date: date
    rate: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {"date": self.date.isoformat(), "rate": str(self.rate)}


@dataclass(frozen=True)
class ConversionRequest:
    """
    Amount to convert between two currencies, optionally at a past date.

    Currency codes are normalized to upper case.
    """
    from_currency: str
    to_currency: str
    amount: Decimal
    date: Optional[date] = None

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "from_currency", self.from_currency.strip().upper())
        object.__setattr__(self, "to_currency", self.to_currency.strip().upper())


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of a conversion: either an amount or an error.

    Attributes:
        amount: Converted amount rounded to 2 fractional digits
        error: Human-readable error message
        error_code: Stable error identifier (see DomainError.code)
    """
    amount: Optional[Decimal] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error_code: str, error: str) -> ConversionResult:
        return cls(error=error, error_code=error_code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "result": str(self.amount) if self.amount is not None else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class RangeResult:
    """Outcome of a historical range lookup: rate points or an error."""
    rates: List[RatePoint] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error_code: str, error: str) -> RangeResult:
        return cls(error=error, error_code=error_code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "rates": [point.to_dict() for point in self.rates],
            "error": self.error,
        }
