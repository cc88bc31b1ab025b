# src/fxsync/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models, the conversion arithmetic and the
error taxonomy. No dependencies on infrastructure or external systems.
"""

from fxsync.domain.models import (
    ConversionRequest,
    ConversionResult,
    RangeResult,
    RatePoint,
    RateSnapshot,
)
from fxsync.domain.conversion import convert, to_decimal
from fxsync.domain.errors import (
    ConfigurationError,
    DomainError,
    InvalidAmountError,
    InvalidRangeError,
    InvalidRateError,
    NotFoundError,
    ProviderRejectedError,
    ProviderUnavailableError,
    UnknownCurrencyError,
)

__all__ = [
    "RateSnapshot",
    "RatePoint",
    "ConversionRequest",
    "ConversionResult",
    "RangeResult",
    "convert",
    "to_decimal",
    "DomainError",
    "ConfigurationError",
    "InvalidAmountError",
    "InvalidRangeError",
    "InvalidRateError",
    "NotFoundError",
    "ProviderRejectedError",
    "ProviderUnavailableError",
    "UnknownCurrencyError",
]
