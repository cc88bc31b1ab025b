# src/fxsync/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and provider failures. Each error carries a
stable ``code`` that the query service puts into user-facing results.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    code = "domain_error"


class ProviderUnavailableError(DomainError):
    """Raised when the rate provider cannot be reached or returns unreadable data."""
    code = "provider_unavailable"


class ProviderRejectedError(DomainError):
    """Raised when the rate provider answers but reports failure itself."""
    code = "provider_rejected"

    def __init__(self, info: str):
        super().__init__(info)
        self.info = info


class UnknownCurrencyError(DomainError):
    """Raised when a requested currency code is absent from a snapshot."""
    code = "unknown_currency"

    def __init__(self, currency_code: str):
        super().__init__(f"Unknown currency: {currency_code}")
        self.currency_code = currency_code


class InvalidRateError(DomainError):
    """Raised when a rate value is invalid (e.g., negative or zero)."""
    code = "invalid_rate"


class InvalidAmountError(DomainError):
    """Raised when an amount to convert is not a positive number or is too large."""
    code = "invalid_amount"


class InvalidRangeError(DomainError):
    """Raised when a date range starts after it ends."""
    code = "invalid_range"


class NotFoundError(DomainError):
    """Raised when a valid query matches no stored rates."""
    code = "not_found"


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or invalid."""
