# src/fxsync/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation and input parsing
- Logging configuration
"""

from fxsync.shared.validators import (
    is_in_memory_sqlite,
    parse_amount,
    parse_currency_code,
    parse_iso_date,
    validate_api_key,
    validate_bot_token,
    validate_currency_code,
)

__all__ = [
    "is_in_memory_sqlite",
    "validate_api_key",
    "validate_bot_token",
    "validate_currency_code",
    "parse_amount",
    "parse_currency_code",
    "parse_iso_date",
]
