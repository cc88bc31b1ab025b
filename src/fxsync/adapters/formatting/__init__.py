# src/fxsync/adapters/formatting/__init__.py
"""
Formatting Adapters - Message Formatting

This package contains message formatting adapters for Telegram output.
"""

from fxsync.adapters.formatting.formatter import (
    USAGE,
    format_conversion,
    format_range,
    format_status,
)

__all__ = [
    "USAGE",
    "format_conversion",
    "format_range",
    "format_status",
]
