# src/fxsync/adapters/formatting/formatter.py
"""
Message Formatter - Text Formatting and Presentation

This module renders conversion results, rate histories and scheduler
status as plain-text Telegram replies.

Files that USE this module:
- fxsync.adapters.telegram.handlers (uses all formatter functions for replies)
- tests.test_formatter (unit tests)

Files that this module USES:
- fxsync.domain.models (ConversionRequest, ConversionResult, RangeResult)
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from fxsync.domain.models import ConversionRequest, ConversionResult, RangeResult

USAGE = (
    "Commands:\n"
    "/convert FROM TO AMOUNT [YYYY-MM-DD] - convert with latest or historical rates\n"
    "/history CODE START END - stored daily rates, dates as YYYY-MM-DD\n"
    "/status - daily rate sync status"
)


def _fmt_ts(ts: Optional[datetime]) -> str:
    if ts is None:
        return "never"
    return ts.strftime("%Y-%m-%d %H:%M UTC")


def format_conversion(request: ConversionRequest, result: ConversionResult) -> str:
    """
    Format a conversion outcome.

    Args:
        request: The request that was converted
        result: Its result

    Returns:
        "110 USD = 85.00 GBP" style line, with the rate date when historical,
        or the error message
    """
    if not result.success:
        return f"⚠️ {result.error}"

    line = f"{request.amount} {request.from_currency} = {result.amount} {request.to_currency}"
    if request.date is not None:
        line += f" (rates of {request.date.isoformat()})"
    return line


def format_range(currency_code: str, result: RangeResult) -> str:
    """Format a rate history as one "date: rate" line per day."""
    if not result.success:
        return f"⚠️ {result.error}"

    lines = [f"{currency_code.upper()} rates:"]
    lines.extend(f"— {point.date.isoformat()}: {point.rate}" for point in result.rates)
    return "\n".join(lines)


def format_status(status: Mapping[str, Any], latest_day=None) -> str:
    """Format SyncScheduler.status() for /status."""
    lines = [
        f"Sync state: {status['state']}",
        f"Cadence: {status['cadence']}",
        f"Last success: {_fmt_ts(status.get('last_success_at'))}",
    ]
    if status.get("last_day") is not None and not status.get("last_error"):
        lines.append(f"Last snapshot: {status['last_day'].isoformat()} ({status['last_rows']} rates)")
    if status.get("last_error"):
        lines.append(f"Last error: {status['last_error']}")
    if latest_day is not None:
        lines.append(f"Latest stored day: {latest_day.isoformat()}")
    lines.append(f"Next run: {_fmt_ts(status.get('next_run_at'))}")
    return "\n".join(lines)
