# tests/test_formatter.py
"""
Formatter Tests - Unit Tests for Message Formatting Functions

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxsync.adapters.formatting.formatter (all formatter functions for testing)
- fxsync.domain.models (results for test data)
- pytest (testing framework)
"""
from datetime import date, datetime, timezone
from decimal import Decimal

from fxsync.adapters.formatting.formatter import format_conversion, format_range, format_status
from fxsync.domain.models import ConversionRequest, ConversionResult, RangeResult, RatePoint


class TestFormatConversion:
    def test_live(self):
        request = ConversionRequest("USD", "GBP", Decimal("110"))
        result = ConversionResult(amount=Decimal("85.00"))
        assert format_conversion(request, result) == "110 USD = 85.00 GBP"

    def test_historical_mentions_date(self):
        request = ConversionRequest("USD", "GBP", Decimal("110"), date(2020, 1, 15))
        result = ConversionResult(amount=Decimal("93.02"))
        assert format_conversion(request, result) == "110 USD = 93.02 GBP (rates of 2020-01-15)"

    def test_error(self):
        request = ConversionRequest("USD", "XYZ", Decimal("1"))
        result = ConversionResult.failure("unknown_currency", "Unknown currency: XYZ")
        assert format_conversion(request, result) == "⚠️ Unknown currency: XYZ"


class TestFormatRange:
    def test_lines_per_day(self):
        result = RangeResult(rates=[
            RatePoint(date(2024, 1, 1), Decimal("1.1")),
            RatePoint(date(2024, 1, 2), Decimal("1.0935")),
        ])
        assert format_range("usd", result) == "USD rates:\n— 2024-01-01: 1.1\n— 2024-01-02: 1.0935"

    def test_not_found(self):
        result = RangeResult.failure("not_found", "No rates found for USD between 2024-01-01 and 2024-01-02")
        assert format_range("USD", result).startswith("⚠️ No rates found")


class TestFormatStatus:
    def test_after_success(self):
        status = {
            "state": "idle",
            "cadence": "daily 00:00 UTC",
            "last_success_at": datetime(2024, 3, 5, 0, 0, 5, tzinfo=timezone.utc),
            "last_day": date(2024, 3, 5),
            "last_rows": 170,
            "last_error": None,
            "next_run_at": datetime(2024, 3, 6, tzinfo=timezone.utc),
        }
        text = format_status(status, latest_day=date(2024, 3, 5))
        assert "Sync state: idle" in text
        assert "Last success: 2024-03-05 00:00 UTC" in text
        assert "Last snapshot: 2024-03-05 (170 rates)" in text
        assert "Latest stored day: 2024-03-05" in text
        assert "Next run: 2024-03-06 00:00 UTC" in text

    def test_after_failure(self):
        status = {
            "state": "idle",
            "cadence": "0:02:00",
            "last_success_at": None,
            "last_day": date(2024, 3, 5),
            "last_rows": 0,
            "last_error": "Fixer API timeout after 10s",
            "next_run_at": None,
        }
        text = format_status(status)
        assert "Last success: never" in text
        assert "Last error: Fixer API timeout after 10s" in text
        assert "Last snapshot" not in text
