# src/fxsync/shared/validators.py
"""
Input Validation Utilities - Configuration and User Input Parsing

This module validates configuration values (API key, bot token) and parses
user-supplied command arguments (currency codes, amounts, ISO dates) so that
handlers can reject malformed input before anything reaches the core.

Files that USE this module:
- fxsync.config.settings (uses validation functions in Settings field validators)
- fxsync.adapters.telegram.handlers (parses /convert and /history arguments)
- fxsync.adapters.persistence.rate_store (is_in_memory_sqlite)

Files that this module USES:
- sqlalchemy (make_url for database URL checks)
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.engine import make_url  # Parse database URLs

_CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not any(ch.isspace() for ch in api_key)


def is_in_memory_sqlite(url: str) -> bool:
    """True for SQLite URLs without a database file (``sqlite://``, ``sqlite:///:memory:``)."""
    sa_url = make_url(url)
    if sa_url.get_backend_name() != "sqlite":
        return False
    database = sa_url.database
    return not database or database == ":memory:" or database.startswith("file::memory:")


def validate_currency_code(code: str) -> bool:
    """Check that a currency code has the three-letter shape (not that it exists)."""
    return bool(code) and bool(_CURRENCY_RE.match(code))


def parse_currency_code(code: str) -> Optional[str]:
    """Return the upper-cased code, or None if it is not three letters."""
    code = (code or "").strip()
    if not validate_currency_code(code):
        return None
    return code.upper()


def parse_amount(value: str) -> Optional[Decimal]:
    """
    Parse a positive decimal amount.

    Accepts "1,234.50" style thousands separators.

    Args:
        value: Raw amount text

    Returns:
        Decimal amount, or None if it is not a positive finite number
    """
    if not value:
        return None

    try:
        amount = Decimal(value.strip().replace(",", ""))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def parse_iso_date(value: str) -> Optional[date]:
    """Parse a YYYY-MM-DD date, returning None for anything else."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None
