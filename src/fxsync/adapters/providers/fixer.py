# src/fxsync/adapters/providers/fixer.py
"""
Fixer API Provider for Exchange Rate Snapshots

This module implements the Fixer API client. One call returns every
currency Fixer knows, quoted against Fixer's base currency (EUR on the free
plan), either for today (/latest) or for a past day (/YYYY-MM-DD).

Files that USE this module:
- fxsync.app (builds the provider shared by the scheduler and the bot)
- tests.test_providers (unit tests)

Files that this module USES:
- fxsync.adapters.providers.base (RateProvider interface)
- fxsync.domain (RateSnapshot, provider errors, to_decimal)
- fxsync.config (settings for API key, base URL and HTTP timeout)
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import requests

from fxsync.adapters.providers.base import RateProvider
from fxsync.domain.conversion import to_decimal
from fxsync.domain.errors import ProviderRejectedError, ProviderUnavailableError
from fxsync.domain.models import RateSnapshot

log = logging.getLogger(__name__)


class FixerProvider(RateProvider):
    """
    Stateless client for the Fixer /latest and /{date} endpoints.

    Nothing is cached between calls, so it is safe to share one instance
    between the sync scheduler and concurrent request handlers.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize Fixer API provider.

        Args:
            api_key: Access key (defaults to settings.fixer_api_key)
            base_url: Optional custom API URL (defaults to settings.fixer_base_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)

        Raises:
            ValueError: If the access key is empty
        """
        if api_key is None or base_url is None or timeout is None:
            from fxsync.config import get_settings
            settings = get_settings()
            api_key = api_key if api_key is not None else settings.fixer_api_key
            base_url = base_url or settings.fixer_base_url
            timeout = timeout or settings.http_timeout_seconds
        if not api_key or not api_key.strip():
            raise ValueError("Fixer access key is not configured (FIXER_API_KEY).")
        self.api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _redact(self, text: str) -> str:
        """Strip the access key from anything that is about to be logged or raised."""
        return text.replace(self.api_key, "***")

    def _get_json(self, endpoint: str) -> Dict[str, Any]:
        """
        GET one endpoint and decode its JSON body with numbers as Decimal.

        Raises:
            ProviderUnavailableError: On timeout, network error, non-2xx status or bad JSON
        """
        url = f"{self.base_url}/{endpoint}"
        try:
            log.info("Fetching rates from Fixer: %s", url)
            resp = requests.get(url, params={"access_key": self.api_key}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout as e:
            log.warning("Fixer API timeout after %d seconds", self.timeout)
            raise ProviderUnavailableError(f"Fixer API timeout after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            log.error("Fixer API HTTP error %s for %s", status, url)
            raise ProviderUnavailableError(f"Fixer API HTTP error {status}") from e
        except requests.exceptions.RequestException as e:
            message = self._redact(str(e))
            log.warning("Fixer API request failed (network/connection error): %s", message)
            raise ProviderUnavailableError(f"Fixer API request failed: {message}") from e

        try:
            data = resp.json(parse_float=Decimal)
        except ValueError as e:
            log.error("Fixer API returned invalid JSON: %s", e)
            raise ProviderUnavailableError("Fixer API returned invalid JSON") from e

        if not isinstance(data, dict):
            log.error("Fixer unexpected response type: %r", type(data))
            raise ProviderUnavailableError("Fixer returned non-object JSON")
        return data

    @staticmethod
    def _error_info(data: Dict[str, Any]) -> str:
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("info") or error.get("type") or "Unknown error")
        if error:
            return str(error)
        return "Unknown error"

    @staticmethod
    def _parse_rates(raw: Any) -> Dict[str, Decimal]:
        """
        Convert the upstream rates object, rejecting it whole if any entry is bad.

        Raises:
            ProviderUnavailableError: If rates are missing, empty, non-numeric or non-positive
        """
        if not isinstance(raw, dict) or not raw:
            raise ProviderUnavailableError("Fixer response has no rates")

        rates: Dict[str, Decimal] = {}
        for code, value in raw.items():
            if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
                raise ProviderUnavailableError(f"Fixer returned non-numeric rate for {code}: {value!r}")
            try:
                rate = to_decimal(value)
            except InvalidOperation as e:
                raise ProviderUnavailableError(f"Fixer returned unreadable rate for {code}") from e
            if not rate.is_finite() or rate <= 0:
                raise ProviderUnavailableError(f"Fixer returned non-positive rate for {code}: {rate}")
            rates[str(code).upper()] = rate
        return rates

    @staticmethod
    def _parse_date(raw: Any, fallback: date) -> date:
        if isinstance(raw, str):
            try:
                return datetime.strptime(raw, "%Y-%m-%d").date()
            except ValueError:
                log.warning("Fixer returned unreadable date %r, using %s", raw, fallback)
        return fallback

    def fetch_rates(self, day: Optional[date] = None) -> RateSnapshot:
        """
        Fetch a full rate snapshot from Fixer.

        Args:
            day: Historical day to fetch; None fetches the latest rates

        Returns:
            RateSnapshot with every currency quoted against Fixer's base

        Raises:
            ProviderUnavailableError: If the request fails or the payload is unusable
            ProviderRejectedError: If Fixer answers with success=false
        """
        endpoint = "latest" if day is None else day.isoformat()
        data = self._get_json(endpoint)

        success = data.get("success")
        if success is False:
            info = self._error_info(data)
            log.warning("Fixer rejected /%s: %s", endpoint, info)
            raise ProviderRejectedError(info)
        if success is not True:
            log.error("Fixer response missing 'success' flag: %s", list(data.keys()))
            raise ProviderUnavailableError("Fixer response missing 'success' field")

        rates = self._parse_rates(data.get("rates"))
        base = data.get("base")
        base = str(base).upper() if base else None
        if base and base not in rates:
            rates[base] = Decimal(1)

        fallback = day or datetime.now(timezone.utc).date()
        snapshot = RateSnapshot(date=self._parse_date(data.get("date"), fallback), rates=rates, base=base)
        log.info("Fixer snapshot for %s: %d rates (base=%s)", snapshot.date, len(rates), base)
        return snapshot
