# tests/test_providers.py
"""
Provider Tests - Unit Tests for the Fixer API Client

This module tests FixerProvider against mocked HTTP responses: endpoint
selection, Decimal parsing, upstream rejections, transport failures and
all-or-nothing snapshot validation.

Files that this module USES:
- fxsync.adapters.providers.fixer (FixerProvider for testing)
- fxsync.domain.errors (provider errors)
- unittest.mock (Mock for API mocking)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from datetime import date
from decimal import Decimal
from unittest.mock import Mock, patch  # Mock objects and patching for testing without real API calls

import requests  # HTTP library (used for mocking responses)

from fxsync.adapters.providers.fixer import FixerProvider
from fxsync.domain.errors import ProviderRejectedError, ProviderUnavailableError

API_KEY = "secret_key_0123456789"


def _response(payload):
    mock_response = Mock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status.return_value = None
    return mock_response


@pytest.fixture
def provider():
    return FixerProvider(api_key=API_KEY, base_url="http://fixer.test/api/", timeout=5)


class TestFixerProviderInit:
    def test_explicit_arguments(self, provider):
        assert provider.base_url == "http://fixer.test/api"
        assert provider.timeout == 5
        assert provider.api_key == API_KEY

    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("FIXER_API_KEY", "from_env_key_12345")
        monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "7")
        provider = FixerProvider()
        assert provider.api_key == "from_env_key_12345"
        assert provider.base_url == "http://data.fixer.io/api"
        assert provider.timeout == 7

    def test_empty_api_key(self):
        with pytest.raises(ValueError, match="FIXER_API_KEY"):
            FixerProvider(api_key="  ", base_url="http://fixer.test", timeout=5)


class TestFetchRates:
    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_latest_success(self, mock_get, provider):
        mock_get.return_value = _response({
            "success": True,
            "base": "EUR",
            "date": "2024-03-05",
            "rates": {"EUR": 1, "USD": Decimal("1.0835"), "GBP": Decimal("0.8563")},
        })

        snapshot = provider.fetch_rates()

        mock_get.assert_called_once_with(
            "http://fixer.test/api/latest", params={"access_key": API_KEY}, timeout=5
        )
        assert snapshot.date == date(2024, 3, 5)
        assert snapshot.base == "EUR"
        assert snapshot.rates == {"EUR": Decimal(1), "USD": Decimal("1.0835"), "GBP": Decimal("0.8563")}
        assert all(isinstance(v, Decimal) for v in snapshot.rates.values())

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_historical_uses_date_endpoint(self, mock_get, provider):
        mock_get.return_value = _response({
            "success": True, "historical": True, "base": "EUR",
            "date": "2020-01-15", "rates": {"USD": Decimal("1.1142")},
        })

        snapshot = provider.fetch_rates(date(2020, 1, 15))

        assert mock_get.call_args[0][0] == "http://fixer.test/api/2020-01-15"
        assert snapshot.date == date(2020, 1, 15)

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_requests_decimal_json_parsing(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "rates": {"USD": Decimal("1.1")}})
        provider.fetch_rates()
        mock_get.return_value.json.assert_called_once_with(parse_float=Decimal)

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_float_rates_are_converted_exactly(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "rates": {"USD": 1.1}})
        snapshot = provider.fetch_rates()
        assert snapshot.rates["USD"] == Decimal("1.1")

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_base_added_when_missing_from_rates(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "base": "EUR", "rates": {"USD": Decimal("1.1")}})
        snapshot = provider.fetch_rates()
        assert snapshot.rates["EUR"] == Decimal(1)

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_missing_date_falls_back_to_requested_day(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "rates": {"USD": Decimal("1.1")}})
        snapshot = provider.fetch_rates(date(2021, 6, 1))
        assert snapshot.date == date(2021, 6, 1)

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_upstream_rejection_carries_info(self, mock_get, provider):
        mock_get.return_value = _response({
            "success": False,
            "error": {"code": 302, "type": "invalid_date", "info": "invalid_date"},
        })

        with pytest.raises(ProviderRejectedError, match="invalid_date") as exc_info:
            provider.fetch_rates(date(1990, 1, 1))
        assert exc_info.value.info == "invalid_date"

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_upstream_rejection_without_info_uses_type(self, mock_get, provider):
        mock_get.return_value = _response({"success": False, "error": {"code": 101, "type": "invalid_access_key"}})
        with pytest.raises(ProviderRejectedError, match="invalid_access_key"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_missing_success_flag(self, mock_get, provider):
        mock_get.return_value = _response({"rates": {"USD": 1.1}})
        with pytest.raises(ProviderUnavailableError, match="success"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_timeout(self, mock_get, provider):
        mock_get.side_effect = requests.exceptions.Timeout()
        with pytest.raises(ProviderUnavailableError, match="timeout"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_connection_error_redacts_key(self, mock_get, provider):
        mock_get.side_effect = requests.exceptions.ConnectionError(
            f"Max retries exceeded with url: /api/latest?access_key={API_KEY}"
        )
        with pytest.raises(ProviderUnavailableError) as exc_info:
            provider.fetch_rates()
        assert API_KEY not in str(exc_info.value)
        assert "***" in str(exc_info.value)

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_http_error(self, mock_get, provider):
        mock_response = Mock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            response=Mock(status_code=503)
        )
        mock_get.return_value = mock_response
        with pytest.raises(ProviderUnavailableError, match="503"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_invalid_json(self, mock_get, provider):
        mock_response = Mock()
        mock_response.json.side_effect = ValueError("Invalid JSON")
        mock_response.raise_for_status.return_value = None
        mock_get.return_value = mock_response
        with pytest.raises(ProviderUnavailableError, match="invalid JSON"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_non_object_json(self, mock_get, provider):
        mock_get.return_value = _response(["not", "a", "dict"])
        with pytest.raises(ProviderUnavailableError, match="non-object"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_empty_rates_rejected(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "rates": {}})
        with pytest.raises(ProviderUnavailableError, match="no rates"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_one_bad_rate_rejects_whole_snapshot(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "rates": {"USD": Decimal("1.1"), "XXX": "n/a"}})
        with pytest.raises(ProviderUnavailableError, match="XXX"):
            provider.fetch_rates()

    @patch('fxsync.adapters.providers.fixer.requests.get')
    def test_non_positive_rate_rejected(self, mock_get, provider):
        mock_get.return_value = _response({"success": True, "rates": {"USD": Decimal("1.1"), "ZZZ": 0}})
        with pytest.raises(ProviderUnavailableError, match="non-positive"):
            provider.fetch_rates()
