import pytest
import requests
from unittest.mock import Mock
from decimal import Decimal

from apps.exchange.infrastructure.providers import currency_beacon
from apps.exchange.infrastructure.providers.currency_beacon import CurrencyBeaconProvider


@pytest.fixture
def provider(monkeypatch):
    monkeypatch.setattr(currency_beacon, "CURRENCY_BEACON_API_KEY", "test-key")
    return CurrencyBeaconProvider()


@pytest.fixture
def mock_requests_get(mocker):
    return mocker.patch("requests.get")


def test_get_rate_table_success(provider, mock_requests_get):
    """
    Test that get_rate_table returns Decimal rates from the /latest endpoint.
    """
    mock_response = Mock()
    mock_response.json.return_value = {
        "meta": {"code": 200},
        "response": {
            "base": "USD",
            "rates": {"SAR": 3.75, "egp": 48.5}
        }
    }
    mock_response.raise_for_status.return_value = None
    mock_requests_get.return_value = mock_response

    table = provider.get_rate_table("USD")

    assert table == {"SAR": Decimal("3.75"), "EGP": Decimal("48.5")}
    mock_requests_get.assert_called_once()

    url = mock_requests_get.call_args[0][0]
    assert "/latest" in url
    assert "api_key=test-key" in url
    assert "base=USD" in url
    assert mock_requests_get.call_args[1]["timeout"] == 10


def test_get_rate_table_without_api_key(monkeypatch, mock_requests_get):
    """
    Test that no request is made when the API key is not configured.
    """
    monkeypatch.setattr(currency_beacon, "CURRENCY_BEACON_API_KEY", "")

    assert CurrencyBeaconProvider().get_rate_table("USD") is None
    mock_requests_get.assert_not_called()


def test_get_rate_table_connection_error(provider, mock_requests_get):
    mock_requests_get.side_effect = requests.exceptions.ConnectionError("unreachable")

    assert provider.get_rate_table("USD") is None


def test_get_rate_table_timeout(provider, mock_requests_get):
    mock_requests_get.side_effect = requests.exceptions.Timeout()

    assert provider.get_rate_table("USD") is None


def test_get_rate_table_http_error(provider, mock_requests_get):
    mock_response = Mock()
    mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("401 Unauthorized")
    mock_requests_get.return_value = mock_response

    assert provider.get_rate_table("USD") is None


def test_get_rate_table_missing_key(provider, mock_requests_get):
    """
    Test that a payload without response.rates is treated as a failure.
    """
    mock_response = Mock()
    mock_response.json.return_value = {"meta": {"code": 200}, "response": {}}
    mock_response.raise_for_status.return_value = None
    mock_requests_get.return_value = mock_response

    assert provider.get_rate_table("USD") is None
