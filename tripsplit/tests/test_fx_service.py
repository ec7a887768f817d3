"""
Tests for exchange rate resolution.
"""
from decimal import Decimal

import httpx
import pytest

from tripsplit.core.config import settings
from tripsplit.services import fx_service


def fake_get(payload, status_code=200):
    def _get(url, timeout=None):
        return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url))
    return _get


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "FX_API_KEY", "test-key")


def test_fetch_rate(api_key, monkeypatch):
    payload = {"result": "success", "conversion_rates": {"USD": 1, "EUR": 0.92}}
    monkeypatch.setattr(fx_service.httpx, "get", fake_get(payload))
    assert fx_service.fetch_exchange_rate_from_api("usd", "EUR") == Decimal("0.92")


def test_fetch_rate_api_error(api_key, monkeypatch):
    payload = {"result": "error", "error-type": "unsupported-code"}
    monkeypatch.setattr(fx_service.httpx, "get", fake_get(payload))
    with pytest.raises(ValueError, match="unsupported-code"):
        fx_service.fetch_exchange_rate_from_api("XXX", "EUR")


def test_fetch_rate_http_error(api_key, monkeypatch):
    monkeypatch.setattr(fx_service.httpx, "get", fake_get({}, status_code=500))
    with pytest.raises(ValueError, match="500"):
        fx_service.fetch_exchange_rate_from_api("USD", "EUR")


def test_fetch_rate_missing_currency(api_key, monkeypatch):
    payload = {"result": "success", "conversion_rates": {"USD": 1}}
    monkeypatch.setattr(fx_service.httpx, "get", fake_get(payload))
    with pytest.raises(ValueError):
        fx_service.fetch_exchange_rate_from_api("USD", "EUR")


def test_fetch_rate_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "FX_API_KEY", "")
    with pytest.raises(ValueError, match="FX_API_KEY"):
        fx_service.fetch_exchange_rate_from_api("USD", "EUR")


def test_resolve_same_currency_is_one():
    assert fx_service.resolve_conversion_rate("eur", "EUR", Decimal("3")) == Decimal(1)


def test_resolve_prefers_explicit_rate(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("API must not be called")
    monkeypatch.setattr(fx_service, "fetch_exchange_rate_from_api", fail)
    assert fx_service.resolve_conversion_rate("USD", "EUR", Decimal("0.9")) == Decimal("0.9")
    assert fx_service.resolve_conversion_rate("USD", "EUR", Decimal("0")) is None


def test_resolve_returns_none_when_unavailable(monkeypatch):
    monkeypatch.setattr(settings, "FX_API_KEY", "")
    assert fx_service.resolve_conversion_rate("USD", "EUR") is None
