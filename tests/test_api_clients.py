import dataclasses
from datetime import datetime, timezone

import pytest
import requests

from currency_converter.core.exceptions import (
    ConfigError,
    NetworkError,
    RateLimitError,
    RemoteError,
)
from currency_converter.rate_service.api_clients import ExchangeRateApiClient

from conftest import USD_RATES, FakeResponse, FakeSession


def test_fetch_rates_success_builds_snapshot(cfg):
    session = FakeSession(FakeResponse(200, {"base": "USD", "rates": USD_RATES}))
    client = ExchangeRateApiClient(cfg, session=session)
    before = datetime.now(timezone.utc)

    snap = client.fetch_rates_for("usd")

    assert snap.rates == USD_RATES
    assert before <= snap.timestamp <= datetime.now(timezone.utc)
    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == "https://rates.example.test/v4/latest/USD"
    assert call["params"] == {"access_key": "test_key"}
    assert call["timeout"] == 5.0


def test_fetch_all_rates_issues_the_same_call(cfg):
    session = FakeSession(FakeResponse(200, {"rates": {"EUR": 0.25}}))
    client = ExchangeRateApiClient(cfg, session=session)

    snap = client.fetch_all_rates("PLN")

    assert snap.rates == {"EUR": 0.25}
    assert session.calls[0]["url"].endswith("/PLN")


def test_forbidden_is_rate_limit(cfg):
    client = ExchangeRateApiClient(cfg, session=FakeSession(FakeResponse(403)))

    with pytest.raises(RateLimitError) as exc_info:
        client.fetch_rates_for("USD")

    assert "request limit exceeded" in str(exc_info.value)


@pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
def test_other_status_is_remote_error(cfg, status):
    client = ExchangeRateApiClient(cfg, session=FakeSession(FakeResponse(status)))

    with pytest.raises(RemoteError) as exc_info:
        client.fetch_rates_for("USD")

    assert exc_info.value.status == status
    assert str(status) in str(exc_info.value)


def test_transport_failure_is_network_error(cfg):
    session = FakeSession(error=requests.exceptions.ConnectionError("reset"))
    client = ExchangeRateApiClient(cfg, session=session)

    with pytest.raises(NetworkError, match="reset"):
        client.fetch_rates_for("USD")


def test_timeout_is_network_error(cfg):
    session = FakeSession(error=requests.exceptions.Timeout("timed out"))
    client = ExchangeRateApiClient(cfg, session=session)

    with pytest.raises(NetworkError):
        client.fetch_rates_for("USD")


@pytest.mark.parametrize(
    "body",
    [
        ValueError("Expecting value"),
        ["not", "an", "object"],
        {"result": "success"},
        {"rates": "EUR=0.9"},
        {"rates": {"EUR": -1}},
    ],
)
def test_malformed_body_is_remote_error_not_network_error(cfg, body):
    client = ExchangeRateApiClient(cfg, session=FakeSession(FakeResponse(200, body)))

    with pytest.raises(RemoteError) as exc_info:
        client.fetch_rates_for("USD")

    assert not isinstance(exc_info.value, NetworkError)


def test_missing_key_fails_before_any_request(cfg):
    session = FakeSession(FakeResponse(200, {"rates": USD_RATES}))
    client = ExchangeRateApiClient(dataclasses.replace(cfg, API_KEY=None), session=session)

    with pytest.raises(ConfigError):
        client.fetch_rates_for("USD")

    assert session.calls == []


def test_uses_requests_module_without_session(cfg, monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        return FakeResponse(200, {"rates": USD_RATES})

    monkeypatch.setattr(requests, "get", fake_get)

    ExchangeRateApiClient(cfg).fetch_rates_for("USD")

    assert calls == ["https://rates.example.test/v4/latest/USD"]
