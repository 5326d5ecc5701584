import logging
from datetime import timedelta

import pytest

from currency_converter.core import usecases as uc
from currency_converter.core.exceptions import RateNotFoundError
from currency_converter.core.models import DomainError, RateSnapshot, RateStore
from currency_converter.core.utils import format_money, parse_amount, validate_currency_code
from currency_converter.rate_service.api_clients import ExchangeRateApiClient
from currency_converter.rate_service.resolver import RateResolver

from conftest import NOW, USD_RATES


@pytest.fixture(autouse=True)
def frozen_now(monkeypatch):
    monkeypatch.setattr(uc, "_now", lambda: NOW)


def test_convert_normalizes_input_and_multiplies(usd_client):
    store = RateStore()

    res = uc.convert(" usd", "eur ", "100", store=store, resolver=RateResolver(usd_client))

    assert res == {
        "from": "USD",
        "to": "EUR",
        "amount": 100.0,
        "rate": 0.9,
        "converted": pytest.approx(90.0),
    }
    assert store.bases() == ["USD"]


@pytest.mark.parametrize("amount", ["abc", "inf", "nan", None])
def test_convert_rejects_bad_amount(usd_client, amount):
    with pytest.raises(DomainError):
        uc.convert("USD", "EUR", amount, store=RateStore(), resolver=RateResolver(usd_client))
    assert usd_client.calls == []


def test_convert_logs_outcome(usd_client, caplog):
    caplog.set_level(logging.INFO, logger="currency_converter")

    with pytest.raises(RateNotFoundError):
        uc.convert("USD", "XXX", 1, store=RateStore(), resolver=RateResolver(usd_client))

    messages = [r.getMessage() for r in caplog.records]
    assert any("CONVERT" in m and "result=ERROR" in m for m in messages)
    assert any("RateNotFoundError" in m for m in messages)


def test_list_rates_sorted(usd_client):
    res = uc.list_rates("usd", resolver=RateResolver(usd_client))

    assert res["base"] == "USD"
    assert res["rates"] == [("EUR", 0.9), ("PLN", 4.0), ("USD", 1.0)]
    assert res["timestamp"] == "2024-05-01T12:00:00Z"


def test_show_cache_marks_stale_entries():
    store = RateStore(
        {
            "USD": RateSnapshot(USD_RATES, NOW - timedelta(minutes=10)),
            "PLN": RateSnapshot({"EUR": 0.23}, NOW - timedelta(hours=3)),
        }
    )

    rows = uc.show_cache(store, timedelta(hours=1))

    assert [(r["base"], r["count"], r["fresh"]) for r in rows] == [
        ("PLN", 1, False),
        ("USD", 3, True),
    ]
    assert [r["base"] for r in uc.show_cache(store, timedelta(hours=1), base="usd")] == [
        "USD"
    ]


def test_build_resolver_uses_configured_ttl(cfg):
    resolver = uc.build_resolver(cfg)

    assert isinstance(resolver.client, ExchangeRateApiClient)
    assert resolver.ttl == timedelta(seconds=3600)


def test_input_helpers():
    assert validate_currency_code(" pln ") == "PLN"
    with pytest.raises(DomainError):
        validate_currency_code("")
    with pytest.raises(DomainError):
        validate_currency_code("US1")
    assert parse_amount("2.5") == 2.5
    assert format_money(1234.567) == "1234.57"
    assert format_money(1234.567, grouping=True) == "1,234.57"
