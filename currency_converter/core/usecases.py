"""Business use-cases for the currency converter.

Конвертация суммы через RateResolver, список курсов для базовой
валюты и просмотр локального кеша.

CLI должен только вызывать эти функции и форматировать вывод.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from ..decorators import log_action
from ..rate_service.api_clients import ExchangeRateApiClient
from ..rate_service.config import ClientConfig, load_client_config
from ..rate_service.resolver import RateResolver
from . import utils
from .cache_policy import is_fresh
from .models import RateStore, format_timestamp


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_resolver(cfg: ClientConfig | None = None) -> RateResolver:
    """Wire the default API client into a resolver using configured TTL."""
    cfg = cfg or load_client_config()
    return RateResolver(ExchangeRateApiClient(cfg), ttl=cfg.cache_ttl)


@log_action("CONVERT")
def convert(
    frm: str, to: str, amount: Any, store: RateStore, resolver: RateResolver
) -> dict[str, Any]:
    """Convert `amount` from one currency to another.

    Args:
        frm: Source currency code.
        to: Target currency code.
        amount: Number (or numeric string) to convert.
        store: Loaded rate cache; updated in place on a refetch.
        resolver: Rate resolver to ask.
    Returns:
        {"from", "to", "amount", "rate", "converted"}
    Raises:
        DomainError: invalid code or amount.
        ConverterError: any rate-resolution failure.
    """
    f = utils.validate_currency_code(frm)
    t = utils.validate_currency_code(to)
    amt = utils.parse_amount(amount)
    rate = resolver.resolve(f, t, store, now=_now())
    return {
        "from": f,
        "to": t,
        "amount": amt,
        "rate": rate,
        "converted": utils.compute_value(amt, rate),
    }


@log_action("LIST")
def list_rates(base: str, resolver: RateResolver) -> dict[str, Any]:
    """Fetch every rate for `base` straight from the API (no cache).

    Returns:
        {"base": str, "timestamp": ISO str, "rates": [(code, rate), ...]}
    """
    b = utils.validate_currency_code(base)
    snap = resolver.list_rates(b)
    return {
        "base": b,
        "timestamp": format_timestamp(snap.timestamp),
        "rates": sorted(snap.rates.items()),
    }


def show_cache(
    store: RateStore, ttl: timedelta, base: str | None = None
) -> list[dict[str, Any]]:
    """Describe cached snapshots: base, number of rates, fetch time, freshness."""
    now = _now()
    bases = store.bases()
    if base:
        b = utils.normalize_code(base)
        bases = [x for x in bases if x == b]
    rows: list[dict[str, Any]] = []
    for b in bases:
        snap = store.get(b)
        if snap is None:
            continue
        rows.append(
            {
                "base": b,
                "count": len(snap),
                "timestamp": format_timestamp(snap.timestamp),
                "fresh": is_fresh(snap, now, ttl),
            }
        )
    return rows
