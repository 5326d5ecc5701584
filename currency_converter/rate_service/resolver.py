from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from ..core.cache_policy import DEFAULT_CACHE_TTL, is_fresh
from ..core.exceptions import RateNotFoundError
from ..core.models import RateSnapshot, RateStore
from .api_clients import BaseApiClient

logger = logging.getLogger("currency_converter.resolver")


class RateResolver:
    """Answers "what is the rate from A to B" using the cache or the API.

    - A fresh cached snapshot that contains the target is used without I/O
    - Otherwise the base table is refetched and replaces the store entry
    - Remote failures propagate and leave the store untouched
    """

    def __init__(
        self, client: BaseApiClient, ttl: timedelta = DEFAULT_CACHE_TTL
    ) -> None:
        self.client = client
        self.ttl = ttl

    def resolve(
        self,
        frm: str,
        to: str,
        store: RateStore,
        now: datetime | None = None,
    ) -> float:
        """Return the rate frm→to.

        Args:
            frm: Uppercased source (base) currency code.
            to: Uppercased target currency code.
            store: Rate cache owned by the caller; replaced entry on refetch.
            now: Current instant, defaults to UTC now.
        Raises:
            RateNotFoundError: `to` is absent from a freshly fetched table.
            ConverterError: any classified remote failure.
        """
        current = now or datetime.now(timezone.utc)
        cached = store.get(frm)
        if cached is not None and is_fresh(cached, current, self.ttl):
            rate = cached.get(to)
            if rate is not None:
                logger.info("Cache hit %s→%s", frm, to)
                return rate
            logger.info("Cache for %s has no %s, refetching", frm, to)
        else:
            logger.info("Cache miss for base %s", frm)

        snapshot = self.client.fetch_rates_for(frm)
        store.put(frm, snapshot)
        rate = snapshot.get(to)
        if rate is None:
            raise RateNotFoundError(frm, to)
        return rate

    def list_rates(self, base: str) -> RateSnapshot:
        """Fetch the whole table for `base`, bypassing any cache."""
        return self.client.fetch_all_rates(base)
