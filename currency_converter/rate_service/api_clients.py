from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

import requests

from ..core.exceptions import NetworkError, RateLimitError, RemoteError
from ..core.models import DomainError, RateSnapshot
from .config import ClientConfig, build_rates_url, require_api_key

logger = logging.getLogger("currency_converter.api")


class BaseApiClient(ABC):
    def __init__(self, cfg: ClientConfig) -> None:
        self.cfg = cfg

    @abstractmethod
    def fetch_rates_for(self, base: str) -> RateSnapshot:
        """Return the full rate table for one base currency."""

    def fetch_all_rates(self, base: str) -> RateSnapshot:
        """Same remote call as fetch_rates_for; used by the list path."""
        return self.fetch_rates_for(base)


class ExchangeRateApiClient(BaseApiClient):
    SOURCE = "ExchangeRate-API"

    def __init__(
        self, cfg: ClientConfig, session: requests.Session | None = None
    ) -> None:
        super().__init__(cfg)
        self.session = session

    def fetch_rates_for(self, base: str) -> RateSnapshot:
        """Fetch the rate table for `base` with a single GET.

        Raises:
            ConfigError: the access key is not configured.
            RateLimitError: the service answered 403.
            RemoteError: any other non-200 status or a malformed body.
            NetworkError: no response was received.
        """
        code = (base or "").strip().upper()
        key = require_api_key(self.cfg)
        url = build_rates_url(self.cfg, code)
        http = self.session or requests
        t0 = time.perf_counter()
        try:
            resp = http.get(
                url,
                params={"access_key": key},
                timeout=self.cfg.REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as exc:
            logger.warning("%s request for %s failed: %s", self.SOURCE, code, exc)
            raise NetworkError(str(exc)) from exc
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        status = resp.status_code
        logger.debug("%s GET %s -> %s (%d ms)", self.SOURCE, code, status, elapsed_ms)

        if status == 403:
            raise RateLimitError(code)
        if status != 200:
            raise RemoteError(f"{self.SOURCE} returned an error", status=status)

        return self._parse(resp, code)

    def _parse(self, resp: Any, base: str) -> RateSnapshot:
        try:
            data = resp.json()
        except ValueError as exc:
            raise RemoteError(f"Malformed {self.SOURCE} JSON: {exc}", status=200) from exc
        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise RemoteError(f"{self.SOURCE} response has no 'rates' object", status=200)
        try:
            snap = RateSnapshot(rates, datetime.now(timezone.utc))
        except DomainError as exc:
            raise RemoteError(f"Malformed {self.SOURCE} rates: {exc}", status=200) from exc
        logger.info("Fetched %d rates for base %s", len(snap), base)
        return snap
