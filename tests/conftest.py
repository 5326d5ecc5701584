from datetime import datetime, timezone

import pytest

from currency_converter.core.models import RateSnapshot
from currency_converter.rate_service.api_clients import BaseApiClient
from currency_converter.rate_service.config import ClientConfig

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
USD_RATES = {"EUR": 0.9, "PLN": 4.0, "USD": 1.0}


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class FakeClient(BaseApiClient):
    """API client returning canned tables (or raising) per base currency."""

    def __init__(self, tables=None, error=None, clock=None):
        super().__init__(cfg=None)
        self.tables = dict(tables or {})
        self.error = error
        self.clock = clock or (lambda: NOW)
        self.calls = []

    def fetch_rates_for(self, base):
        self.calls.append(base)
        if self.error is not None:
            raise self.error
        return RateSnapshot(self.tables[base], self.clock())


@pytest.fixture
def cfg(tmp_path):
    return ClientConfig(
        API_KEY="test_key",
        API_URL="https://rates.example.test/v4/latest",
        REQUEST_TIMEOUT=5.0,
        CACHE_FILE_PATH=str(tmp_path / "cache.json"),
        CACHE_TTL_SECONDS=3600,
    )


@pytest.fixture
def usd_client():
    return FakeClient({"USD": USD_RATES})
