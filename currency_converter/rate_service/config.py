from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Final

from dotenv import find_dotenv, load_dotenv

from ..core.exceptions import ConfigError
from ..infra.settings import SettingsLoader

DEFAULT_API_URL: Final[str] = "https://api.exchangerate-api.com/v4/latest"
API_KEY_ENV: Final[str] = "API_KEY"


@dataclass(frozen=True)
class ClientConfig:
    # Ключ доступа к API
    API_KEY: str | None

    # Эндпоинт (без базовой валюты)
    API_URL: str

    # Сетевые параметры
    REQUEST_TIMEOUT: float

    # Кеш
    CACHE_FILE_PATH: str
    CACHE_TTL_SECONDS: int

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.CACHE_TTL_SECONDS)


def load_client_config() -> ClientConfig:
    """Load client configuration from env/.env and project settings.

    Returns a frozen ClientConfig with the API URL/key, network timeout,
    cache file path and TTL. Environment variables override .env;
    SettingsLoader provides defaults for the cache location and TTL.
    """
    # Load .env once per process (non-overriding)
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(dotenv_path=path, override=False)
    settings = SettingsLoader()
    cache_file = os.getenv("CURRENCY_CACHE_FILE") or os.fspath(
        settings.path("cache_file")
    )
    return ClientConfig(
        API_KEY=os.getenv(API_KEY_ENV) or None,
        API_URL=os.getenv("EXCHANGE_API_URL", DEFAULT_API_URL).rstrip("/"),
        REQUEST_TIMEOUT=float(os.getenv("EXCHANGE_HTTP_TIMEOUT", "10")),
        CACHE_FILE_PATH=cache_file,
        CACHE_TTL_SECONDS=int(
            os.getenv("CURRENCY_CACHE_TTL", settings.get("cache_ttl_seconds", 3600))
        ),
    )


def build_rates_url(cfg: ClientConfig, base: str) -> str:
    """Собрать URL таблицы курсов для базовой валюты."""
    return f"{cfg.API_URL}/{(base or '').strip().upper()}"


def require_api_key(cfg: ClientConfig) -> str:
    """Return the access key or fail before any network call."""
    if not cfg.API_KEY:
        raise ConfigError(API_KEY_ENV)
    return cfg.API_KEY
