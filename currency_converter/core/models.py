"""Domain models for the currency converter.

RateSnapshot — один набор курсов для фиксированной базовой валюты
плюс момент получения. RateStore — кеш снимков по базовым валютам.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Iterator


class DomainError(Exception):
    """Base exception for invalid domain data."""


def format_timestamp(dt: datetime) -> str:
    """Serialize an instant as ISO-8601 UTC with a 'Z' suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    try:
        dt = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError as exc:
        raise DomainError(f"Invalid timestamp '{raw}'") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class RateSnapshot:
    """Rate table for one base currency, stamped with its fetch time.

    Codes are normalized to upper case and must be unique; every rate must be
    a positive finite number.
    """

    def __init__(self, rates: dict[str, Any], timestamp: datetime) -> None:
        if not isinstance(rates, dict):
            raise DomainError("rates must be a mapping of code -> rate")
        if not isinstance(timestamp, datetime):
            raise DomainError("timestamp must be a datetime")
        clean: dict[str, float] = {}
        for code, value in rates.items():
            c = str(code or "").strip().upper()
            if not c:
                raise DomainError("currency code cannot be empty")
            if c in clean:
                raise DomainError(f"duplicate currency code '{c}'")
            if isinstance(value, bool):
                raise DomainError(f"rate for '{c}' must be a number")
            try:
                r = float(value)
            except (TypeError, ValueError) as exc:
                raise DomainError(f"rate for '{c}' must be a number") from exc
            if not math.isfinite(r) or r <= 0:
                raise DomainError(f"rate for '{c}' must be positive and finite")
            clean[c] = r
        self._rates = clean
        self._timestamp = timestamp

    @property
    def rates(self) -> dict[str, float]:
        return dict(self._rates)

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    def get(self, code: str) -> float | None:
        return self._rates.get((code or "").upper())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._rates

    def __len__(self) -> int:
        return len(self._rates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RateSnapshot):
            return NotImplemented
        return self._rates == other._rates and self._timestamp == other._timestamp

    def __repr__(self) -> str:
        return (
            f"RateSnapshot(rates={len(self._rates)}, "
            f"timestamp={format_timestamp(self._timestamp)})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {"rates": dict(self._rates), "timestamp": format_timestamp(self._timestamp)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RateSnapshot":
        if not isinstance(data, dict):
            raise DomainError("snapshot entry must be an object")
        if "rates" not in data or "timestamp" not in data:
            raise DomainError("snapshot entry requires 'rates' and 'timestamp'")
        return cls(data["rates"], parse_timestamp(data["timestamp"]))


class RateStore:
    """In-memory cache: base currency -> exactly one RateSnapshot.

    A new snapshot for a base replaces the old one; entries are never merged.
    """

    def __init__(self, entries: dict[str, RateSnapshot] | None = None) -> None:
        self._entries: dict[str, RateSnapshot] = {}
        for base, snap in (entries or {}).items():
            self.put(base, snap)

    @staticmethod
    def _key(base: str) -> str:
        key = (base or "").strip().upper()
        if not key:
            raise DomainError("base currency cannot be empty")
        return key

    def get(self, base: str) -> RateSnapshot | None:
        return self._entries.get((base or "").strip().upper())

    def put(self, base: str, snapshot: RateSnapshot) -> None:
        if not isinstance(snapshot, RateSnapshot):
            raise DomainError("snapshot must be a RateSnapshot")
        self._entries[self._key(base)] = snapshot

    def remove(self, base: str) -> RateSnapshot | None:
        return self._entries.pop((base or "").strip().upper(), None)

    def clear(self) -> None:
        self._entries.clear()

    def bases(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, base: object) -> bool:
        return isinstance(base, str) and base.strip().upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.bases())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RateStore):
            return NotImplemented
        return self._entries == other._entries

    def to_dict(self) -> dict[str, Any]:
        return {base: self._entries[base].to_dict() for base in self.bases()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RateStore":
        if not isinstance(data, dict):
            raise DomainError("cache document must be an object")
        return cls({base: RateSnapshot.from_dict(obj) for base, obj in data.items()})
