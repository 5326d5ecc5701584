from __future__ import annotations

from datetime import datetime, timedelta

from .models import RateSnapshot

DEFAULT_CACHE_TTL = timedelta(hours=1)


def is_fresh(
    snapshot: RateSnapshot, now: datetime, ttl: timedelta = DEFAULT_CACHE_TTL
) -> bool:
    """Return True iff the snapshot is younger than ttl at `now`.

    The boundary is exclusive: an age of exactly ttl is stale. A timestamp
    ahead of `now` (clock skew), or one that cannot be compared with `now`,
    counts as stale so the caller refetches.
    """
    try:
        age = now - snapshot.timestamp
    except TypeError:
        # naive vs aware
        return False
    if age < timedelta(0):
        return False
    return age < ttl
