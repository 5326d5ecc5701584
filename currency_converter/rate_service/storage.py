from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..core.exceptions import PersistenceError
from ..core.models import DomainError, RateStore
from .config import load_client_config

logger = logging.getLogger("currency_converter.storage")


def cache_path() -> Path:
    cfg = load_client_config()
    return Path(cfg.CACHE_FILE_PATH)


def _atomic_write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def load_store(path: Path | str | None = None) -> RateStore:
    """Load the rate cache; never fails the caller.

    A missing file yields an empty store. An unreadable or corrupt file is
    logged and also yields an empty store.
    """
    p = Path(path) if path is not None else cache_path()
    if not p.exists():
        return RateStore()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
        store = RateStore.from_dict(data)
    except (OSError, ValueError, RecursionError, DomainError) as exc:
        logger.warning("Ignoring unreadable cache %s: %s", p, exc)
        return RateStore()
    logger.debug("Loaded %d cached bases from %s", len(store), p)
    return store


def save_store(store: RateStore, path: Path | str | None = None) -> None:
    """Persist the whole store as one JSON document (atomic replace).

    Raises:
        PersistenceError: when the file cannot be written.
    """
    p = Path(path) if path is not None else cache_path()
    try:
        _atomic_write_json(p, store.to_dict())
    except OSError as exc:
        raise PersistenceError(str(p), str(exc)) from exc
    logger.debug("Saved %d cached bases to %s", len(store), p)


def clear_store(path: Path | str | None = None) -> int:
    """Remove the cache file. Returns number of dropped base currencies."""
    p = Path(path) if path is not None else cache_path()
    if not p.exists():
        return 0
    removed = len(load_store(p))
    try:
        p.unlink()
    except OSError as exc:
        raise PersistenceError(str(p), str(exc)) from exc
    logger.info("Cache %s cleared: %d bases removed", p, removed)
    return removed
