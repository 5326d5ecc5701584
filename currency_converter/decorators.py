from __future__ import annotations

import inspect
import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable

_logger = logging.getLogger("currency_converter")

# Call arguments worth recording; the store/resolver objects are skipped
_FIELDS = ("frm", "to", "base", "amount")


def log_action(action: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log use-case calls at INFO level.

    Logs ISO timestamp, action, currencies, amount, the resolved rate when
    present, and result (OK/ERROR). Does not swallow exceptions.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        sig = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            ts = (
                datetime.now(timezone.utc)
                .replace(microsecond=0)
                .isoformat()
                .replace("+00:00", "Z")
            )
            bound = sig.bind_partial(*args, **kwargs).arguments
            fields = " ".join(
                f"{name}={bound[name]!r}" for name in _FIELDS if name in bound
            )
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _logger.info(
                    "%s %s %s result=ERROR error_type=%s error_message=%r",
                    ts,
                    action,
                    fields,
                    type(exc).__name__,
                    str(exc),
                )
                raise
            rate = result.get("rate") if isinstance(result, dict) else None
            _logger.info("%s %s %s rate=%s result=OK", ts, action, fields, rate)
            return result

        return wrapper

    return decorator
