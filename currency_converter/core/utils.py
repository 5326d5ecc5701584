"""Utility helpers for the currency converter.

Валидация валютных кодов и сумм перед обращением к ядру.
"""

from __future__ import annotations

import math
from typing import Any

from .models import DomainError


def normalize_code(code: str) -> str:
    """Normalize currency code to uppercase trimmed string."""
    return (code or "").strip().upper()


def validate_currency_code(code: str) -> str:
    """Validate and return normalized currency code or raise error.

    Raises:
        DomainError: if code is empty or not alphabetic
    """
    n = normalize_code(code)
    if not n:
        raise DomainError("Currency code cannot be empty")
    if not n.isalpha():
        raise DomainError(f"Invalid currency code '{n}'")
    return n


def parse_amount(value: Any) -> float:
    """Parse amount to a finite float.

    Raises:
        DomainError: when parsing fails or the value is inf/nan
    """
    try:
        amt = float(value)
    except (TypeError, ValueError) as exc:
        raise DomainError("Please type a number for 'amount'") from exc
    if not math.isfinite(amt):
        raise DomainError("'amount' must be a finite number")
    return amt


def compute_value(amount: float, rate: float) -> float:
    """Return amount * rate (helper for conversions)."""
    return float(amount) * float(rate)


def format_money(value: float, decimals: int = 2, grouping: bool = False) -> str:
    """Format monetary value with fixed decimals and optional thousands sep."""
    fmt = f"{{:,.{decimals}f}}" if grouping else f"{{:.{decimals}f}}"
    return fmt.format(float(value))
