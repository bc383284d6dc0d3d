"""
Core types for storefront.

Re-exports from kungfu + payload and money helpers shared by
every subpackage.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Payload Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Payload = Mapping[str, Any]
"""A decoded JSON object as the backend sent it."""

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async remote call that may fail."""

HUNDRED = Decimal(100)

# ═══════════════════════════════════════════════════════════════════════════════
# Money Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def to_decimal(value: object) -> Decimal | None:
    """
    Parse a backend number into Decimal.

    Returns None for missing, blank, boolean, non-finite or unparseable
    values. Floats go through str() so 0.1 stays 0.1.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, (float, str)):
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    return parsed if parsed.is_finite() else None


def from_cents(value: object) -> Decimal | None:
    """Parse a minor-unit amount and convert it to major units."""
    parsed = to_decimal(value)
    return None if parsed is None else parsed / HUNDRED


def as_mapping(value: object) -> Payload:
    """Return value if it is a mapping, else an empty one."""
    return value if isinstance(value, Mapping) else {}


# ═══════════════════════════════════════════════════════════════════════════════
# Keys
# ═══════════════════════════════════════════════════════════════════════════════

_SEPARATORS = re.compile(r"[\s-]+")


def normalize_key(raw: object) -> str:
    """
    Canonical form of a backend enum string.

    "payment failed", "Payment-Failed" and "PAYMENT_FAILED" all become
    "PAYMENT_FAILED". None becomes "".
    """
    text = str(raw if raw is not None else "").strip().upper()
    return _SEPARATORS.sub("_", text)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "Payload",
    "Lazy",
    # Money
    "HUNDRED",
    "to_decimal",
    "from_cents",
    "as_mapping",
    # Keys
    "normalize_key",
)
