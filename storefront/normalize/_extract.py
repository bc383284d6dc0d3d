"""
Candidate extractors — the field-name tolerance list, one function at a time.

Each extractor is a pure function `Payload -> T | None`. A field is read by
trying an ordered list of them:

    ORDER_TOTAL = first(money("total"), money("totals", "total"), cents("totalCents"))
    ORDER_TOTAL({"totalCents": 12900})  # Decimal("129")

Empty strings count as missing, so `{"status": ""}` falls through.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from storefront._types import Payload, from_cents, normalize_key, to_decimal

type Extractor[T] = Callable[[Payload], T | None]

# ═══════════════════════════════════════════════════════════════════════════════
# Primitives
# ═══════════════════════════════════════════════════════════════════════════════


def _walk(payload: Payload, path: Sequence[str]) -> Any:
    current: Any = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    if current is None or current == "":
        return None
    return current


def field(*path: str) -> Extractor[Any]:
    """Raw value at a (possibly nested) path."""
    return lambda payload: _walk(payload, path)


def money(*path: str) -> Extractor[Decimal]:
    """Major-unit amount at path."""
    return lambda payload: to_decimal(_walk(payload, path))


def cents(*path: str) -> Extractor[Decimal]:
    """Minor-unit amount at path, converted to major units."""
    return lambda payload: from_cents(_walk(payload, path))


def text(*path: str) -> Extractor[str]:
    """Scalar at path as a stripped string. Mappings and lists are not text."""

    def extract(payload: Payload) -> str | None:
        value = _walk(payload, path)
        if value is None or isinstance(value, (Mapping, list, tuple, bool)):
            return None
        return str(value).strip() or None

    return extract


def key(*path: str) -> Extractor[str]:
    """Enum-like string at path in normalized KEY form."""

    def extract(payload: Payload) -> str | None:
        return normalize_key(text(*path)(payload)) or None

    return extract


def mapping(*path: str) -> Extractor[Payload]:
    def extract(payload: Payload) -> Payload | None:
        value = _walk(payload, path)
        return value if isinstance(value, Mapping) else None

    return extract


def listing(*path: str) -> Extractor[Sequence[Any]]:
    def extract(payload: Payload) -> Sequence[Any] | None:
        value = _walk(payload, path)
        return value if isinstance(value, (list, tuple)) else None

    return extract


# ═══════════════════════════════════════════════════════════════════════════════
# Composition
# ═══════════════════════════════════════════════════════════════════════════════


def first[T](*extractors: Extractor[T]) -> Extractor[T]:
    """First extractor that yields a value wins."""

    def extract(payload: Payload) -> T | None:
        for extractor in extractors:
            value = extractor(payload)
            if value is not None:
                return value
        return None

    return extract


def amount(*path: str) -> Extractor[Decimal]:
    """
    Money at path, major units first, then the `Cents` sibling.

    amount("totals", "tax") tries totals.tax, then totals.taxCents.
    """
    *parents, name = path
    return first(money(*path), cents(*parents, f"{name}Cents"), cents(*parents, f"{name}_cents"))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Extractor",
    "field",
    "money",
    "cents",
    "text",
    "key",
    "mapping",
    "listing",
    "first",
    "amount",
)
