"""
Key-value store — where the client keeps its few durable values.

Values are opaque JSON strings. Only two keys are ever written:
the cart identity pair and the pricing display preference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from kungfu import Result


# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StoreError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class KeyValueStore(Protocol):
    """
    Async key-value storage protocol.

    Note: set() always replaces the whole value; there are no partial
    updates. All methods return Result for explicit error handling.
    """

    async def get(self, key: str) -> Result[str | None, StoreError]:
        """Get a value. Returns Ok(None) if the key is absent."""
        ...

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        ...

    async def remove(self, key: str) -> Result[bool, StoreError]:
        """Remove a key. Returns Ok(False) if it was absent."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StoreError",
    "KeyValueStore",
)
