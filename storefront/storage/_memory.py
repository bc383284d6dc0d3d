"""
In-memory key-value store for tests and single-process apps.
"""

from __future__ import annotations

from kungfu import Result, Ok

from storefront.storage._types import StoreError


class MemoryStore:
    """
    Dict-backed KeyValueStore.

    Example:
        store = MemoryStore()
        await store.set("storefrontCartSession", '{"cartId": "c1", "sessionId": "s1"}')
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Result[str | None, StoreError]:
        return Ok(self._data.get(key))

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        self._data[key] = value
        return Ok(None)

    async def remove(self, key: str) -> Result[bool, StoreError]:
        return Ok(self._data.pop(key, None) is not None)

    def clear(self) -> None:
        """Clear all values (for testing)."""
        self._data.clear()

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


__all__ = ("MemoryStore",)
