"""
Storage — durable key-value values for the client.

    from storefront import storage

    store = storage.MemoryStore()
    await store.set("storePricingDisplay", "{}")
"""

from __future__ import annotations

from storefront.storage._types import StoreError, KeyValueStore
from storefront.storage._memory import MemoryStore
from storefront.storage._sqlalchemy import KeyValueRow, SQLAlchemyKeyValueStore

__all__ = (
    "StoreError",
    "KeyValueStore",
    "MemoryStore",
    "KeyValueRow",
    "SQLAlchemyKeyValueStore",
)
