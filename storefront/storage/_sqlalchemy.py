"""
SQLAlchemy integration — durable key-value store.

Usage:
    engine = create_async_engine("sqlite+aiosqlite:///storefront.db")
    store = SQLAlchemyKeyValueStore(async_sessionmaker(engine))
    await store.create_schema(engine)

    await store.set("storefrontCartSession", payload)
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from storefront.storage._types import StoreError


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class KeyValueRow(Base):
    """One stored value, replaced whole on every write."""

    __tablename__ = "storefront_kv"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyKeyValueStore:
    """KeyValueStore backed by the `storefront_kv` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    async def from_url(cls, url: str) -> SQLAlchemyKeyValueStore:
        """
        Engine, schema and store in one step. The store owns the engine.

        Example:
            store = await SQLAlchemyKeyValueStore.from_url(config.storage_url)
            ...
            await store.aclose()
        """
        engine = create_async_engine(url)
        await cls.create_schema(engine)
        return cls(async_sessionmaker(engine, expire_on_commit=False), engine=engine)

    @staticmethod
    async def create_schema(engine: AsyncEngine) -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def aclose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    async def get(self, key: str) -> Result[str | None, StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = select(KeyValueRow.value).where(KeyValueRow.key == key)
                result = await session.execute(stmt)
                return Ok(result.scalar_one_or_none())

        except Exception as e:
            return Error(StoreError(f"Failed to get: {e}", e))

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(KeyValueRow, key)
                if row is None:
                    session.add(KeyValueRow(key=key, value=value))
                else:
                    row.value = value
                    row.updated_at = datetime.now(timezone.utc)
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(StoreError(f"Failed to set: {e}", e))

    async def remove(self, key: str) -> Result[bool, StoreError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(KeyValueRow, key)
                if row is None:
                    return Ok(False)

                await session.delete(row)
                await session.commit()
                return Ok(True)

        except Exception as e:
            return Error(StoreError(f"Failed to remove: {e}", e))


__all__ = (
    "KeyValueRow",
    "SQLAlchemyKeyValueStore",
)
