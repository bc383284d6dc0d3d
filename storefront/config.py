"""
Store configuration — where the backend lives and how prices are shown.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal

from dotenv import load_dotenv

from storefront.pricing import DEFAULT_VAT_RATE, normalize_vat_rate


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """
    Client configuration.

    Fluent builder pattern — chain methods to configure.

    Example:
        config = (
            StoreConfig()
            .with_api_base("https://shop.example.com")
            .with_default_vat_rate(25)
            .with_timeout(seconds=5)
        )

    Note: Immutable — each method returns new StoreConfig.
    """

    api_base: str = "http://localhost:8080"
    default_vat_rate: Decimal = DEFAULT_VAT_RATE
    currency: str = "SEK"
    request_timeout: float = 10.0
    storage_url: str = "sqlite+aiosqlite:///:memory:"

    @property
    def store_base(self) -> str:
        return f"{self.api_base.rstrip('/')}/api/store"

    @property
    def admin_base(self) -> str:
        return f"{self.api_base.rstrip('/')}/api/admin/store"

    def with_api_base(self, url: str) -> StoreConfig:
        return replace(self, api_base=url.rstrip("/"))

    def with_default_vat_rate(self, rate: object) -> StoreConfig:
        """Accepts a fraction (0.25) or a percentage (25)."""
        return replace(self, default_vat_rate=normalize_vat_rate(rate, self.default_vat_rate))

    def with_currency(self, currency: str) -> StoreConfig:
        return replace(self, currency=currency.strip().upper())

    def with_timeout(self, *, seconds: float) -> StoreConfig:
        return replace(self, request_timeout=seconds)

    def with_storage_url(self, url: str) -> StoreConfig:
        return replace(self, storage_url=url)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> StoreConfig:
        """
        Read configuration from the environment (after loading `.env`).

        Variables: STOREFRONT_API_BASE, STOREFRONT_DEFAULT_VAT_RATE,
        STOREFRONT_CURRENCY, STOREFRONT_REQUEST_TIMEOUT, STOREFRONT_STORAGE_URL.
        Unset variables keep the defaults.
        """
        load_dotenv(dotenv_path)
        config = cls()

        if api_base := os.getenv("STOREFRONT_API_BASE"):
            config = config.with_api_base(api_base)
        if vat_rate := os.getenv("STOREFRONT_DEFAULT_VAT_RATE"):
            config = config.with_default_vat_rate(vat_rate)
        if currency := os.getenv("STOREFRONT_CURRENCY"):
            config = config.with_currency(currency)
        if timeout := os.getenv("STOREFRONT_REQUEST_TIMEOUT"):
            try:
                config = config.with_timeout(seconds=float(timeout))
            except ValueError:
                raise ValueError(f"STOREFRONT_REQUEST_TIMEOUT must be a number, got {timeout!r}") from None
        if storage_url := os.getenv("STOREFRONT_STORAGE_URL"):
            config = config.with_storage_url(storage_url)

        return config


__all__ = ("StoreConfig",)
