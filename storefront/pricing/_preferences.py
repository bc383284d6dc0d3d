"""
Pricing preferences — the customer's persisted display choice.

Stored as one JSON value under `storePricingDisplay`:

    {"customerType": "B2B", "priceDisplayMode": "EXCL_VAT", "vatRate": 0.25,
     "companyName": "Acme AB", "orgNumber": "5566778899", ...}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from kungfu import Result, Ok, Error

from storefront._types import Payload, as_mapping
from storefront.pricing._types import (
    CompanyProfile,
    CustomerType,
    DisplayMode,
    PricingDisplay,
)
from storefront.pricing._vat import (
    DEFAULT_VAT_RATE,
    has_business_profile,
    normalize_vat_rate,
    resolve_display_mode,
)
from storefront.storage import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

STORAGE_KEY = "storePricingDisplay"

# Older clients stored the Swedish labels.
LEGACY_MODES = {
    "INKL_MOMS": DisplayMode.INCL_VAT,
    "EXKL_MOMS": DisplayMode.EXCL_VAT,
}

PROFILE_WRAPPERS = ("user", "customer", "profile")


# ═══════════════════════════════════════════════════════════════════════════════
# Encoding
# ═══════════════════════════════════════════════════════════════════════════════


def _parse_mode(value: object, fallback: DisplayMode) -> DisplayMode:
    key = str(value or "").strip().upper()
    if key in LEGACY_MODES:
        return LEGACY_MODES[key]
    try:
        return DisplayMode(key)
    except ValueError:
        return fallback


def decode_display(raw: str | None, default_vat_rate: Decimal = DEFAULT_VAT_RATE) -> PricingDisplay:
    """Decode a stored preference. Anything unreadable yields the defaults."""
    defaults = PricingDisplay(vat_rate=default_vat_rate)
    if not raw:
        return defaults
    try:
        data = as_mapping(json.loads(raw))
    except ValueError:
        return defaults

    customer_type = (
        CustomerType.B2B
        if str(data.get("customerType") or "").strip().upper() == "B2B"
        else CustomerType.B2C
    )
    return PricingDisplay(
        customer_type=customer_type,
        display_mode=_parse_mode(data.get("priceDisplayMode"), resolve_display_mode(customer_type)),
        vat_rate=normalize_vat_rate(data.get("vatRate"), default_vat_rate),
        company=CompanyProfile(
            company_name=str(data.get("companyName") or ""),
            org_number=str(data.get("orgNumber") or ""),
            vat_number=str(data.get("vatNumber") or ""),
            invoice_email=str(data.get("invoiceEmail") or ""),
        ),
    )


def encode_display(display: PricingDisplay) -> str:
    return json.dumps({
        "customerType": display.customer_type.value,
        "priceDisplayMode": display.display_mode.value,
        "vatRate": float(display.vat_rate),
        "companyName": display.company.company_name,
        "orgNumber": display.company.org_number,
        "vatNumber": display.company.vat_number,
        "invoiceEmail": display.company.invoice_email,
    })


def _unwrap_profile(profile: Payload | None) -> Payload:
    profile = as_mapping(profile)
    for key in PROFILE_WRAPPERS:
        inner = profile.get(key)
        if isinstance(inner, Mapping):
            return inner
    return profile


# ═══════════════════════════════════════════════════════════════════════════════
# PricingPreferences
# ═══════════════════════════════════════════════════════════════════════════════


class PricingPreferences:
    """
    Holds the current PricingDisplay and writes every change through to the store.

    Example:
        prefs = PricingPreferences(store)
        await prefs.load()
        await prefs.seed_from_config({"defaultVatRate": 25})
        await prefs.apply_profile(profile)
        prefs.display.display_mode  # DisplayMode.EXCL_VAT for companies
    """

    def __init__(self, store: KeyValueStore, default_vat_rate: Decimal = DEFAULT_VAT_RATE) -> None:
        self._store = store
        self._default_vat_rate = default_vat_rate
        self._display = PricingDisplay(vat_rate=default_vat_rate)

    @property
    def display(self) -> PricingDisplay:
        return self._display

    @property
    def display_mode(self) -> DisplayMode:
        return self._display.display_mode

    @property
    def vat_rate(self) -> Decimal:
        return self._display.vat_rate

    async def load(self) -> PricingDisplay:
        """Read the stored preference. Storage failures keep the defaults."""
        match await self._store.get(STORAGE_KEY):
            case Ok(raw):
                self._display = decode_display(raw, self._default_vat_rate)
            case Error(e):
                logger.warning("Could not read pricing preference: %s", e.message)
        return self._display

    async def seed_from_config(self, config: Payload | None) -> Result[PricingDisplay, StoreError]:
        """Apply the store's configured VAT rate (`defaultVatRate`, else `vatRate`)."""
        config = as_mapping(config)
        raw_rate = config.get("defaultVatRate")
        if raw_rate is None:
            raw_rate = config.get("vatRate")
        if raw_rate is None:
            return Ok(self._display)
        rate = normalize_vat_rate(raw_rate, self._display.vat_rate)
        return await self._update(replace(self._display, vat_rate=rate))

    async def set_customer_type(self, customer_type: CustomerType) -> Result[PricingDisplay, StoreError]:
        """Switch customer type; display mode follows it."""
        return await self._update(replace(
            self._display,
            customer_type=customer_type,
            display_mode=resolve_display_mode(customer_type),
        ))

    async def set_display_mode(self, mode: DisplayMode) -> Result[PricingDisplay, StoreError]:
        return await self._update(replace(self._display, display_mode=mode))

    async def apply_profile(self, profile: Payload | None) -> Result[PricingDisplay, StoreError]:
        """
        Switch to B2B / EXCL_VAT when the profile describes a company.

        Private profiles leave the stored choice alone.
        """
        data = _unwrap_profile(profile)
        if not has_business_profile(data):
            return Ok(self._display)

        company = CompanyProfile(
            company_name=str(data.get("companyName") or self._display.company.company_name),
            org_number=str(
                data.get("orgNumber") or data.get("organizationNumber") or self._display.company.org_number
            ),
            vat_number=str(data.get("vatNumber") or self._display.company.vat_number),
            invoice_email=str(data.get("invoiceEmail") or self._display.company.invoice_email),
        )
        return await self._update(replace(
            self._display,
            customer_type=CustomerType.B2B,
            display_mode=DisplayMode.EXCL_VAT,
            company=company,
        ))

    async def _update(self, display: PricingDisplay) -> Result[PricingDisplay, StoreError]:
        self._display = display
        match await self._store.set(STORAGE_KEY, encode_display(display)):
            case Ok(_):
                return Ok(display)
            case Error(e):
                logger.warning("Could not persist pricing preference: %s", e.message)
                return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "STORAGE_KEY",
    "decode_display",
    "encode_display",
    "PricingPreferences",
)
