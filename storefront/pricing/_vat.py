"""
VAT display — what number the customer sees.

Private customers see gross (INCL_VAT), business customers see net
(EXCL_VAT). Backend totals come in several shapes; resolve_totals_breakdown
turns any of them into one non-negative {net, vat, gross} triple.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from storefront._types import HUNDRED, Payload, as_mapping, from_cents, to_decimal
from storefront.pricing._tier import normalize_tier
from storefront.pricing._types import (
    CustomerType,
    DisplayMode,
    PricingTier,
    TotalsBreakdown,
)

DEFAULT_VAT_RATE = Decimal("0.25")

BUSINESS_TYPES = frozenset({"B2B", "COMPANY", "BUSINESS", "RESTAURANT"})

GROSS_KEYS = ("total", "gross", "totalInclVat", "grossTotal")
VAT_KEYS = ("tax", "vat", "moms", "vatTotal")
NET_KEYS = ("net", "subtotalExVat", "totalExVat", "netTotal", "subtotalNet")

ZERO = Decimal(0)

# ═══════════════════════════════════════════════════════════════════════════════
# Rate & Mode
# ═══════════════════════════════════════════════════════════════════════════════


def normalize_vat_rate(value: object, fallback: Decimal = DEFAULT_VAT_RATE) -> Decimal:
    """
    Normalize a VAT rate to a fraction.

    25 -> 0.25, "12%" -> 0.12, 0.06 -> 0.06. Exactly 1 stays 1 (100%).
    Negative or unparseable input returns fallback.
    """
    if isinstance(value, str):
        value = value.strip().removesuffix("%")
    rate = to_decimal(value)
    if rate is None or rate < 0:
        return fallback
    return rate / HUNDRED if rate > 1 else rate


def resolve_display_mode(customer_type: object) -> DisplayMode:
    if isinstance(customer_type, CustomerType):
        key = customer_type.value
    else:
        key = str(customer_type if customer_type is not None else "").strip().upper()
    return DisplayMode.EXCL_VAT if key in BUSINESS_TYPES else DisplayMode.INCL_VAT


def has_business_profile(profile: Payload | None) -> bool:
    """True when a customer profile describes a company rather than a person."""
    if not profile:
        return False
    profile = as_mapping(profile)
    raw = as_mapping(profile.get("raw"))

    def pick(*keys: str) -> object:
        for source in (profile, raw):
            for key in keys:
                if source.get(key) is not None:
                    return source[key]
        return None

    profile_type = str(pick("customerType", "type") or "").strip().upper()
    account_type = str(pick("accountType") or "").strip().upper()
    if profile_type in BUSINESS_TYPES or account_type in BUSINESS_TYPES:
        return True

    if normalize_tier(pick("pricingTier", "tier")) is PricingTier.B2B:
        return True

    markers = ("businessProfile", "companyName", "orgNumber", "organizationNumber")
    return any(profile.get(key) or raw.get(key) for key in markers)


# ═══════════════════════════════════════════════════════════════════════════════
# Display Amounts
# ═══════════════════════════════════════════════════════════════════════════════


def display_price(net: object, vat_rate: object, mode: DisplayMode) -> Decimal | None:
    """
    Amount to show for a net price.

    Example:
        display_price(100, 0.25, DisplayMode.INCL_VAT)  # Decimal("125.00")
        display_price(100, 0.25, DisplayMode.EXCL_VAT)  # Decimal("100")
    """
    amount = to_decimal(net)
    if amount is None:
        return None
    if mode is DisplayMode.EXCL_VAT:
        return amount
    return amount * (1 + normalize_vat_rate(vat_rate))


def display_line_total(
    net_unit: object,
    quantity: object,
    vat_rate: object,
    mode: DisplayMode,
) -> Decimal | None:
    unit = to_decimal(net_unit)
    count = to_decimal(quantity)
    if unit is None:
        return None
    return display_price(unit * (count if count is not None else ZERO), vat_rate, mode)


# ═══════════════════════════════════════════════════════════════════════════════
# Totals Breakdown
# ═══════════════════════════════════════════════════════════════════════════════


def _total_value(totals: Payload, keys: Sequence[str]) -> Decimal | None:
    for key in keys:
        value = to_decimal(totals.get(key))
        if value is not None:
            return value
    for key in keys:
        value = from_cents(totals.get(f"{key}Cents"))
        if value is not None:
            return value
    return None


def resolve_totals_breakdown(totals: Payload | None) -> TotalsBreakdown:
    """
    Split totals into net / VAT / gross, preferring backend fields.

    VAT is never estimated from a rate: a missing tax field means 0.

    Example:
        resolve_totals_breakdown({"subtotal": 112})
        # TotalsBreakdown(net=112, vat=0, gross=112)
    """
    totals = as_mapping(totals)
    gross = _total_value(totals, GROSS_KEYS)
    vat = _total_value(totals, VAT_KEYS)
    net = _total_value(totals, NET_KEYS)

    if vat is None:
        vat = ZERO
    if gross is None:
        gross = _total_value(totals, ("subtotal",))
    if gross is None:
        gross = net + vat if net is not None else ZERO
    if net is None:
        net = gross - vat

    return TotalsBreakdown(
        net=max(net, ZERO),
        vat=max(vat, ZERO),
        gross=max(gross, ZERO),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "DEFAULT_VAT_RATE",
    "normalize_vat_rate",
    "resolve_display_mode",
    "has_business_profile",
    "display_price",
    "display_line_total",
    "resolve_totals_breakdown",
)
