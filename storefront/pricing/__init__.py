"""
Pricing — tier price resolution and VAT-aware display.

    from storefront import pricing as P

    price = P.resolve_price(variant, P.PricingTier.VIP)
    shown = P.display_price(price, 0.25, P.DisplayMode.INCL_VAT)
"""

from __future__ import annotations

from storefront.pricing._types import (
    PricingTier,
    DisplayMode,
    CustomerType,
    TierPricing,
    TotalsBreakdown,
    CompanyProfile,
    PricingDisplay,
)
from storefront.pricing._tier import (
    TIER_SYNONYMS,
    normalize_tier,
    extract_user_tier,
    resolve_price,
    has_discount,
    resolve_pricing_for_tier,
)
from storefront.pricing._vat import (
    DEFAULT_VAT_RATE,
    normalize_vat_rate,
    resolve_display_mode,
    has_business_profile,
    display_price,
    display_line_total,
    resolve_totals_breakdown,
)
from storefront.pricing._preferences import (
    STORAGE_KEY,
    decode_display,
    encode_display,
    PricingPreferences,
)

__all__ = (
    # Types
    "PricingTier",
    "DisplayMode",
    "CustomerType",
    "TierPricing",
    "TotalsBreakdown",
    "CompanyProfile",
    "PricingDisplay",
    # Tiers
    "TIER_SYNONYMS",
    "normalize_tier",
    "extract_user_tier",
    "resolve_price",
    "has_discount",
    "resolve_pricing_for_tier",
    # VAT
    "DEFAULT_VAT_RATE",
    "normalize_vat_rate",
    "resolve_display_mode",
    "has_business_profile",
    "display_price",
    "display_line_total",
    "resolve_totals_breakdown",
    # Preferences
    "STORAGE_KEY",
    "decode_display",
    "encode_display",
    "PricingPreferences",
)
