"""
Tier price resolution.

Resolution order, first match wins:

    1. per-tier price map  (tierPrices["VIP"], tierPrices["vip"], tierPrices["VIP_CENTS"])
    2. flat tier field     (priceVIP, price_vip, priceVIPCents, price_vip_cents)
    3. default price       (tierPrices["DEFAULT"], then unitPrice / price / ...)

A tier price of 0 is "not configured", never a free item.
"""

from __future__ import annotations

from decimal import Decimal

from storefront._types import Payload, as_mapping, from_cents, to_decimal
from storefront.pricing._types import PricingTier, TierPricing

# ═══════════════════════════════════════════════════════════════════════════════
# Tier Normalization
# ═══════════════════════════════════════════════════════════════════════════════

TIER_SYNONYMS: dict[str, PricingTier] = {
    "COMPANY": PricingTier.B2B,
    "BUSINESS": PricingTier.B2B,
    "RESTAURANT": PricingTier.B2B,
}

PRICE_MAP_KEYS = ("priceByTier", "pricesByTier", "tierPrices", "prices")


def normalize_tier(value: object) -> PricingTier:
    """Case- and synonym-normalize a tier. Unknown values become DEFAULT."""
    if isinstance(value, PricingTier):
        return value
    key = str(value if value is not None else "").strip().upper()
    if not key:
        return PricingTier.DEFAULT
    if key in TIER_SYNONYMS:
        return TIER_SYNONYMS[key]
    try:
        return PricingTier(key)
    except ValueError:
        return PricingTier.DEFAULT


def extract_user_tier(profile: Payload | None) -> PricingTier:
    """Read the pricing tier from a customer profile in any known shape."""
    profile = as_mapping(profile)
    raw = as_mapping(profile.get("raw"))
    candidates = (
        profile.get("pricingTier"),
        profile.get("tier"),
        raw.get("pricingTier"),
        raw.get("tier"),
        as_mapping(raw.get("customer")).get("pricingTier"),
        raw.get("customerTier"),
    )
    return normalize_tier(next((c for c in candidates if c is not None), None))


# ═══════════════════════════════════════════════════════════════════════════════
# Price Lookup
# ═══════════════════════════════════════════════════════════════════════════════


def _configured(value: Decimal | None) -> Decimal | None:
    return value if value is not None and value > 0 else None


def _first(*values: Decimal | None) -> Decimal | None:
    return next((v for v in values if v is not None), None)


def _price_map(entity: Payload) -> Payload:
    for key in PRICE_MAP_KEYS:
        candidate = entity.get(key)
        if candidate is not None:
            return as_mapping(candidate)
    return {}


def _map_price(prices: Payload, tier: PricingTier) -> Decimal | None:
    name = tier.value
    lower = name.lower()
    return _first(
        _configured(to_decimal(prices.get(name))),
        _configured(to_decimal(prices.get(lower))),
        _configured(from_cents(prices.get(f"{name}_CENTS"))),
        _configured(from_cents(prices.get(f"{lower}_cents"))),
    )


def _flat_price(entity: Payload, tier: PricingTier) -> Decimal | None:
    name = tier.value
    lower = name.lower()
    return _first(
        _configured(to_decimal(entity.get(f"price{name}"))),
        _configured(to_decimal(entity.get(f"price_{lower}"))),
        _configured(from_cents(entity.get(f"price{name}Cents"))),
        _configured(from_cents(entity.get(f"price_{lower}_cents"))),
    )


def _unit_price(entity: Payload) -> Decimal | None:
    return _first(
        to_decimal(entity.get("unitPrice")),
        to_decimal(entity.get("price")),
        to_decimal(entity.get("priceSek")),
        from_cents(entity.get("unitPriceCents")),
        from_cents(entity.get("priceCents")),
        from_cents(entity.get("price_sek_cents")),
    )


def resolve_price(entity: Payload | None, tier: object = PricingTier.DEFAULT) -> Decimal | None:
    """
    Resolve the unit price to charge for a tier.

    Returns None when the entity carries no usable price at all.

    Example:
        resolve_price({"tierPrices": {"VIP": 0, "DEFAULT": 2990}}, "VIP")
        # Decimal("2990"): VIP is unconfigured, so DEFAULT applies
    """
    if not entity:
        return None
    entity = as_mapping(entity)
    resolved_tier = normalize_tier(tier)
    prices = _price_map(entity)

    if resolved_tier is not PricingTier.DEFAULT:
        tier_price = _first(_map_price(prices, resolved_tier), _flat_price(entity, resolved_tier))
        if tier_price is not None:
            return tier_price

    return _first(_map_price(prices, PricingTier.DEFAULT), _unit_price(entity))


def has_discount(entity: Payload | None, tier: object = PricingTier.DEFAULT) -> bool:
    """True only if the tier price is a known positive number strictly below DEFAULT."""
    current = resolve_price(entity, tier)
    base = resolve_price(entity, PricingTier.DEFAULT)
    if current is None or base is None:
        return False
    if current <= 0 or base <= 0:
        return False
    return current < base


def resolve_pricing_for_tier(entity: Payload | None, tier: object = PricingTier.DEFAULT) -> TierPricing:
    resolved_tier = normalize_tier(tier)
    return TierPricing(
        regular_price=resolve_price(entity, PricingTier.DEFAULT),
        customer_price=resolve_price(entity, resolved_tier),
        applied_tier=resolved_tier,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "TIER_SYNONYMS",
    "normalize_tier",
    "extract_user_tier",
    "resolve_price",
    "has_discount",
    "resolve_pricing_for_tier",
)
