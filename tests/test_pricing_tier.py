"""Tier price resolution and discount detection."""

from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from storefront.pricing import (
    PricingTier,
    extract_user_tier,
    has_discount,
    normalize_tier,
    resolve_price,
    resolve_pricing_for_tier,
)


class TestNormalizeTier:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("vip", PricingTier.VIP),
            (" Supporter ", PricingTier.SUPPORTER),
            ("B2B", PricingTier.B2B),
            ("company", PricingTier.B2B),
            ("Business", PricingTier.B2B),
            ("RESTAURANT", PricingTier.B2B),
            ("gold", PricingTier.DEFAULT),
            ("", PricingTier.DEFAULT),
            (None, PricingTier.DEFAULT),
            (PricingTier.VIP, PricingTier.VIP),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_tier(raw) is expected


class TestExtractUserTier:
    def test_top_level_field(self):
        assert extract_user_tier({"pricingTier": "vip"}) is PricingTier.VIP

    def test_nested_raw_customer(self):
        profile = {"raw": {"customer": {"pricingTier": "supporter"}}}
        assert extract_user_tier(profile) is PricingTier.SUPPORTER

    def test_customer_tier_fallback(self):
        assert extract_user_tier({"raw": {"customerTier": "company"}}) is PricingTier.B2B

    def test_missing_profile(self):
        assert extract_user_tier(None) is PricingTier.DEFAULT


class TestResolvePrice:
    def test_tier_map_wins(self):
        entity = {"tierPrices": {"DEFAULT": 100, "VIP": 80}}
        assert resolve_price(entity, "VIP") == Decimal(80)

    def test_zero_tier_price_is_unconfigured(self):
        entity = {"tierPrices": {"VIP": 0, "DEFAULT": 2990}}
        assert resolve_price(entity, "VIP") == Decimal(2990)

    def test_negative_tier_price_is_unconfigured(self):
        entity = {"tierPrices": {"VIP": -5, "DEFAULT": 50}}
        assert resolve_price(entity, "VIP") == Decimal(50)

    def test_lowercase_map_key(self):
        entity = {"priceByTier": {"supporter": "45.50"}, "price": 50}
        assert resolve_price(entity, "SUPPORTER") == Decimal("45.50")

    def test_cents_map_key(self):
        entity = {"tierPrices": {"VIP_CENTS": 1990}, "price": 25}
        assert resolve_price(entity, "VIP") == Decimal("19.9")

    def test_flat_tier_field(self):
        assert resolve_price({"priceVIP": 70, "price": 90}, PricingTier.VIP) == Decimal(70)

    def test_flat_cents_field(self):
        assert resolve_price({"price_b2b_cents": 5000, "price": 90}, "b2b") == Decimal(50)

    def test_unknown_tier_uses_default(self):
        assert resolve_price({"price": 90, "priceVIP": 70}, "platinum") == Decimal(90)

    def test_default_from_unit_price_cents(self):
        assert resolve_price({"unitPriceCents": 12550}) == Decimal("125.5")

    def test_no_price(self):
        assert resolve_price({"name": "Coffee"}, "VIP") is None
        assert resolve_price(None) is None


class TestHasDiscount:
    def test_lower_tier_price(self):
        assert has_discount({"tierPrices": {"DEFAULT": 100, "VIP": 80}}, "VIP")

    def test_equal_price_is_no_discount(self):
        assert not has_discount({"tierPrices": {"DEFAULT": 100, "VIP": 100}}, "VIP")

    def test_unconfigured_tier_is_no_discount(self):
        assert not has_discount({"tierPrices": {"DEFAULT": 100, "VIP": 0}}, "VIP")

    def test_missing_default(self):
        assert not has_discount({"priceVIP": 80}, "VIP")

    @given(
        default=st.integers(min_value=-100, max_value=10_000),
        tier_price=st.integers(min_value=-100, max_value=10_000),
    )
    def test_matches_price_comparison(self, default, tier_price):
        entity = {"tierPrices": {"DEFAULT": default, "VIP": tier_price}}
        current = resolve_price(entity, "VIP")
        base = resolve_price(entity, "DEFAULT")
        expected = current is not None and base is not None and 0 < current < base
        assert has_discount(entity, "VIP") == expected


def test_resolve_pricing_for_tier():
    pricing = resolve_pricing_for_tier({"tierPrices": {"DEFAULT": 100, "SUPPORTER": 90}}, "supporter")
    assert pricing.regular_price == Decimal(100)
    assert pricing.customer_price == Decimal(90)
    assert pricing.applied_tier is PricingTier.SUPPORTER
