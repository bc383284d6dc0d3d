"""VAT rate normalization, display amounts and totals breakdown."""

from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from storefront.pricing import (
    CustomerType,
    DisplayMode,
    TotalsBreakdown,
    display_line_total,
    display_price,
    has_business_profile,
    normalize_vat_rate,
    resolve_display_mode,
    resolve_totals_breakdown,
)

money = st.decimals(min_value=0, max_value=1_000_000, places=2, allow_nan=False, allow_infinity=False)
rates = st.decimals(min_value=0, max_value=1, places=4, allow_nan=False, allow_infinity=False)


class TestNormalizeVatRate:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (25, Decimal("0.25")),
            ("12%", Decimal("0.12")),
            (" 6 % ", Decimal("0.06")),
            (0.06, Decimal("0.06")),
            (1, Decimal(1)),
            (0, Decimal(0)),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_vat_rate(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", -5, True])
    def test_falls_back(self, raw):
        assert normalize_vat_rate(raw, Decimal("0.12")) == Decimal("0.12")


class TestDisplayMode:
    @pytest.mark.parametrize("customer_type", ["B2B", "company", CustomerType.B2B])
    def test_business_is_excl(self, customer_type):
        assert resolve_display_mode(customer_type) is DisplayMode.EXCL_VAT

    @pytest.mark.parametrize("customer_type", ["B2C", None, "", CustomerType.B2C])
    def test_private_is_incl(self, customer_type):
        assert resolve_display_mode(customer_type) is DisplayMode.INCL_VAT


class TestHasBusinessProfile:
    def test_customer_type(self):
        assert has_business_profile({"customerType": "B2B"})

    def test_company_marker_under_raw(self):
        assert has_business_profile({"raw": {"orgNumber": "556677-8899"}})

    def test_b2b_tier(self):
        assert has_business_profile({"pricingTier": "restaurant"})

    def test_private(self):
        assert not has_business_profile({"name": "Ada", "customerType": "B2C"})
        assert not has_business_profile(None)


class TestDisplayPrice:
    def test_incl_vat(self):
        assert display_price(100, Decimal("0.25"), DisplayMode.INCL_VAT) == Decimal(125)

    def test_percentage_rate(self):
        assert display_price(100, 25, DisplayMode.INCL_VAT) == Decimal(125)

    def test_missing_net(self):
        assert display_price(None, Decimal("0.25"), DisplayMode.INCL_VAT) is None

    @given(net=money, rate=rates)
    def test_excl_vat_is_identity(self, net, rate):
        assert display_price(net, rate, DisplayMode.EXCL_VAT) == net

    @given(net=money, rate=rates)
    def test_incl_vat_adds_rate(self, net, rate):
        assert display_price(net, rate, DisplayMode.INCL_VAT) == net * (1 + rate)

    def test_line_total(self):
        assert display_line_total(40, 3, Decimal("0.25"), DisplayMode.INCL_VAT) == Decimal(150)
        assert display_line_total(40, 3, Decimal("0.25"), DisplayMode.EXCL_VAT) == Decimal(120)


class TestTotalsBreakdown:
    def test_subtotal_only(self):
        assert resolve_totals_breakdown({"subtotal": 112}) == TotalsBreakdown(
            net=Decimal(112), vat=Decimal(0), gross=Decimal(112)
        )

    def test_backend_fields(self):
        breakdown = resolve_totals_breakdown({"total": 125, "tax": 25, "subtotal": 100})
        assert breakdown == TotalsBreakdown(net=Decimal(100), vat=Decimal(25), gross=Decimal(125))

    def test_cents_fields(self):
        breakdown = resolve_totals_breakdown({"totalCents": 12500, "vatCents": 2500})
        assert breakdown == TotalsBreakdown(net=Decimal(100), vat=Decimal(25), gross=Decimal(125))

    def test_net_plus_vat_when_gross_missing(self):
        breakdown = resolve_totals_breakdown({"net": 80, "moms": 20})
        assert breakdown.gross == Decimal(100)

    def test_never_negative(self):
        breakdown = resolve_totals_breakdown({"total": 10, "tax": 30})
        assert breakdown.net == Decimal(0)
        assert breakdown.vat == Decimal(30)

    def test_empty(self):
        assert resolve_totals_breakdown(None) == TotalsBreakdown(
            net=Decimal(0), vat=Decimal(0), gross=Decimal(0)
        )

    def test_vat_is_not_estimated(self):
        assert resolve_totals_breakdown({"total": 125, "vatRate": 25}).vat == Decimal(0)
