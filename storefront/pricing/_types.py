"""
Pricing types — tiers, display modes, breakdowns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

# ═══════════════════════════════════════════════════════════════════════════════
# Enumerations
# ═══════════════════════════════════════════════════════════════════════════════


class PricingTier(Enum):
    """Customer classification selecting which price list applies."""

    DEFAULT = "DEFAULT"
    SUPPORTER = "SUPPORTER"
    VIP = "VIP"
    B2B = "B2B"


class DisplayMode(Enum):
    """
    How prices are shown.

    INCL_VAT: gross, default for private customers.
    EXCL_VAT: net, default for business customers.
    """

    INCL_VAT = "INCL_VAT"
    EXCL_VAT = "EXCL_VAT"


class CustomerType(Enum):
    B2C = "B2C"
    B2B = "B2B"


# ═══════════════════════════════════════════════════════════════════════════════
# Value Objects
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TierPricing:
    """Regular and customer price for one entity, with the tier applied."""

    regular_price: Decimal | None
    customer_price: Decimal | None
    applied_tier: PricingTier


@dataclass(frozen=True, slots=True)
class TotalsBreakdown:
    """Net / VAT / gross split. All fields are non-negative."""

    net: Decimal
    vat: Decimal
    gross: Decimal


@dataclass(frozen=True, slots=True)
class CompanyProfile:
    company_name: str = ""
    org_number: str = ""
    vat_number: str = ""
    invoice_email: str = ""


@dataclass(frozen=True, slots=True)
class PricingDisplay:
    """
    The customer's price display preference.

    Note: display_mode is always derived from customer_type when the type
    changes; it is stored so readers do not need to re-derive it.
    """

    customer_type: CustomerType = CustomerType.B2C
    display_mode: DisplayMode = DisplayMode.INCL_VAT
    vat_rate: Decimal = Decimal("0.25")
    company: CompanyProfile = field(default_factory=CompanyProfile)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "PricingTier",
    "DisplayMode",
    "CustomerType",
    "TierPricing",
    "TotalsBreakdown",
    "CompanyProfile",
    "PricingDisplay",
)
