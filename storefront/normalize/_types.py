"""
Canonical order and cart shapes.

Every record keeps the payload it was built from in `raw` (excluded from
equality), and orders can be turned back into a canonical payload with
`as_payload()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from storefront._types import Payload

DEFAULT_CURRENCY = "SEK"

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Totals:
    """Money summary in major units. None means the backend did not say."""

    currency: str = DEFAULT_CURRENCY
    subtotal: Decimal | None = None
    shipping: Decimal | None = None
    tax: Decimal | None = None
    discount: Decimal | None = None
    total: Decimal | None = None

    def as_payload(self) -> dict[str, Any]:
        return {
            "currency": self.currency,
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "discount": self.discount,
            "total": self.total,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# Order Parts
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Address:
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    def as_payload(self) -> dict[str, Any]:
        return {
            "line1": self.line1,
            "line2": self.line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
        }

    def lines(self) -> tuple[str, ...]:
        """Printable address lines, blanks dropped."""
        locality = " ".join(part for part in (self.postal_code, self.city) if part)
        candidates = (self.line1, self.line2, locality, self.state, self.country)
        return tuple(line for line in candidates if line)


@dataclass(frozen=True, slots=True)
class OrderItem:
    id: str
    name: str
    quantity: int
    unit_price: Decimal | None
    line_total: Decimal | None
    sku: str | None = None
    product_id: str | None = None
    variant_id: str | None = None

    def as_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "lineTotal": self.line_total,
            "sku": self.sku,
            "productId": self.product_id,
            "variantId": self.variant_id,
        }


@dataclass(frozen=True, slots=True)
class TimelineEvent:
    """One status change in an order's history."""

    status: str
    at: str | None = None
    note: str | None = None

    def as_payload(self) -> dict[str, Any]:
        return {"status": self.status, "at": self.at, "note": self.note}


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Order:
    """
    Canonical order record.

    `status` is the machine status; `display_status` is the backend's
    human label, kept separately and never preferred over `status`.
    Admin-only fields (customer contact, fulfillment, internal notes) are
    None on customer-facing orders unless the backend sent them.
    """

    id: str
    status: str
    totals: Totals
    items: tuple[OrderItem, ...] = ()
    order_number: str | None = None
    formatted_order_number: str | None = None
    display_status: str | None = None
    payment_status: str | None = None
    payment_method: str | None = None
    payment_reference: str | None = None
    payment_mode: str | None = None
    payment_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    shipping_address: Address | None = None
    billing_address: Address | None = None
    customer_note: str | None = None
    timeline: tuple[TimelineEvent, ...] = ()
    invoice_number: str | None = None
    invoice_due_date: str | None = None
    invoice_ocr: str | None = None
    bankgiro: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    fulfillment_type: str | None = None
    pickup_location: str | None = None
    internal_notes: str | None = None
    raw: Payload = field(default_factory=dict, compare=False, repr=False)

    @property
    def has_tracking(self) -> bool:
        return bool(self.tracking_number or self.tracking_url)

    def as_payload(self) -> dict[str, Any]:
        """Canonical payload; normalizing it yields an equal Order."""
        return {
            "id": self.id,
            "orderStatus": self.status,
            "displayStatus": self.display_status,
            "orderNumber": self.order_number,
            "formattedOrderNumber": self.formatted_order_number,
            "paymentStatus": self.payment_status,
            "paymentMethod": self.payment_method,
            "paymentReference": self.payment_reference,
            "paymentMode": self.payment_mode,
            "paymentUrl": self.payment_url,
            "totals": self.totals.as_payload(),
            "items": [item.as_payload() for item in self.items],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "shippingAddress": self.shipping_address.as_payload() if self.shipping_address else None,
            "billingAddress": self.billing_address.as_payload() if self.billing_address else None,
            "customerNote": self.customer_note,
            "timeline": [event.as_payload() for event in self.timeline],
            "invoiceNumber": self.invoice_number,
            "invoiceDueDate": self.invoice_due_date,
            "invoiceOcr": self.invoice_ocr,
            "bankgiro": self.bankgiro,
            "trackingNumber": self.tracking_number,
            "trackingUrl": self.tracking_url,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "fulfillmentType": self.fulfillment_type,
            "pickupLocation": self.pickup_location,
            "internalNotes": self.internal_notes,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


class CartStatus(Enum):
    """Whether a cart still accepts mutations."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(frozen=True, slots=True)
class CartLineItem:
    """
    One cart line. Prices are net (pre-VAT) major units.

    Note: stock is the upper bound for quantity edits; None means unknown.
    """

    id: str
    quantity: int
    product_id: str | None = None
    variant_id: str | None = None
    name: str | None = None
    unit_price: Decimal | None = None
    discounted_unit_price: Decimal | None = None
    line_total: Decimal | None = None
    discounted_line_total: Decimal | None = None
    line_discount: Decimal | None = None
    stock: int | None = None
    vat_rate: Decimal | None = None

    @property
    def effective_unit_price(self) -> Decimal | None:
        if self.discounted_unit_price is not None:
            return self.discounted_unit_price
        return self.unit_price

    @property
    def effective_line_total(self) -> Decimal | None:
        """Backend line total if sent, else quantity * unit price."""
        for candidate in (self.discounted_line_total, self.line_total):
            if candidate is not None:
                return candidate
        unit = self.effective_unit_price
        return None if unit is None else unit * self.quantity

    def matches(self, reference: str) -> bool:
        """True if reference is this line's id, product id or variant id."""
        return reference in (self.id, self.product_id, self.variant_id)


@dataclass(frozen=True, slots=True)
class Cart:
    cart_id: str | None
    session_id: str | None
    status: CartStatus
    items: tuple[CartLineItem, ...]
    totals: Totals
    raw_status: str | None = None
    raw: Payload = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_open(self) -> bool:
        return self.status is CartStatus.OPEN

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_line(self, reference: str) -> CartLineItem | None:
        return next((item for item in self.items if item.matches(reference)), None)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "DEFAULT_CURRENCY",
    "Totals",
    "Address",
    "OrderItem",
    "TimelineEvent",
    "Order",
    "CartStatus",
    "CartLineItem",
    "Cart",
)
