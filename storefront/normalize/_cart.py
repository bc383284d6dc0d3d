"""
Cart normalization — cart responses into one canonical Cart.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from storefront._types import Payload, as_mapping, normalize_key
from storefront.normalize._extract import amount, first, listing, money, text
from storefront.normalize._order import derive_total, parse_quantity, prefer_backend, sum_lines
from storefront.normalize._types import (
    DEFAULT_CURRENCY,
    Cart,
    CartLineItem,
    CartStatus,
    Totals,
)

OPEN_STATUSES = frozenset({"OPEN", "ACTIVE"})

# ═══════════════════════════════════════════════════════════════════════════════
# Candidate Tables
# ═══════════════════════════════════════════════════════════════════════════════

LINE_ID = first(text("id"), text("itemId"), text("lineId"), text("line_id"))
LINE_PRODUCT_ID = first(text("productId"), text("product_id"), text("product", "id"))
LINE_VARIANT_ID = first(text("variantId"), text("variant_id"), text("variant", "id"))
LINE_NAME = first(text("name"), text("title"), text("productName"), text("product", "name"))
LINE_QUANTITY = first(text("quantity"), text("qty"))
LINE_UNIT_PRICE = first(amount("price"), amount("unitPrice"))
LINE_DISCOUNTED_UNIT = amount("discountedUnitPrice")
LINE_TOTAL = first(amount("total"), amount("lineTotal"))
LINE_DISCOUNTED_TOTAL = amount("discountedLineTotal")
LINE_DISCOUNT = amount("lineDiscount")
LINE_STOCK = first(
    text("stock"),
    text("availableStock"),
    text("available_stock"),
    text("stockQuantity"),
    text("inventory"),
    text("variant", "stock"),
)
LINE_VAT_RATE = first(
    money("vatRate"),
    money("vat_rate"),
    money("momsRate"),
    money("taxRate"),
    money("tax_rate"),
)

CART_ID = first(text("id"), text("cartId"), text("cart_id"))
SESSION_ID = first(text("sessionId"), text("session_id"))
CART_STATUS = first(text("status"), text("state"))


def _cart_money(*names: str):
    """Nested totals block first, then flat cart fields."""
    return first(
        *(amount("totals", n) for n in names),
        *(amount(n) for n in names),
    )


SUBTOTAL = _cart_money("subtotal")
DISCOUNT = _cart_money("discount")
SHIPPING = _cart_money("shipping")
TAX = _cart_money("tax")
TOTAL = _cart_money("total")

# ═══════════════════════════════════════════════════════════════════════════════
# Normalization
# ═══════════════════════════════════════════════════════════════════════════════


def _normalize_line(raw: Payload, index: int) -> CartLineItem:
    stock = LINE_STOCK(raw)
    return CartLineItem(
        id=LINE_ID(raw) or str(index),
        quantity=parse_quantity(LINE_QUANTITY(raw)),
        product_id=LINE_PRODUCT_ID(raw),
        variant_id=LINE_VARIANT_ID(raw),
        name=LINE_NAME(raw),
        unit_price=LINE_UNIT_PRICE(raw),
        discounted_unit_price=LINE_DISCOUNTED_UNIT(raw),
        line_total=LINE_TOTAL(raw),
        discounted_line_total=LINE_DISCOUNTED_TOTAL(raw),
        line_discount=LINE_DISCOUNT(raw),
        stock=parse_quantity(stock) if stock is not None else None,
        vat_rate=LINE_VAT_RATE(raw),
    )


def _status_of(raw_status: str | None) -> CartStatus:
    # No status means the backend only returns live carts.
    if raw_status is None:
        return CartStatus.OPEN
    return CartStatus.OPEN if normalize_key(raw_status) in OPEN_STATUSES else CartStatus.CLOSED


def normalize_cart(
    payload: object,
    fallback_cart_id: str | None = None,
    fallback_session_id: str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> Cart | None:
    """
    Normalize a cart response (`{"cart": {...}}` or the cart itself).

    Identity falls back to the given ids when the response omits them,
    the currency to `currency`.
    Returns None for an empty payload.

    Example:
        cart = normalize_cart({"cart": {"id": "c1", "items": [...]}}, fallback_session_id="s1")
        cart.session_id  # "s1"
    """
    envelope = as_mapping(payload)
    if not envelope:
        return None
    cart = as_mapping(envelope.get("cart")) or envelope

    lines = tuple(
        _normalize_line(item, index)
        for index, item in enumerate(listing("items")(cart) or ())
        if isinstance(item, Mapping)
    )

    shipping = SHIPPING(cart)
    tax = TAX(cart)
    discount = DISCOUNT(cart)
    subtotal = prefer_backend(SUBTOTAL(cart), sum_lines([line.effective_line_total for line in lines]))
    if subtotal is None:
        subtotal = Decimal(0)
    total = prefer_backend(TOTAL(cart), derive_total(subtotal, shipping, tax, discount))

    currency = (
        text("totals", "currency")(cart)
        or text("currency")(cart)
        or text("currency")(envelope)
        or currency
    )
    raw_status = CART_STATUS(cart)

    return Cart(
        cart_id=CART_ID(cart) or text("cartId")(envelope) or fallback_cart_id,
        session_id=SESSION_ID(cart) or SESSION_ID(envelope) or fallback_session_id,
        status=_status_of(raw_status),
        items=lines,
        totals=Totals(
            currency=currency,
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            discount=discount,
            total=total,
        ),
        raw_status=raw_status,
        raw=envelope,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "OPEN_STATUSES",
    "normalize_cart",
)
