"""
Normalize — heterogeneous backend payloads into canonical records.

    from storefront import normalize as N

    order = N.normalize_order(payload)
    cart = N.normalize_cart(response, fallback_session_id="s1")

Extractors are exported so field tolerance can be tested on its own.
"""

from __future__ import annotations

from storefront.normalize._types import (
    DEFAULT_CURRENCY,
    Totals,
    Address,
    OrderItem,
    TimelineEvent,
    Order,
    CartStatus,
    CartLineItem,
    Cart,
)
from storefront.normalize._extract import (
    Extractor,
    field,
    money,
    cents,
    text,
    key,
    mapping,
    listing,
    first,
    amount,
)
from storefront.normalize._order import (
    INVOICE_MODES,
    parse_quantity,
    prefer_backend,
    derive_total,
    sum_lines,
    normalize_address,
    extract_payment_url,
    normalize_order_list,
    normalize_order,
    normalize_admin_order,
    normalize_admin_order_list,
    order_status_of,
    order_display_number,
)
from storefront.normalize._cart import OPEN_STATUSES, normalize_cart

__all__ = (
    # Types
    "DEFAULT_CURRENCY",
    "Totals",
    "Address",
    "OrderItem",
    "TimelineEvent",
    "Order",
    "CartStatus",
    "CartLineItem",
    "Cart",
    # Extractors
    "Extractor",
    "field",
    "money",
    "cents",
    "text",
    "key",
    "mapping",
    "listing",
    "first",
    "amount",
    # Orders
    "INVOICE_MODES",
    "parse_quantity",
    "prefer_backend",
    "derive_total",
    "sum_lines",
    "normalize_address",
    "extract_payment_url",
    "normalize_order_list",
    "normalize_order",
    "normalize_admin_order",
    "normalize_admin_order_list",
    "order_status_of",
    "order_display_number",
    # Carts
    "OPEN_STATUSES",
    "normalize_cart",
)
