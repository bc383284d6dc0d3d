"""
Order normalization — any backend order payload into one canonical Order.

    from storefront import normalize as N

    orders = N.normalize_order_list({"orders": [...]})
    order = N.normalize_order({"order": {...}})

All functions are pure. Field tolerance lives in the candidate tables
below, one ordered chain of extractors per field.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from storefront._types import Payload, as_mapping, to_decimal
from storefront.normalize._extract import (
    Extractor,
    amount,
    first,
    key,
    listing,
    mapping,
    text,
)
from storefront.normalize._types import (
    DEFAULT_CURRENCY,
    Address,
    Order,
    OrderItem,
    TimelineEvent,
    Totals,
)

LIST_WRAPPERS = ("orders", "data", "items", "results")

INVOICE_MODES = frozenset({"INVOICE_PAY_LATER", "INVOICE", "PAY_LATER"})

# ═══════════════════════════════════════════════════════════════════════════════
# Candidate Tables
# ═══════════════════════════════════════════════════════════════════════════════

ORDER_ID = first(text("id"), text("orderId"), text("order_id"), text("_id"), text("reference"))
ORDER_NUMBER = first(text("orderNumber"), text("order_number"), text("displayOrderNumber"))
FORMATTED_NUMBER = first(text("formattedOrderNumber"), text("formatted_order_number"))

# Machine status first; the human label is last resort.
STATUS = first(
    text("orderStatus"),
    text("order_status"),
    text("status"),
    text("state"),
    text("displayStatus"),
    text("display_status"),
)
DISPLAY_STATUS = first(text("displayStatus"), text("display_status"))

# Staff orders: the order number doubles as id; fulfillment states stand in for status.
ADMIN_ORDER_ID = first(ORDER_ID, text("orderNumber"))
ADMIN_STATUS = first(
    text("orderStatus"),
    text("order_status"),
    text("status"),
    text("state"),
    text("deliveryStatus"),
    text("fulfillmentStatus"),
    text("displayStatus"),
    text("display_status"),
)

PAYMENT_STATUS = first(
    text("paymentStatus"),
    text("payment_status"),
    text("payment_state"),
    text("payment", "status"),
)
PAYMENT_METHOD = first(
    text("paymentMethod"),
    text("payment_method"),
    text("payment", "method"),
    text("payment", "type"),
)
PAYMENT_REFERENCE = first(
    text("paymentReference"),
    text("payment_reference"),
    text("payment", "reference"),
    text("payment", "id"),
)
PAYMENT_MODE = first(key("paymentMode"), key("payment_mode"), key("payment", "mode"))

INVOICE_NUMBER = first(
    text("invoiceNumber"),
    text("invoice_number"),
    text("invoice", "number"),
    text("invoice", "invoiceNumber"),
)
INVOICE_DUE_DATE = first(
    text("invoiceDueDate"),
    text("invoice_due_date"),
    text("invoice", "dueDate"),
    text("invoice", "due_date"),
)
INVOICE_OCR = first(text("invoiceOcr"), text("invoice_ocr"), text("invoice", "ocr"))
BANKGIRO = first(text("bankgiro"), text("invoice", "bankgiro"))

TRACKING_NUMBER = first(
    text("trackingNumber"),
    text("tracking_number"),
    text("tracking", "number"),
    text("shipment", "trackingNumber"),
)
TRACKING_URL = first(text("trackingUrl"), text("tracking_url"), text("tracking", "url"))

CREATED_AT = first(
    text("createdAt"),
    text("created_at"),
    text("created"),
    text("timestamp"),
    text("placedAt"),
    text("date"),
)
UPDATED_AT = first(text("updatedAt"), text("updated_at"), text("updated"), text("modifiedAt"))
CUSTOMER_NOTE = first(text("customerNote"), text("customer_note"), text("note"))

ITEMS = first(listing("items"), listing("lines"), listing("lineItems"), listing("line_items"))
TIMELINE = first(listing("timeline"), listing("history"), listing("statusHistory"), listing("events"))

SHIPPING_ADDRESS: Extractor[Any] = first(
    mapping("shippingAddress"),
    text("shippingAddress"),
    mapping("shipping_address"),
    mapping("address"),
    text("address"),
    mapping("fulfillment", "address"),
)
BILLING_ADDRESS: Extractor[Any] = first(
    mapping("billingAddress"),
    text("billingAddress"),
    mapping("billing_address"),
    mapping("payment", "billingAddress"),
)

CUSTOMER_NAME = first(
    text("customerName"),
    text("customer", "name"),
    text("customer", "fullName"),
    text("customerInfo", "name"),
)
CUSTOMER_EMAIL = first(
    text("customerEmail"),
    text("customer", "email"),
    text("customerInfo", "email"),
    text("email"),
)
CUSTOMER_PHONE = first(
    text("customerPhone"),
    text("customer", "phone"),
    text("customerInfo", "phone"),
    text("phone"),
)
FULFILLMENT_TYPE = first(key("fulfillmentType"), key("deliveryType"), key("fulfillment", "type"))
PICKUP_LOCATION = first(text("pickupLocation"), text("fulfillment", "pickupLocation"))
INTERNAL_NOTES = first(text("internalNotes"), text("adminNote"))

CURRENCY = first(text("totals", "currency"), text("currency"), text("summary", "currency"))


def _money_field(*names: str) -> Extractor[Decimal]:
    """Flat field first, then the nested totals blocks."""
    candidates: list[Extractor[Decimal]] = [amount(n) for n in names]
    for block in ("totals", "summary", "amounts"):
        candidates.extend(amount(block, n) for n in names)
    return first(*candidates)


SUBTOTAL = _money_field("subtotal")
SHIPPING = _money_field("shipping", "shippingTotal")
TAX = _money_field("tax", "taxTotal", "vat", "moms")
DISCOUNT = _money_field("discount", "discountTotal")
TOTAL = _money_field("total", "paidTotal", "totalAmount", "amount")

ITEM_ID = first(text("id"), text("lineId"), text("line_id"))
ITEM_NAME = first(text("name"), text("title"), text("productName"), text("sku"))
ITEM_QUANTITY = first(text("quantity"), text("qty"))
ITEM_UNIT_PRICE = first(amount("unitPrice"), amount("price"), amount("unit_price"), amount("amount"))
ITEM_LINE_TOTAL = first(amount("lineTotal"), amount("total"), amount("line_total"))
ITEM_SKU = text("sku")
ITEM_PRODUCT_ID = first(text("productId"), text("product_id"), text("product", "id"))
ITEM_VARIANT_ID = first(text("variantId"), text("variant_id"), text("variant", "id"))

TIMELINE_STATUS = first(text("status"), text("state"), text("type"))
TIMELINE_AT = first(text("at"), text("createdAt"), text("timestamp"), text("date"))
TIMELINE_NOTE = first(text("note"), text("message"), text("description"))

PAYMENT_URL_PATHS: tuple[tuple[str, ...], ...] = (
    ("paymentUrl",),
    ("payment_url",),
    ("checkoutUrl",),
    ("checkout_url",),
    ("redirectUrl",),
    ("redirect_url",),
    ("url",),
    ("payment", "url"),
    ("payment", "paymentUrl"),
    ("checkout", "paymentUrl"),
    ("checkout", "url"),
    ("checkout", "checkoutUrl"),
)
PAYMENT_URL = first(*(text(*path) for path in PAYMENT_URL_PATHS))

ADDRESS_LINE1 = first(text("line1"), text("address1"), text("street"))
ADDRESS_LINE2 = first(text("line2"), text("address2"))
ADDRESS_CITY = text("city")
ADDRESS_STATE = first(text("state"), text("province"), text("region"))
ADDRESS_POSTAL = first(text("postalCode"), text("postal_code"), text("zip"), text("zipCode"))
ADDRESS_COUNTRY = text("country")

# ═══════════════════════════════════════════════════════════════════════════════
# Shared Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def parse_quantity(value: object, default: int = 1) -> int:
    """Whole, non-negative quantity. Missing or unparseable uses default."""
    parsed = to_decimal(value)
    if parsed is None:
        return default
    return max(int(parsed), 0)


def prefer_backend(backend: Decimal | None, derived: Decimal | None) -> Decimal | None:
    """A derived amount only fills a missing or zero backend amount."""
    if backend is not None and backend != 0:
        return backend
    return derived if derived is not None else backend


def derive_total(
    subtotal: Decimal | None,
    shipping: Decimal | None,
    tax: Decimal | None,
    discount: Decimal | None,
) -> Decimal | None:
    if subtotal is None:
        return None
    return subtotal + (shipping or 0) + (tax or 0) - (discount or 0)


def sum_lines(lines: Sequence[Decimal | None]) -> Decimal | None:
    """Sum of known line totals; None when there are no lines to sum."""
    known = [line for line in lines if line is not None]
    if not known:
        return None
    return sum(known, Decimal(0))


def normalize_address(value: object) -> Address | None:
    if value is None:
        return None
    if isinstance(value, str):
        return Address(line1=value.strip()) if value.strip() else None
    if not isinstance(value, Mapping):
        return None
    return Address(
        line1=ADDRESS_LINE1(value) or "",
        line2=ADDRESS_LINE2(value) or "",
        city=ADDRESS_CITY(value) or "",
        state=ADDRESS_STATE(value) or "",
        postal_code=ADDRESS_POSTAL(value) or "",
        country=ADDRESS_COUNTRY(value) or "",
    )


def extract_payment_url(source: object) -> str | None:
    """Checkout/payment redirect URL from any known response shape."""
    if isinstance(source, str):
        return source.strip() or None
    return PAYMENT_URL(as_mapping(source))


# ═══════════════════════════════════════════════════════════════════════════════
# Items & Timeline
# ═══════════════════════════════════════════════════════════════════════════════


def _normalize_item(raw: Payload, index: int) -> OrderItem:
    quantity = parse_quantity(ITEM_QUANTITY(raw))
    unit_price = ITEM_UNIT_PRICE(raw)
    line_total = ITEM_LINE_TOTAL(raw)
    if line_total is None and unit_price is not None:
        line_total = unit_price * quantity
    return OrderItem(
        id=ITEM_ID(raw) or str(index),
        name=ITEM_NAME(raw) or "Item",
        quantity=quantity,
        unit_price=unit_price,
        line_total=line_total,
        sku=ITEM_SKU(raw),
        product_id=ITEM_PRODUCT_ID(raw),
        variant_id=ITEM_VARIANT_ID(raw),
    )


def _normalize_items(source: Payload) -> tuple[OrderItem, ...]:
    raw_items = ITEMS(source) or ()
    return tuple(
        _normalize_item(item, index)
        for index, item in enumerate(raw_items)
        if isinstance(item, Mapping)
    )


def _normalize_timeline(source: Payload) -> tuple[TimelineEvent, ...]:
    events = []
    for raw in TIMELINE(source) or ():
        if not isinstance(raw, Mapping):
            continue
        status = TIMELINE_STATUS(raw)
        if status is None:
            continue
        events.append(TimelineEvent(status=status, at=TIMELINE_AT(raw), note=TIMELINE_NOTE(raw)))
    return tuple(events)


def _normalize_totals(source: Payload, items: Sequence[OrderItem], currency: str) -> Totals:
    shipping = SHIPPING(source)
    tax = TAX(source)
    discount = DISCOUNT(source)
    subtotal = prefer_backend(SUBTOTAL(source), sum_lines([item.line_total for item in items]))
    total = prefer_backend(TOTAL(source), derive_total(subtotal, shipping, tax, discount))
    return Totals(
        currency=CURRENCY(source) or currency,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        discount=discount,
        total=total,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


def _as_source(payload: object) -> Payload:
    if isinstance(payload, Order):
        return payload.as_payload()
    return as_mapping(payload)


def _unwrap(payload: object) -> Payload:
    source = _as_source(payload)
    inner = source.get("order")
    if isinstance(inner, (Mapping, Order)):
        return _as_source(inner)
    return source


def _build_order(source: Payload, *, admin: bool, currency: str = DEFAULT_CURRENCY) -> Order:
    items = _normalize_items(source)

    payment_mode = PAYMENT_MODE(source)
    payment_method = PAYMENT_METHOD(source)
    payment_status = PAYMENT_STATUS(source)
    payment_reference = PAYMENT_REFERENCE(source)
    invoice_number = INVOICE_NUMBER(source)

    if payment_mode in INVOICE_MODES:
        payment_method = payment_method or "Invoice"
        payment_status = payment_status or "UNPAID"
        payment_reference = payment_reference or invoice_number

    shipping_address = normalize_address(SHIPPING_ADDRESS(source))
    fulfillment_type = FULFILLMENT_TYPE(source)
    if admin and fulfillment_type is None:
        fulfillment_type = "SHIPPING" if shipping_address is not None else "PICKUP"

    return Order(
        id=(ADMIN_ORDER_ID if admin else ORDER_ID)(source) or "",
        status=(ADMIN_STATUS(source) or "RECEIVED") if admin else (STATUS(source) or "PENDING"),
        display_status=DISPLAY_STATUS(source),
        totals=_normalize_totals(source, items, currency),
        items=items,
        order_number=ORDER_NUMBER(source),
        formatted_order_number=FORMATTED_NUMBER(source),
        payment_status=payment_status,
        payment_method=payment_method,
        payment_reference=payment_reference,
        payment_mode=payment_mode,
        payment_url=extract_payment_url(source),
        created_at=CREATED_AT(source),
        updated_at=UPDATED_AT(source),
        shipping_address=shipping_address,
        billing_address=normalize_address(BILLING_ADDRESS(source)),
        customer_note=CUSTOMER_NOTE(source),
        timeline=_normalize_timeline(source),
        invoice_number=invoice_number,
        invoice_due_date=INVOICE_DUE_DATE(source),
        invoice_ocr=INVOICE_OCR(source),
        bankgiro=BANKGIRO(source),
        tracking_number=TRACKING_NUMBER(source),
        tracking_url=TRACKING_URL(source),
        customer_name=CUSTOMER_NAME(source),
        customer_email=CUSTOMER_EMAIL(source),
        customer_phone=CUSTOMER_PHONE(source),
        fulfillment_type=fulfillment_type,
        pickup_location=PICKUP_LOCATION(source),
        internal_notes=INTERNAL_NOTES(source),
        raw=source,
    )


def _order_entries(payload: object) -> Sequence[Any]:
    if isinstance(payload, (list, tuple)):
        return payload
    source = as_mapping(payload)
    for wrapper in LIST_WRAPPERS:
        entries = source.get(wrapper)
        if isinstance(entries, (list, tuple)):
            return entries
    return ()


def normalize_order_list(payload: object, *, currency: str = DEFAULT_CURRENCY) -> list[Order]:
    """
    Normalize a bare list or a wrapped list (`orders`, `data`, `items`, `results`).

    Non-object entries are skipped. Orders that name no currency get `currency`.
    """
    return [
        _build_order(_as_source(entry), admin=False, currency=currency)
        for entry in _order_entries(payload)
        if isinstance(entry, (Mapping, Order))
    ]


def normalize_order(payload: object, *, currency: str = DEFAULT_CURRENCY) -> Order:
    """
    Normalize one order, unwrapping `{"order": {...}}`.

    Idempotent: normalize_order(normalize_order(x)) == normalize_order(x).

    Example:
        order = normalize_order({
            "paymentMode": "invoice-pay-later",
            "invoice": {"number": "INV-101", "bankgiro": "5555-1234"},
        })
        order.payment_method, order.payment_status  # ("Invoice", "UNPAID")
    """
    return _build_order(_unwrap(payload), admin=False, currency=currency)


def normalize_admin_order(payload: object, *, currency: str = DEFAULT_CURRENCY) -> Order:
    """Normalize an order for the staff board; fulfillment type is always set."""
    return _build_order(_unwrap(payload), admin=True, currency=currency)


def normalize_admin_order_list(payload: object, *, currency: str = DEFAULT_CURRENCY) -> list[Order]:
    return [
        _build_order(_as_source(entry), admin=True, currency=currency)
        for entry in _order_entries(payload)
        if isinstance(entry, (Mapping, Order))
    ]


def order_status_of(payload: object) -> str | None:
    """The machine status a payload carries, if any."""
    return STATUS(_unwrap(payload))


def order_display_number(order: Order | Payload) -> str:
    """Formatted number, else `HL-<orderNumber>`, else `#<id>`."""
    source = _as_source(order)
    formatted = FORMATTED_NUMBER(source)
    if formatted:
        return formatted
    number = ORDER_NUMBER(source)
    if number:
        return f"HL-{number}"
    return f"#{ORDER_ID(source) or ''}"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
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
)
