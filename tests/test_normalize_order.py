"""Order normalization: field tolerance, derivation, idempotence."""

from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from storefront.normalize import (
    Address,
    normalize_admin_order,
    normalize_admin_order_list,
    normalize_order,
    normalize_order_list,
    order_display_number,
    order_status_of,
)

INVOICE_ORDER = {
    "id": "o-1",
    "paymentMode": "INVOICE_PAY_LATER",
    "invoice": {
        "number": "INV-101",
        "dueDate": "2026-02-20T00:00:00.000Z",
        "bankgiro": "5555-1234",
        "ocr": "1234567890",
    },
}


class TestOrderList:
    def test_bare_list(self):
        orders = normalize_order_list([{"id": "1"}, {"id": "2"}])
        assert [order.id for order in orders] == ["1", "2"]

    @pytest.mark.parametrize("wrapper", ["orders", "data", "items", "results"])
    def test_wrapped_list(self, wrapper):
        assert [order.id for order in normalize_order_list({wrapper: [{"id": "1"}]})] == ["1"]

    def test_skips_non_objects(self):
        assert len(normalize_order_list([{"id": "1"}, "junk", None, 7])) == 1

    def test_unknown_shape(self):
        assert normalize_order_list({"message": "ok"}) == []
        assert normalize_order_list(None) == []

    def test_machine_status_beats_display_label(self):
        [order] = normalize_order_list([{"id": "1", "displayStatus": "Pending UI Label", "orderStatus": "PROCESSING"}])
        assert order.status == "PROCESSING"
        assert order.display_status == "Pending UI Label"

    def test_display_label_as_last_resort(self):
        [order] = normalize_order_list([{"id": "1", "display_status": "Shipped"}])
        assert order.status == "Shipped"


class TestNormalizeOrder:
    def test_unwraps_and_reads_snake_case_status(self):
        order = normalize_order({"order": {"id": "2", "order_status": "CANCELLED_BY_CUSTOMER"}})
        assert order.id == "2"
        assert order.status == "CANCELLED_BY_CUSTOMER"

    def test_missing_status_is_pending(self):
        assert normalize_order({"id": "3"}).status == "PENDING"

    def test_invoice_mode_defaults(self):
        order = normalize_order(INVOICE_ORDER)
        assert order.payment_mode == "INVOICE_PAY_LATER"
        assert order.payment_method == "Invoice"
        assert order.payment_status == "UNPAID"
        assert order.payment_reference == "INV-101"
        assert order.bankgiro == "5555-1234"
        assert order.invoice_ocr == "1234567890"
        assert order.invoice_due_date == "2026-02-20T00:00:00.000Z"

    def test_invoice_mode_spelling(self):
        order = normalize_order({"id": "4", "payment": {"mode": "pay-later", "status": "PAID"}})
        assert order.payment_mode == "PAY_LATER"
        assert order.payment_method == "Invoice"
        assert order.payment_status == "PAID"

    def test_nested_payment_fields(self):
        order = normalize_order({"id": "5", "payment": {"method": "Card", "status": "paid", "reference": "pi_1"}})
        assert (order.payment_method, order.payment_status, order.payment_reference) == ("Card", "paid", "pi_1")

    def test_cents_totals(self):
        order = normalize_order({"id": "6", "totals": {"subtotalCents": 10000, "shippingCents": 4900, "totalCents": 14900}})
        assert order.totals.subtotal == Decimal(100)
        assert order.totals.shipping == Decimal(49)
        assert order.totals.total == Decimal(149)

    def test_derives_missing_totals_from_lines(self):
        order = normalize_order({
            "id": "7",
            "shipping": 49,
            "items": [
                {"name": "Beans", "quantity": 2, "unitPrice": 100},
                {"name": "Mug", "qty": "1", "priceCents": 15000},
            ],
        })
        assert order.items[0].line_total == Decimal(200)
        assert order.items[1].unit_price == Decimal(150)
        assert order.totals.subtotal == Decimal(350)
        assert order.totals.total == Decimal(399)

    def test_zero_backend_total_is_replaced(self):
        order = normalize_order({"id": "8", "subtotal": 100, "tax": 25, "total": 0})
        assert order.totals.total == Decimal(125)

    def test_nonzero_backend_total_wins(self):
        order = normalize_order({"id": "9", "items": [{"unitPrice": 100}], "subtotal": 90, "total": 95})
        assert order.totals.subtotal == Decimal(90)
        assert order.totals.total == Decimal(95)

    def test_default_currency(self):
        assert normalize_order({"id": "1"}).totals.currency == "SEK"
        assert normalize_order({"id": "1"}, currency="NOK").totals.currency == "NOK"
        assert normalize_order({"id": "1", "currency": "EUR"}, currency="NOK").totals.currency == "EUR"
        assert [order.totals.currency for order in normalize_admin_order_list([{"id": "a"}], currency="DKK")] == ["DKK"]

    def test_addresses(self):
        order = normalize_order({
            "id": "10",
            "shippingAddress": {"street": "Storgatan 1", "zip": "111 22", "city": "Stockholm"},
            "billingAddress": "Box 12, Malmö",
        })
        assert order.shipping_address == Address(line1="Storgatan 1", city="Stockholm", postal_code="111 22")
        assert order.shipping_address.lines() == ("Storgatan 1", "111 22 Stockholm")
        assert order.billing_address == Address(line1="Box 12, Malmö")

    def test_tracking_and_payment_url(self):
        order = normalize_order({"id": "11", "tracking": {"number": "JJ123"}, "checkout": {"url": "https://pay.test/x"}})
        assert order.has_tracking
        assert order.payment_url == "https://pay.test/x"

    def test_timeline(self):
        order = normalize_order({"id": "12", "history": [{"state": "RECEIVED", "createdAt": "t1"}, {"note": "no status"}]})
        assert len(order.timeline) == 1
        assert order.timeline[0].status == "RECEIVED"
        assert order.timeline[0].at == "t1"

    def test_accepts_normalized_order(self):
        order = normalize_order(INVOICE_ORDER)
        assert normalize_order(order) == order
        assert normalize_order({"order": order}) == order


class TestAdminOrder:
    def test_defaults(self):
        order = normalize_admin_order({"id": "a1"})
        assert order.status == "RECEIVED"
        assert order.fulfillment_type == "PICKUP"

    def test_shipping_when_address_present(self):
        order = normalize_admin_order({"id": "a2", "shippingAddress": {"city": "Lund"}})
        assert order.fulfillment_type == "SHIPPING"

    def test_explicit_fulfillment(self):
        order = normalize_admin_order({"id": "a3", "deliveryType": "store pickup", "shippingAddress": "x"})
        assert order.fulfillment_type == "STORE_PICKUP"

    def test_customer_and_notes(self):
        order = normalize_admin_order({
            "id": "a4",
            "customer": {"name": "Ada", "email": "ada@example.se"},
            "customerPhone": "070-123",
            "adminNote": "Fragile",
            "pickupLocation": "Café",
        })
        assert (order.customer_name, order.customer_email, order.customer_phone) == ("Ada", "ada@example.se", "070-123")
        assert order.internal_notes == "Fragile"
        assert order.pickup_location == "Café"

    def test_list(self):
        assert [order.status for order in normalize_admin_order_list({"orders": [{"id": "1"}]})] == ["RECEIVED"]

    def test_order_number_stands_in_for_id(self):
        assert normalize_admin_order({"orderNumber": 1001}).id == "1001"
        assert normalize_admin_order({"_id": "m1", "orderNumber": 1001}).id == "m1"
        assert normalize_order({"orderNumber": 1001}).id == ""

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ({"deliveryStatus": "SHIPPING"}, "SHIPPING"),
            ({"fulfillmentStatus": "ready for pickup"}, "ready for pickup"),
            ({"status": "PREPARING", "deliveryStatus": "SHIPPING"}, "PREPARING"),
        ],
    )
    def test_fulfillment_status_fallback(self, payload, expected):
        assert normalize_admin_order({"id": "a5", **payload}).status == expected


class TestDisplayNumber:
    def test_formatted(self):
        payload = {"formattedOrderNumber": "HL-1771338326964", "orderNumber": 123, "id": "uuid"}
        assert order_display_number(payload) == "HL-1771338326964"

    def test_order_number(self):
        assert order_display_number({"orderNumber": 1771338326964, "id": "uuid"}) == "HL-1771338326964"

    def test_id(self):
        uuid = "14d96268-5021-4621-a9ed-b719817fc9a2"
        assert order_display_number({"id": uuid}) == f"#{uuid}"

    def test_accepts_order(self):
        assert order_display_number(normalize_order({"id": "x", "orderNumber": 5})) == "HL-5"


def test_order_status_of():
    assert order_status_of({"order": {"status": "SHIPPING"}}) == "SHIPPING"
    assert order_status_of({"id": "1"}) is None


# ═══════════════════════════════════════════════════════════════════════════════
# Idempotence
# ═══════════════════════════════════════════════════════════════════════════════

words = st.text(alphabet="abcxyzABC019 -_", max_size=12)
amounts = st.one_of(
    st.none(),
    st.just(""),
    st.integers(min_value=0, max_value=100_000),
    st.decimals(min_value=0, max_value=100_000, places=2, allow_nan=False, allow_infinity=False),
)
items = st.fixed_dictionaries(
    {},
    optional={
        "id": words,
        "name": words,
        "sku": words,
        "qty": st.one_of(st.integers(min_value=-3, max_value=20), words),
        "price": amounts,
        "priceCents": st.integers(min_value=0, max_value=1_000_000),
        "total": amounts,
    },
)
orders = st.fixed_dictionaries(
    {},
    optional={
        "id": words,
        "orderStatus": words,
        "status": words,
        "displayStatus": words,
        "paymentMode": st.sampled_from(["invoice pay later", "CARD", "pay-later", "", "INVOICE"]),
        "paymentStatus": words,
        "paymentMethod": words,
        "invoice": st.fixed_dictionaries({}, optional={"number": words, "bankgiro": words, "ocr": words}),
        "subtotal": amounts,
        "totalCents": st.integers(min_value=0, max_value=1_000_000),
        "shipping": amounts,
        "tax": amounts,
        "discount": amounts,
        "currency": words,
        "items": st.lists(items, max_size=4),
        "shippingAddress": st.one_of(
            words,
            st.fixed_dictionaries({}, optional={"street": words, "city": words, "zip": words}),
        ),
        "timeline": st.lists(st.fixed_dictionaries({"status": words}, optional={"at": words}), max_size=3),
        "trackingNumber": words,
        "customer": st.fixed_dictionaries({}, optional={"email": words, "name": words}),
        "paymentUrl": words,
    },
)


@settings(max_examples=200)
@given(orders)
def test_normalize_order_is_idempotent(payload):
    once = normalize_order(payload)
    assert normalize_order(once) == once
    assert normalize_order(once.as_payload()) == once


@given(orders)
def test_normalize_admin_order_is_idempotent(payload):
    once = normalize_admin_order(payload)
    assert normalize_admin_order(once) == once
