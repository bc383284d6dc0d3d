"""
Pricing — tier prices, VAT display and status descriptors.

Pure functions, no backend needed.
"""

from storefront import pricing as P
from storefront import status as S
from storefront.normalize import normalize_order
from examples._infra import banner, run

VARIANT = {
    "id": "var_beans",
    "unitPrice": 129,
    "tierPrices": {"VIP": 0, "B2B": 99},
    "priceVIPCents": 11900,
}


async def main() -> None:
    banner("Tier prices")
    for tier in ("default", "vip", "restaurant", "platinum"):
        pricing = P.resolve_pricing_for_tier(VARIANT, tier)
        marker = " (discount)" if P.has_discount(VARIANT, tier) else ""
        print(f"  {tier:<11} -> {pricing.applied_tier.value:<8} {pricing.customer_price}{marker}")

    banner("VAT display")
    for customer in (P.CustomerType.B2C, P.CustomerType.B2B):
        mode = P.resolve_display_mode(customer)
        print(f"  {customer.value}: {P.display_price(99, 25, mode):.2f} ({mode.name})")
    print(f"  breakdown: {P.resolve_totals_breakdown({'totalCents': 12500, 'taxCents': 2500})}")

    banner("Customer statuses")
    order = normalize_order({
        "id": "ord_9",
        "orderStatus": "payment failed",
        "paymentMode": "INVOICE_PAY_LATER",
        "invoice": {"number": "INV-9", "ocr": "9999"},
        "items": [{"name": "Beans", "quantity": 2, "unitPrice": 129}],
    })
    descriptor = S.map_status(order.status)
    action, label = S.resolve_primary_action(order.status, order.has_tracking)
    print(f"  {order.status} -> {descriptor.label} [{descriptor.severity.name}], action: {label} ({action.name})")
    print(f"  {order.payment_method} {order.payment_status}, OCR {order.invoice_ocr}, total {order.totals.total}")


if __name__ == "__main__":
    run(main)
