"""
Order status registry — every known status string, classified once.

Normalization is trim, uppercase, collapse whitespace/hyphens to "_":

    map_status("payment failed") == map_status("PAYMENT-FAILED") == map_status("PAYMENT_FAILED")

Unknown statuses never raise; they get the PENDING_CONFIRMATION descriptor.
"""

from __future__ import annotations

from storefront._types import normalize_key
from storefront.status._types import PrimaryAction, Severity, StatusDescriptor

normalize_status_key = normalize_key

# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════

_AWAITING = ("Awaiting payment", Severity.WARNING, PrimaryAction.CONTINUE_PAYMENT,
             "Payment is required to complete this order.")
_FAILED = ("Failed", Severity.DANGER, PrimaryAction.RETRY_PAYMENT,
           "Payment did not complete. Please retry to place the order.")
_PAID = ("Paid", Severity.SUCCESS, PrimaryAction.VIEW_ORDER,
         "Payment received. Your order is confirmed.")
_UNPAID = ("Unpaid", Severity.WARNING, PrimaryAction.VIEW_ORDER,
           "Payment is due according to your invoice.")
_PENDING_CONFIRMATION = ("Pending confirmation", Severity.WARNING, PrimaryAction.VIEW_ORDER,
                         "We are confirming your order.")
_RECEIVED = ("Received", Severity.INFO, PrimaryAction.VIEW_ORDER,
             "Your order has been received.")
_PROCESSING = ("Processing", Severity.INFO, PrimaryAction.VIEW_ORDER,
               "Your order is being prepared.")
_READY_FOR_PICKUP = ("Ready for pickup", Severity.INFO, PrimaryAction.VIEW_ORDER,
                     "Your order is ready to be picked up.")
_SHIPPED = ("Shipped", Severity.INFO, PrimaryAction.TRACK_ORDER,
            "Your order is on the way.")
_DELIVERED = ("Delivered", Severity.SUCCESS, PrimaryAction.VIEW_RECEIPT,
              "Your order has been delivered.")
_CANCELLED = ("Cancelled", Severity.NEUTRAL, PrimaryAction.VIEW_ORDER,
              "This order was cancelled.")

_TABLE = {
    "PENDING": _AWAITING,
    "PENDING_PAYMENT": _AWAITING,
    "AWAITING_PAYMENT": _AWAITING,
    "PAYMENT_FAILED": _FAILED,
    "FAILED": _FAILED,
    "PAID": _PAID,
    "PAYMENT_SUCCEEDED": _PAID,
    "UNPAID": _UNPAID,
    "PENDING_CONFIRMATION": _PENDING_CONFIRMATION,
    "RECEIVED": _RECEIVED,
    "PROCESSING": _PROCESSING,
    "PREPARING": _PROCESSING,
    "READY_FOR_PICKUP": _READY_FOR_PICKUP,
    "SHIPPED": _SHIPPED,
    "SHIPPING": _SHIPPED,
    "IN_TRANSIT": _SHIPPED,
    "DELIVERED": _DELIVERED,
    "COMPLETED": _DELIVERED,
    "CANCELLED": _CANCELLED,
    "CANCELED": _CANCELLED,
    "CANCELLED_BY_CUSTOMER": _CANCELLED,
}

STATUS_REGISTRY: dict[str, StatusDescriptor] = {
    key: StatusDescriptor(key, label, severity, action, description)
    for key, (label, severity, action, description) in _TABLE.items()
}

FALLBACK_STATUS = STATUS_REGISTRY["PENDING_CONFIRMATION"]

# Before fulfilment starts.
CANCELLABLE_STATUSES = frozenset({
    "PENDING",
    "PENDING_PAYMENT",
    "AWAITING_PAYMENT",
    "PENDING_CONFIRMATION",
    "PAYMENT_FAILED",
    "FAILED",
    "UNPAID",
    "PAID",
    "PAYMENT_SUCCEEDED",
    "RECEIVED",
    "PROCESSING",
})

# ═══════════════════════════════════════════════════════════════════════════════
# Lookups
# ═══════════════════════════════════════════════════════════════════════════════


def map_status(raw: object) -> StatusDescriptor:
    """Descriptor for a raw status. Unknown or missing falls back, never raises."""
    return STATUS_REGISTRY.get(normalize_status_key(raw), FALLBACK_STATUS)


def resolve_primary_action(raw: object, has_tracking: bool = True) -> tuple[PrimaryAction, str]:
    """
    The customer's primary action and its label.

    track-order becomes view-order when there is nothing to track.
    """
    action = map_status(raw).primary_action
    if action is PrimaryAction.TRACK_ORDER and not has_tracking:
        action = PrimaryAction.VIEW_ORDER
    return action, action.label


def status_label(raw: object) -> str:
    return map_status(raw).label


def can_cancel_order(raw: object) -> bool:
    return normalize_status_key(raw) in CANCELLABLE_STATUSES


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "normalize_status_key",
    "STATUS_REGISTRY",
    "FALLBACK_STATUS",
    "CANCELLABLE_STATUSES",
    "map_status",
    "resolve_primary_action",
    "status_label",
    "can_cancel_order",
)
