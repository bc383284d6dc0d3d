"""
Order transition policy — which board moves staff may make.

    RECEIVED → PREPARING → SHIPPING         → DELIVERED
                         → READY_FOR_PICKUP → DELIVERED

CANCELLED is reached only by backend events. Orders cancelled by the
customer are read-only.
"""

from __future__ import annotations

from storefront.status._registry import normalize_status_key
from storefront.status._types import BoardOrder, BoardStatus, PaymentBadge

# ═══════════════════════════════════════════════════════════════════════════════
# Tables
# ═══════════════════════════════════════════════════════════════════════════════

ALLOWED_TRANSITIONS: dict[BoardStatus, frozenset[BoardStatus]] = {
    BoardStatus.RECEIVED: frozenset({BoardStatus.PREPARING}),
    BoardStatus.PREPARING: frozenset({BoardStatus.SHIPPING, BoardStatus.READY_FOR_PICKUP}),
    BoardStatus.SHIPPING: frozenset({BoardStatus.DELIVERED}),
    BoardStatus.READY_FOR_PICKUP: frozenset({BoardStatus.DELIVERED}),
    BoardStatus.DELIVERED: frozenset(),
    BoardStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({BoardStatus.DELIVERED, BoardStatus.CANCELLED})

CANCELLED_KEYS = frozenset({"CANCELLED", "CANCELED", "CANCELLED_BY_CUSTOMER"})
READ_ONLY_KEY = "CANCELLED_BY_CUSTOMER"

UNSETTLED_PAYMENT_KEYS = frozenset({
    "PENDING",
    "PENDING_PAYMENT",
    "AWAITING_PAYMENT",
    "FAILED",
    "PAYMENT_FAILED",
    "UNPAID",
})

PAID_KEYS = frozenset({"PAID", "PAYMENT_SUCCEEDED", "COMPLETED", "PROCESSING"})
INVOICE_MODE_KEYS = frozenset({"PAY_LATER", "INVOICE", "INVOICE_PAY_LATER"})

# ═══════════════════════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════════════════════


def _source_of(raw: object) -> BoardStatus | None:
    """Board status an order is in; None when the status has no column of its own."""
    if isinstance(raw, BoardStatus):
        return raw
    key = normalize_status_key(raw)
    if key in CANCELLED_KEYS:
        return BoardStatus.CANCELLED
    if key == "COMPLETED":
        return BoardStatus.DELIVERED
    try:
        return BoardStatus(key)
    except ValueError:
        return None


def board_status_of(raw: object) -> BoardStatus:
    """Board column for a raw status. Unknown statuses land in RECEIVED."""
    return _source_of(raw) or BoardStatus.RECEIVED


def _target_of(raw: object) -> BoardStatus | None:
    if isinstance(raw, BoardStatus):
        return raw
    try:
        return BoardStatus(normalize_status_key(raw))
    except ValueError:
        return None


def is_pickup(order: BoardOrder | None) -> bool:
    return order is not None and "PICKUP" in normalize_status_key(order.fulfillment_type)


def is_read_only(order: BoardOrder | None) -> bool:
    return order is not None and normalize_status_key(order.status) == READ_ONLY_KEY


# ═══════════════════════════════════════════════════════════════════════════════
# Policy
# ═══════════════════════════════════════════════════════════════════════════════


def can_transition(from_status: object, to_status: object, order: BoardOrder | None = None) -> bool:
    """
    Whether staff may move an order from one board status to another.

    Read-only and terminal orders refuse everything, including a no-op
    save. So do statuses with no board column. Otherwise identity is a
    legal no-op.
    """
    if is_read_only(order):
        return False

    source = _source_of(from_status)
    target = _target_of(to_status)
    if source is None or target is None or source in TERMINAL_STATUSES:
        return False
    if target is BoardStatus.CANCELLED:
        return False
    if source is target:
        return True
    if source is BoardStatus.PREPARING:
        return target is (BoardStatus.READY_FOR_PICKUP if is_pickup(order) else BoardStatus.SHIPPING)
    return target in ALLOWED_TRANSITIONS[source]


def allowed_targets(order: BoardOrder) -> tuple[BoardStatus, ...]:
    """Board statuses the order can be moved to, in column order."""
    return tuple(status for status in BoardStatus if can_transition(order.status, status, order))


def requires_payment_confirmation(order: BoardOrder, to_status: object) -> bool:
    """
    Marking an order DELIVERED while payment is unsettled needs a human yes.

    An unpaid invoice is the normal state of a pay-later order and needs none.
    """
    if _target_of(to_status) is not BoardStatus.DELIVERED:
        return False
    key = normalize_status_key(order.payment_status)
    if key == "UNPAID" and normalize_status_key(order.payment_mode) in INVOICE_MODE_KEYS:
        return False
    return key in UNSETTLED_PAYMENT_KEYS


def payment_badge(order: BoardOrder) -> PaymentBadge:
    if normalize_status_key(order.payment_status) in PAID_KEYS:
        return PaymentBadge.PAID
    if normalize_status_key(order.payment_mode) in INVOICE_MODE_KEYS:
        return PaymentBadge.INVOICE
    return PaymentBadge.UNPAID


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "board_status_of",
    "is_pickup",
    "is_read_only",
    "can_transition",
    "allowed_targets",
    "requires_payment_confirmation",
    "payment_badge",
)
