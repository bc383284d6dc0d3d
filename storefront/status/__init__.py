"""
Status — customer status classification and the staff transition policy.

    from storefront import status as S

    S.map_status("payment failed").primary_action  # PrimaryAction.RETRY_PAYMENT
    S.can_transition("PREPARING", "SHIPPING", order)
"""

from __future__ import annotations

from storefront.status._types import (
    Severity,
    PrimaryAction,
    ACTION_LABELS,
    StatusDescriptor,
    BoardStatus,
    PaymentBadge,
    BoardOrder,
    BoardErrorKind,
    BoardError,
)
from storefront.status._registry import (
    normalize_status_key,
    STATUS_REGISTRY,
    FALLBACK_STATUS,
    CANCELLABLE_STATUSES,
    map_status,
    resolve_primary_action,
    status_label,
    can_cancel_order,
)
from storefront.status._transition import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    board_status_of,
    is_pickup,
    is_read_only,
    can_transition,
    allowed_targets,
    requires_payment_confirmation,
    payment_badge,
)
from storefront.status._board import Confirm, OrderBoard

__all__ = (
    # Types
    "Severity",
    "PrimaryAction",
    "ACTION_LABELS",
    "StatusDescriptor",
    "BoardStatus",
    "PaymentBadge",
    "BoardOrder",
    "BoardErrorKind",
    "BoardError",
    # Registry
    "normalize_status_key",
    "STATUS_REGISTRY",
    "FALLBACK_STATUS",
    "CANCELLABLE_STATUSES",
    "map_status",
    "resolve_primary_action",
    "status_label",
    "can_cancel_order",
    # Transitions
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "board_status_of",
    "is_pickup",
    "is_read_only",
    "can_transition",
    "allowed_targets",
    "requires_payment_confirmation",
    "payment_badge",
    # Board
    "Confirm",
    "OrderBoard",
)
