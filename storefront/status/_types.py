"""
Status types — descriptors, board columns, board errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from storefront.transport import ApiError

# ═══════════════════════════════════════════════════════════════════════════════
# Customer-facing Classification
# ═══════════════════════════════════════════════════════════════════════════════


class Severity(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"
    DANGER = "danger"
    NEUTRAL = "neutral"


class PrimaryAction(Enum):
    """The single action a customer is offered for an order."""

    CONTINUE_PAYMENT = "continue-payment"
    RETRY_PAYMENT = "retry-payment"
    VIEW_ORDER = "view-order"
    TRACK_ORDER = "track-order"
    VIEW_RECEIPT = "view-receipt"

    @property
    def label(self) -> str:
        return ACTION_LABELS[self]


ACTION_LABELS = {
    PrimaryAction.CONTINUE_PAYMENT: "Continue payment",
    PrimaryAction.RETRY_PAYMENT: "Retry payment",
    PrimaryAction.VIEW_ORDER: "View order",
    PrimaryAction.TRACK_ORDER: "Track order",
    PrimaryAction.VIEW_RECEIPT: "View receipt",
}


@dataclass(frozen=True, slots=True)
class StatusDescriptor:
    """How one status is shown. Always recomputed, never persisted."""

    normalized_key: str
    label: str
    severity: Severity
    primary_action: PrimaryAction
    description: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# Staff Board
# ═══════════════════════════════════════════════════════════════════════════════


class BoardStatus(Enum):
    """Kanban column of the staff order board, in column order."""

    RECEIVED = "RECEIVED"
    PREPARING = "PREPARING"
    SHIPPING = "SHIPPING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return "Cancelled" if self is BoardStatus.CANCELLED else self.value.replace("_", " ")


class PaymentBadge(Enum):
    PAID = "PAID"
    INVOICE = "INVOICE"
    UNPAID = "UNPAID"


class BoardOrder(Protocol):
    """What the transition policy reads from an order."""

    @property
    def status(self) -> str: ...
    @property
    def payment_status(self) -> str | None: ...
    @property
    def payment_mode(self) -> str | None: ...
    @property
    def fulfillment_type(self) -> str | None: ...


class BoardErrorKind(Enum):
    READ_ONLY = auto()
    INVALID_TRANSITION = auto()
    CONFIRMATION_DECLINED = auto()
    REMOTE = auto()


@dataclass(frozen=True, slots=True)
class BoardError:
    """A refused or failed status save."""

    kind: BoardErrorKind
    message: str
    cause: ApiError | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Severity",
    "PrimaryAction",
    "ACTION_LABELS",
    "StatusDescriptor",
    "BoardStatus",
    "PaymentBadge",
    "BoardOrder",
    "BoardErrorKind",
    "BoardError",
)
