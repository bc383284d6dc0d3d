"""
Cart types — session lifecycle, persisted identity, and cart errors.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, auto

from storefront._types import Payload, as_mapping


class SessionState(Enum):
    """
    Cart session lifecycle:

        UNINITIALIZED → BOOTSTRAPPING → READY

    A failed bootstrap falls back to UNINITIALIZED. While READY, the
    cart's own status decides whether it is open.
    """

    UNINITIALIZED = auto()
    BOOTSTRAPPING = auto()
    READY = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Identity
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartIdentity:
    """
    The (cart_id, session_id) pair, persisted whole as one JSON value:

        {"cartId": "c_1", "sessionId": "s_1"}
    """

    cart_id: str
    session_id: str

    def encode(self) -> str:
        return json.dumps({"cartId": self.cart_id, "sessionId": self.session_id})

    @classmethod
    def decode(cls, raw: str | None) -> CartIdentity | None:
        """Half a pair is no pair."""
        if not raw:
            return None
        try:
            data = as_mapping(json.loads(raw))
        except ValueError:
            return None
        cart_id = data.get("cartId")
        session_id = data.get("sessionId")
        if not cart_id or not session_id:
            return None
        return cls(cart_id=str(cart_id), session_id=str(session_id))


# ═══════════════════════════════════════════════════════════════════════════════
# Errors & Results
# ═══════════════════════════════════════════════════════════════════════════════


class CartErrorKind(Enum):
    CLOSED = auto()  # cart no longer accepts mutations
    BUSY = auto()  # same line already has a mutation in flight
    SESSION_NOT_READY = auto()  # no identity pair yet
    REMOTE = auto()  # backend refused or failed
    SESSION_GONE = auto()  # 404/410, stored pair was cleared
    NO_ORDER_ID = auto()  # checkout answered without an order id
    ABORTED = auto()  # view disposed; never shown


@dataclass(frozen=True, slots=True)
class CartError:
    kind: CartErrorKind
    message: str
    cause: Exception | None = None

    @property
    def is_aborted(self) -> bool:
        return self.kind is CartErrorKind.ABORTED


@dataclass(frozen=True, slots=True)
class CheckoutResult:
    """
    A started checkout.

    payment_url is set when the customer must be redirected to pay.
    """

    order_id: str
    payment_url: str | None = None
    raw: Payload = field(default_factory=dict, compare=False, repr=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "SessionState",
    "CartIdentity",
    "CartErrorKind",
    "CartError",
    "CheckoutResult",
)
