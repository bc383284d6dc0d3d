"""
Cart — the shopper's cart session.

    from storefront import cart as C

    session = C.CartSession(api, store, on_notice=toast)
    await session.bootstrap()
    await session.add_item("var_1")
"""

from __future__ import annotations

from storefront.cart._types import (
    SessionState,
    CartIdentity,
    CartErrorKind,
    CartError,
    CheckoutResult,
)
from storefront.cart._session import (
    STORAGE_KEY,
    max_quantity,
    display_line_total,
    CartSession,
)

__all__ = (
    # Types
    "SessionState",
    "CartIdentity",
    "CartErrorKind",
    "CartError",
    "CheckoutResult",
    # Session
    "STORAGE_KEY",
    "max_quantity",
    "display_line_total",
    "CartSession",
)
