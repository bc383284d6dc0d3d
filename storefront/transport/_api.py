"""
Store API — every backend endpoint the commerce core calls.

Each method returns a lazy LazyCoroResult[payload, ApiError]; nothing is
sent until it is awaited:

    api = StoreApi(transport, config, auth)
    match await api.fetch_cart(cart_id, session_id):
        case Ok(payload): ...
        case Error(err): ...

Missing required identifiers raise ValueError immediately.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from combinators import lift as L

from storefront._types import Lazy
from storefront.config import StoreConfig
from storefront.transport._auth import AuthSession
from storefront.transport._types import (
    ApiError,
    ApiErrorKind,
    Transport,
    UNSUPPORTED_STATUSES,
)

logger = logging.getLogger(__name__)

type ApiCall = Lazy[Any, ApiError]


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _require(value: object, name: str) -> None:
    if value is None or value == "":
        raise ValueError(f"{name} is required")


def cart_headers(cart_id: str | None, session_id: str | None) -> dict[str, str]:
    headers = {}
    if cart_id:
        headers["X-Cart-Id"] = cart_id
    if session_id:
        headers["X-Session-Id"] = session_id
    return headers


class StoreApi:
    """Thin endpoint layer over a Transport."""

    def __init__(
        self,
        transport: Transport,
        config: StoreConfig | None = None,
        auth: AuthSession | None = None,
    ) -> None:
        self._transport = transport
        self._config = config if config is not None else StoreConfig()
        self._auth = auth if auth is not None else AuthSession()

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def auth(self) -> AuthSession:
        return self._auth

    # ═══════════════════════════════════════════════════════════════════════════
    # Core
    # ═══════════════════════════════════════════════════════════════════════════

    def _to_api_error(self, exc: Exception, *, optional: bool) -> ApiError:
        error = exc if isinstance(exc, ApiError) else ApiError(str(exc), kind=ApiErrorKind.TRANSPORT)
        if error.kind is ApiErrorKind.UNAUTHORIZED:
            self._auth.unauthorized()
        elif optional and error.status in UNSUPPORTED_STATUSES:
            error = error.as_kind(ApiErrorKind.UNSUPPORTED)
        return error

    def _call(
        self,
        method: str,
        url: str,
        fallback_message: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
        optional: bool = False,
    ) -> ApiCall:
        request_headers = {**self._auth.headers(), **(headers or {})}

        async def send() -> Any:
            response = await self._transport.request(method, url, json=json, headers=request_headers)
            return self._transport.parse_response(response, fallback_message)

        return L.catching_async(send, on_error=lambda e: self._to_api_error(e, optional=optional))

    # ═══════════════════════════════════════════════════════════════════════════
    # Cart
    # ═══════════════════════════════════════════════════════════════════════════

    def create_cart(self, session_id: str | None = None) -> ApiCall:
        body = {"sessionId": session_id} if session_id else None
        return self._call("POST", f"{self._config.store_base}/cart", "Failed to create cart", json=body)

    def fetch_cart(self, cart_id: str, session_id: str | None = None) -> ApiCall:
        _require(cart_id, "Cart ID")
        return self._call(
            "GET",
            f"{self._config.store_base}/cart/{_segment(cart_id)}",
            "Failed to load cart",
            headers=cart_headers(cart_id, session_id),
        )

    def add_cart_item(self, cart_id: str, session_id: str | None, variant_id: str, quantity: int = 1) -> ApiCall:
        _require(cart_id, "Cart ID")
        _require(variant_id, "Item ID")
        return self._call(
            "POST",
            f"{self._config.store_base}/cart/{_segment(cart_id)}/items",
            "Failed to add item to cart",
            json={"variantId": variant_id, "quantity": quantity},
            headers=cart_headers(cart_id, session_id),
        )

    def update_cart_item(self, cart_id: str, session_id: str | None, item_id: str, quantity: int) -> ApiCall:
        _require(cart_id, "Cart ID")
        _require(item_id, "Item ID")
        return self._call(
            "PATCH",
            f"{self._config.store_base}/cart/{_segment(cart_id)}/items/{_segment(item_id)}",
            "Failed to update cart item",
            json={"quantity": quantity},
            headers=cart_headers(cart_id, session_id),
        )

    def remove_cart_item(self, cart_id: str, session_id: str | None, item_id: str) -> ApiCall:
        _require(cart_id, "Cart ID")
        _require(item_id, "Item ID")
        return self._call(
            "DELETE",
            f"{self._config.store_base}/cart/{_segment(cart_id)}/items/{_segment(item_id)}",
            "Failed to remove cart item",
            headers=cart_headers(cart_id, session_id),
        )

    def checkout(self, cart_id: str, session_id: str | None, payload: dict[str, Any]) -> ApiCall:
        """
        Start checkout for a cart.

        payload carries email, userId, shippingAddress, customerType,
        company, couponCode, paymentMode; the cart identity is added here.
        """
        _require(cart_id, "Cart ID")
        body = {**payload, "cartId": cart_id}
        if session_id:
            body["sessionId"] = session_id
        return self._call(
            "POST",
            f"{self._config.store_base}/checkout",
            "Checkout failed",
            json=body,
            headers=cart_headers(cart_id, session_id),
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Store & Customer
    # ═══════════════════════════════════════════════════════════════════════════

    def fetch_store_config(self) -> ApiCall:
        return self._call("GET", f"{self._config.store_base}/config", "Failed to load store config")

    def list_my_orders(self) -> ApiCall:
        return self._call("GET", f"{self._config.store_base}/orders/my", "Failed to load orders")

    def fetch_order(self, order_id: str) -> ApiCall:
        _require(order_id, "Order ID")
        return self._call(
            "GET",
            f"{self._config.store_base}/orders/{_segment(order_id)}",
            "Failed to load order details",
        )

    def cancel_order(self, order_id: str) -> ApiCall:
        _require(order_id, "Order ID")
        return self._call(
            "POST",
            f"{self._config.store_base}/orders/{_segment(order_id)}/cancel",
            "Failed to cancel order",
        )

    def update_profile(self, updates: dict[str, Any]) -> ApiCall:
        """Optional feature: older backends answer 404/405/501 (is_unsupported)."""
        return self._call(
            "PATCH",
            f"{self._config.api_base.rstrip('/')}/api/me",
            "Failed to update profile",
            json=updates,
            optional=True,
        )

    def list_addresses(self) -> ApiCall:
        """Optional feature, see update_profile()."""
        return self._call(
            "GET",
            f"{self._config.api_base.rstrip('/')}/api/me/addresses",
            "Failed to load addresses",
            optional=True,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Admin
    # ═══════════════════════════════════════════════════════════════════════════

    def list_admin_orders(self) -> ApiCall:
        return self._call("GET", f"{self._config.admin_base}/orders", "Failed to load orders")

    def update_admin_order_status(self, order_id: str, status: str, note: str | None = None) -> ApiCall:
        _require(order_id, "Order ID")
        _require(status, "Status")
        body: dict[str, Any] = {"status": status}
        if note:
            body["note"] = note
        logger.info("Updating order %s status to %s", order_id, status)
        return self._call(
            "PATCH",
            f"{self._config.admin_base}/orders/{_segment(order_id)}/status",
            "Failed to update order status",
            json=body,
        )


__all__ = (
    "ApiCall",
    "cart_headers",
    "StoreApi",
)
