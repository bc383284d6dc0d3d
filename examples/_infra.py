"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import itertools
import json
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import httpx

from storefront import StoreConfig
from storefront.transport import AuthSession, HttpxTransport, StoreApi


# Catalog
@dataclass(frozen=True, slots=True)
class Variant:
    id: str
    name: str
    price: int
    stock: int


CATALOG = {
    "var_beans": Variant("var_beans", "Coffee beans 500g", 129, 10),
    "var_mug": Variant("var_mug", "Enamel mug", 150, 2),
}


# Fake backend
@dataclass(slots=True)
class FakeShop:
    """Just enough of the store backend for the examples, served through httpx.MockTransport."""

    carts: dict[str, dict[str, Any]] = field(default_factory=dict)
    orders: dict[str, dict[str, Any]] = field(default_factory=lambda: {
        "ord_1": {"id": "ord_1", "orderNumber": 1001, "status": "RECEIVED", "paymentStatus": "PAID"},
        "ord_2": {
            "id": "ord_2",
            "orderNumber": 1002,
            "status": "SHIPPING",
            "paymentMode": "INVOICE_PAY_LATER",
            "paymentStatus": "PENDING_PAYMENT",
            "shippingAddress": {"street": "Storgatan 1", "city": "Lund"},
        },
        "ord_3": {"id": "ord_3", "orderNumber": 1003, "status": "CANCELLED_BY_CUSTOMER"},
    })
    ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    async def handle(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.01)
        parts = request.url.path.strip("/").split("/")[1:]  # drop "api"
        body = json.loads(request.content) if request.content else {}

        match request.method, parts:
            case "POST", ["store", "cart"]:
                n = next(self.ids)
                cart = {"id": f"cart_{n}", "sessionId": f"sess_{n}", "status": "OPEN", "items": []}
                self.carts[cart["id"]] = cart
                return self._cart(cart)
            case "GET", ["store", "cart", cart_id]:
                return self._cart(self.carts.get(cart_id))
            case "POST", ["store", "cart", cart_id, "items"]:
                cart = self.carts.get(cart_id)
                if cart is None:
                    return self._cart(None)
                variant = CATALOG[body["variantId"]]
                line = next((i for i in cart["items"] if i["variantId"] == variant.id), None)
                if line is None:
                    line = {"id": f"li_{next(self.ids)}", "variantId": variant.id, "name": variant.name,
                            "unitPrice": variant.price, "quantity": 0, "stock": variant.stock}
                    cart["items"].append(line)
                line["quantity"] = min(line["quantity"] + body["quantity"], variant.stock)
                return self._cart(cart)
            case "PATCH", ["store", "cart", cart_id, "items", item_id]:
                cart = self.carts.get(cart_id)
                if cart is None:
                    return self._cart(None)
                for line in cart["items"]:
                    if line["id"] == item_id:
                        line["quantity"] = min(body["quantity"], line["stock"])
                return self._cart(cart)
            case "DELETE", ["store", "cart", cart_id, "items", item_id]:
                cart = self.carts.get(cart_id)
                if cart is None:
                    return self._cart(None)
                cart["items"] = [line for line in cart["items"] if line["id"] != item_id]
                return httpx.Response(204)
            case "POST", ["store", "checkout"]:
                cart = self.carts[body["cartId"]]
                cart["status"] = "CHECKED_OUT"
                order_id = f"ord_{next(self.ids) + 100}"
                return httpx.Response(200, json={
                    "orderId": order_id,
                    "paymentUrl": f"https://pay.example.com/{order_id}",
                    "cart": cart,
                })
            case "GET", ["admin", "store", "orders"]:
                return httpx.Response(200, json={"orders": list(self.orders.values())})
            case "PATCH", ["admin", "store", "orders", order_id, "status"]:
                if body["status"] == "DELIVERED":
                    return httpx.Response(503, json={"message": "Order service unavailable"})
                order = self.orders[order_id]
                order["status"] = body["status"]
                return httpx.Response(200, json={"order": order})
        return httpx.Response(404, json={"message": "Not found"})

    def _cart(self, cart: dict[str, Any] | None) -> httpx.Response:
        if cart is None:
            return httpx.Response(404, json={"message": "Cart not found"})
        return httpx.Response(200, json={"cart": cart})


CONFIG = StoreConfig().with_api_base("https://shop.example.com")


def make_api(shop: FakeShop, auth: AuthSession | None = None) -> StoreApi:
    client = httpx.AsyncClient(transport=httpx.MockTransport(shop.handle), timeout=CONFIG.request_timeout)
    return StoreApi(HttpxTransport(client), CONFIG, auth)


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
