"""Test doubles: an in-memory backend behind httpx.MockTransport, and payload builders."""

import inspect
from collections.abc import Callable
from typing import Any

import httpx


Handler = Callable[[httpx.Request], Any]


def reply(status: int = 200, body: Any = None, headers: dict[str, str] | None = None) -> Handler:
    """A handler answering every request with a fresh response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    return handler


class FakeBackend:
    """Route table keyed by (method, path). Unrouted requests get a 404."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, handler: Handler | dict | list) -> None:
        if not callable(handler):
            handler = reply(200, handler)
        self.routes[(method, path)] = handler

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if (method is None or request.method == method)
            and (path is None or request.url.path == path)
        ]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        response = handler(request)
        if inspect.isawaitable(response):
            response = await response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)


def cart_line(
    item_id: str,
    variant_id: str,
    quantity: int = 1,
    price: float = 100,
    stock: int | None = None,
) -> dict[str, Any]:
    line: dict[str, Any] = {
        "id": item_id,
        "variantId": variant_id,
        "productId": f"prod_{variant_id}",
        "name": f"Item {variant_id}",
        "quantity": quantity,
        "unitPrice": price,
    }
    if stock is not None:
        line["stock"] = stock
    return line


def cart_body(
    cart_id: str = "c1",
    session_id: str = "s1",
    items: tuple[dict[str, Any], ...] = (),
    status: str = "OPEN",
    **extra: Any,
) -> dict[str, Any]:
    return {
        "cart": {
            "id": cart_id,
            "sessionId": session_id,
            "status": status,
            "items": list(items),
            **extra,
        }
    }


