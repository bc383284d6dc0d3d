"""HTTP transport, error taxonomy and the store endpoints."""

import json

import httpx
import pytest
from kungfu import Error

from factories import reply
from storefront.config import StoreConfig
from storefront.transport import (
    ApiErrorKind,
    AuthSession,
    HttpxTransport,
    StoreApi,
    classify_status,
    parse_body,
)


class TestParseBody:
    def test_json(self):
        data, message = parse_body(httpx.Response(400, json={"message": "Bad coupon"}))
        assert data == {"message": "Bad coupon"}
        assert message == "Bad coupon"

    def test_json_in_text(self):
        response = httpx.Response(500, text='{"error": "boom"}', headers={"content-type": "text/plain"})
        assert parse_body(response) == ({"error": "boom"}, "boom")

    def test_plain_text(self):
        response = httpx.Response(502, text="Bad Gateway", headers={"content-type": "text/html"})
        assert parse_body(response) == ("Bad Gateway", "Bad Gateway")

    def test_empty(self):
        assert parse_body(httpx.Response(204)) == (None, "")

    def test_broken_json(self):
        response = httpx.Response(200, content=b"{nope", headers={"content-type": "application/json"})
        assert parse_body(response) == (None, "")


@pytest.mark.parametrize(
    "status,optional,kind",
    [
        (None, False, ApiErrorKind.TRANSPORT),
        (401, False, ApiErrorKind.UNAUTHORIZED),
        (403, True, ApiErrorKind.UNAUTHORIZED),
        (404, False, ApiErrorKind.NOT_FOUND),
        (410, False, ApiErrorKind.NOT_FOUND),
        (404, True, ApiErrorKind.UNSUPPORTED),
        (501, True, ApiErrorKind.UNSUPPORTED),
        (409, False, ApiErrorKind.CONFLICT),
        (422, False, ApiErrorKind.CONFLICT),
        (500, False, ApiErrorKind.SERVER),
    ],
)
def test_classify_status(status, optional, kind):
    assert classify_status(status, optional=optional) is kind


class TestStoreApi:
    async def test_calls_are_lazy(self, api, backend):
        call = api.fetch_store_config()
        assert backend.requests == []
        await call
        assert len(backend.requests) == 1

    async def test_success_returns_decoded_body(self, api, backend):
        backend.on("GET", "/api/store/config", {"vatRate": 25})
        assert (await api.fetch_store_config()).unwrap() == {"vatRate": 25}

    async def test_backend_message(self, api, backend):
        backend.on("POST", "/api/store/orders/o1/cancel", reply(409, {"message": "Already shipped"}))

        error = (await api.cancel_order("o1")).unwrap_err()

        assert error.message == "Already shipped"
        assert error.status == 409
        assert error.kind is ApiErrorKind.CONFLICT
        assert error.payload == {"message": "Already shipped"}

    async def test_fallback_message(self, api, backend):
        backend.on("GET", "/api/store/orders/my", reply(503))
        error = (await api.list_my_orders()).unwrap_err()
        assert error.message == "Failed to load orders (503)"

    async def test_correlation_id(self, api, backend):
        backend.on("GET", "/api/store/orders/o1", reply(500, {"message": "x"}, headers={"X-Request-Id": "req-42"}))
        error = (await api.fetch_order("o1")).unwrap_err()
        assert error.correlation_id == "req-42"

    async def test_network_failure(self, api, backend):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend.on("GET", "/api/store/config", refuse)

        result = await api.fetch_store_config()

        assert isinstance(result, Error)
        assert result.unwrap_err().kind is ApiErrorKind.TRANSPORT

    async def test_cart_headers(self, api, backend):
        backend.on("GET", "/api/store/cart/c 1", {"cart": {}})
        await api.fetch_cart("c 1", "s1")
        [request] = backend.requests
        assert request.url.raw_path == b"/api/store/cart/c%201"
        assert request.headers["X-Cart-Id"] == "c 1"
        assert request.headers["X-Session-Id"] == "s1"

    async def test_missing_identifier_raises_immediately(self, api):
        with pytest.raises(ValueError, match="Cart ID is required"):
            api.fetch_cart("")
        with pytest.raises(ValueError, match="Status is required"):
            api.update_admin_order_status("o1", "")

    async def test_admin_note_is_optional(self, api, backend):
        await api.update_admin_order_status("o1", "PREPARING")
        assert json.loads(backend.requests[0].content) == {"status": "PREPARING"}


class TestAuth:
    async def test_bearer_header(self, api, auth, backend):
        auth.init("tok_1")
        await api.list_my_orders()
        assert backend.requests[0].headers["Authorization"] == "Bearer tok_1"

    async def test_no_header_after_teardown(self, api, auth, backend):
        auth.init("tok_1")
        auth.teardown()
        await api.list_my_orders()
        assert "Authorization" not in backend.requests[0].headers

    async def test_unauthorized_callback(self, backend, config):
        signed_out = []
        auth = AuthSession(on_unauthorized=lambda: signed_out.append(True))
        async with httpx.AsyncClient(transport=httpx.MockTransport(backend.handle)) as client:
            api = StoreApi(HttpxTransport(client), config, auth)
            backend.on("GET", "/api/store/orders/my", reply(401, {"message": "Expired"}))

            error = (await api.list_my_orders()).unwrap_err()

        assert error.kind is ApiErrorKind.UNAUTHORIZED
        assert signed_out == [True]


class TestOptionalFeatures:
    @pytest.mark.parametrize("status", [404, 405, 501])
    async def test_unsupported(self, api, backend, status):
        backend.on("PATCH", "/api/me", reply(status))
        error = (await api.update_profile({"name": "Ada"})).unwrap_err()
        assert error.is_unsupported

    async def test_required_404_is_not_unsupported(self, api):
        error = (await api.fetch_order("missing")).unwrap_err()
        assert error.kind is ApiErrorKind.NOT_FOUND
        assert error.is_session_gone

    @pytest.mark.parametrize("status", [404, 501])
    async def test_address_book_unsupported(self, api, backend, status):
        backend.on("GET", "/api/me/addresses", reply(status))
        error = (await api.list_addresses()).unwrap_err()
        assert error.is_unsupported

    async def test_address_book(self, api, backend):
        backend.on("GET", "/api/me/addresses", {"addresses": [{"city": "Lund"}]})
        assert (await api.list_addresses()).unwrap() == {"addresses": [{"city": "Lund"}]}


async def test_transport_from_config():
    transport = HttpxTransport.from_config(StoreConfig().with_timeout(seconds=2.5))
    assert transport.timeout == httpx.Timeout(2.5)
    await transport.aclose()

