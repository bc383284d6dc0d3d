"""
httpx transport — the default Transport implementation.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from storefront.config import StoreConfig
from storefront.transport._types import ApiError, ApiErrorKind

logger = logging.getLogger(__name__)

CORRELATION_HEADERS = (
    "x-correlation-id",
    "x-request-id",
    "x-amzn-trace-id",
    "x-trace-id",
    "traceparent",
)


def correlation_id_of(response: httpx.Response) -> str | None:
    for header in CORRELATION_HEADERS:
        value = response.headers.get(header)
        if value:
            return value
    return None


def parse_body(response: httpx.Response) -> tuple[Any, str]:
    """
    Decode a response body. Returns (data, message).

    JSON by content type; otherwise the text is tried as JSON once, and
    finally returned as is.
    """
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            data = response.json()
        except ValueError:
            return None, ""
        return data, _message_of(data)

    text = response.text
    if not text:
        return None, ""
    try:
        data = json.loads(text)
    except ValueError:
        return text, text
    return data, _message_of(data) or text


def _message_of(data: Any) -> str:
    if isinstance(data, Mapping):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return ""


class HttpxTransport:
    """
    Transport on httpx.AsyncClient.

    Example:
        async with httpx.AsyncClient(timeout=10.0) as client:
            transport = HttpxTransport(client)
            api = StoreApi(transport, config)
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 10.0) -> None:
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: StoreConfig) -> HttpxTransport:
        """Own client with the configured request timeout."""
        return cls(timeout=config.request_timeout)

    @property
    def timeout(self) -> httpx.Timeout:
        return self._client.timeout

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            return await self._client.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(str(e) or "Network request failed", kind=ApiErrorKind.TRANSPORT) from e

    def parse_response(self, response: httpx.Response, fallback_message: str) -> Any:
        data, message = parse_body(response)
        if response.is_success:
            return data
        raise ApiError(
            message or f"{fallback_message} ({response.status_code})",
            status=response.status_code,
            payload=data,
            correlation_id=correlation_id_of(response),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = (
    "CORRELATION_HEADERS",
    "correlation_id_of",
    "parse_body",
    "HttpxTransport",
)
