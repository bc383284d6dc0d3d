"""
Transport — HTTP, auth context and the store endpoints.

    from storefront import transport as T

    api = T.StoreApi(T.HttpxTransport(), config, T.AuthSession(on_unauthorized=sign_out))
    result = await api.fetch_store_config()
"""

from __future__ import annotations

from storefront.transport._types import (
    ApiErrorKind,
    UNAUTHORIZED_STATUSES,
    UNSUPPORTED_STATUSES,
    NOT_FOUND_STATUSES,
    CONFLICT_STATUSES,
    classify_status,
    ApiError,
    Transport,
)
from storefront.transport._http import (
    CORRELATION_HEADERS,
    correlation_id_of,
    parse_body,
    HttpxTransport,
)
from storefront.transport._auth import AuthSession
from storefront.transport._api import ApiCall, cart_headers, StoreApi

__all__ = (
    "ApiErrorKind",
    "UNAUTHORIZED_STATUSES",
    "UNSUPPORTED_STATUSES",
    "NOT_FOUND_STATUSES",
    "CONFLICT_STATUSES",
    "classify_status",
    "ApiError",
    "Transport",
    "CORRELATION_HEADERS",
    "correlation_id_of",
    "parse_body",
    "HttpxTransport",
    "AuthSession",
    "ApiCall",
    "cart_headers",
    "StoreApi",
)
