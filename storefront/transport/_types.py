"""
Transport types — the error taxonomy and the HTTP seam.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Protocol

import httpx

# ═══════════════════════════════════════════════════════════════════════════════
# Error Taxonomy
# ═══════════════════════════════════════════════════════════════════════════════


class ApiErrorKind(Enum):
    TRANSPORT = auto()  # network failure, no status
    ABORTED = auto()  # deliberate cancellation, never shown
    UNAUTHORIZED = auto()  # 401/403
    UNSUPPORTED = auto()  # 404/405/501 on optional features
    NOT_FOUND = auto()  # 404/410 on required resources
    CONFLICT = auto()  # 409/422, e.g. stock changed
    SERVER = auto()


UNAUTHORIZED_STATUSES = frozenset({401, 403})
UNSUPPORTED_STATUSES = frozenset({404, 405, 501})
NOT_FOUND_STATUSES = frozenset({404, 410})
CONFLICT_STATUSES = frozenset({409, 422})


def classify_status(status: int | None, *, optional: bool = False) -> ApiErrorKind:
    """Map an HTTP status to an error kind. `optional` marks optional features."""
    if status is None:
        return ApiErrorKind.TRANSPORT
    if status in UNAUTHORIZED_STATUSES:
        return ApiErrorKind.UNAUTHORIZED
    if optional and status in UNSUPPORTED_STATUSES:
        return ApiErrorKind.UNSUPPORTED
    if status in NOT_FOUND_STATUSES:
        return ApiErrorKind.NOT_FOUND
    if status in CONFLICT_STATUSES:
        return ApiErrorKind.CONFLICT
    return ApiErrorKind.SERVER


class ApiError(Exception):
    """
    A failed backend call.

    Raised by the transport, then carried as the Error value of every
    StoreApi call. `payload` is the decoded error body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ApiErrorKind | None = None,
        status: int | None = None,
        payload: Any = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.kind = kind if kind is not None else classify_status(status)
        self.payload = payload
        self.correlation_id = correlation_id

    @property
    def is_unsupported(self) -> bool:
        return self.kind is ApiErrorKind.UNSUPPORTED

    @property
    def is_aborted(self) -> bool:
        return self.kind is ApiErrorKind.ABORTED

    @property
    def is_session_gone(self) -> bool:
        """Cart/session no longer exists on the server."""
        return self.kind is ApiErrorKind.NOT_FOUND

    def as_kind(self, kind: ApiErrorKind) -> ApiError:
        return ApiError(
            self.message,
            kind=kind,
            status=self.status,
            payload=self.payload,
            correlation_id=self.correlation_id,
        )

    def __repr__(self) -> str:
        return f"ApiError({self.kind.name}, status={self.status}, message={self.message!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# Transport Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Transport(Protocol):
    """
    HTTP seam. The rest of the library never touches the network directly.

    request() raises ApiError(TRANSPORT) on network failure.
    parse_response() raises ApiError for non-2xx responses.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response: ...

    def parse_response(self, response: httpx.Response, fallback_message: str) -> Any: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ApiErrorKind",
    "UNAUTHORIZED_STATUSES",
    "UNSUPPORTED_STATUSES",
    "NOT_FOUND_STATUSES",
    "CONFLICT_STATUSES",
    "classify_status",
    "ApiError",
    "Transport",
)
