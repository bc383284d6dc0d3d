"""
Auth session — explicit token context passed to StoreApi.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class AuthSession:
    """
    Bearer token holder with an init/teardown lifecycle.

    `on_unauthorized` is called on 401/403; what happens next (sign-out,
    redirect) is the caller's business.
    """

    def __init__(self, on_unauthorized: Callable[[], None] | None = None) -> None:
        self._token: str | None = None
        self._on_unauthorized = on_unauthorized

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def init(self, token: str | None) -> None:
        self._token = token or None

    def teardown(self) -> None:
        self._token = None

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}

    def unauthorized(self) -> None:
        logger.warning("Backend rejected credentials")
        if self._on_unauthorized is not None:
            self._on_unauthorized()


__all__ = ("AuthSession",)
