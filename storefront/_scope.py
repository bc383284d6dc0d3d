"""
View scope — remote calls owned by a view, cancelled when the view goes away.

    async with ViewScope() as scope:
        result = await scope.run(api.fetch_cart(cart_id, session_id))

A call cut short by dispose() resolves to Error(ApiError(kind=ABORTED)).
Callers treat that as "nobody is listening" and show nothing.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from types import TracebackType

from kungfu import Result, Error

from storefront.transport import ApiError, ApiErrorKind

logger = logging.getLogger(__name__)

ABORTED_MESSAGE = "Request aborted."


def aborted() -> ApiError:
    return ApiError(ABORTED_MESSAGE, kind=ApiErrorKind.ABORTED)


class ViewScope:
    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def run[T](self, call: Awaitable[Result[T, ApiError]]) -> Result[T, ApiError]:
        """
        Await call as a task owned by this scope.

        Cancelling the caller still propagates; only dispose() turns
        cancellation into an ABORTED error.
        """
        if self._disposed:
            return Error(aborted())

        async def _await() -> Result[T, ApiError]:
            return await call

        task = asyncio.create_task(_await())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return Error(aborted())

    def dispose(self) -> None:
        """Cancel everything in flight. Later run() calls abort immediately."""
        self._disposed = True
        if self._tasks:
            logger.debug("Disposing view scope with %d call(s) in flight", len(self._tasks))
        for task in tuple(self._tasks):
            task.cancel()

    async def __aenter__(self) -> ViewScope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()


__all__ = (
    "ABORTED_MESSAGE",
    "aborted",
    "ViewScope",
)
