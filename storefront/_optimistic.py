"""
Optimistic update — apply locally, confirm remotely, restore on failure.

A single-step saga: the compensation is restoring the previous snapshot.

    update = OptimisticUpdate(previous=order, pending=replace(order, status="SHIPPING"))
    result = await run_optimistic(update, board.put, api_call, settle=normalize_admin_order)

Whatever happens, the state ends as either the server's truth or the
exact previous snapshot, never the pending one.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from kungfu import Result, Ok, Error, LazyCoroResult


@dataclass(frozen=True, slots=True)
class OptimisticUpdate[S]:
    """The {previous, pending} pair of one optimistic change."""

    previous: S
    pending: S


async def run_optimistic[S, T, E](
    update: OptimisticUpdate[S],
    apply: Callable[[S], None],
    action: LazyCoroResult[T, E],
    settle: Callable[[T, S], S],
) -> Result[S, E]:
    """
    Apply `pending`, await `action`, then settle or roll back.

    settle(value, pending) builds the confirmed state from the response.
    Cancellation restores `previous` before propagating.
    """
    apply(update.pending)
    try:
        result = await action
    except asyncio.CancelledError:
        apply(update.previous)
        raise

    match result:
        case Ok(value):
            confirmed = settle(value, update.pending)
            apply(confirmed)
            return Ok(confirmed)
        case Error(e):
            apply(update.previous)
            return Error(e)


__all__ = (
    "OptimisticUpdate",
    "run_optimistic",
)
