"""
Order board — the staff's order list and its status saves.

A save is refused locally when the policy says no, asks for confirmation
when payment is unsettled, and is otherwise applied optimistically and
rolled back to the exact previous order if the backend fails.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import replace

from kungfu import Result, Ok, Error

from storefront._notice import Notice, NoticeKind, NoticeSink, ignore_notice
from storefront._optimistic import OptimisticUpdate, run_optimistic
from storefront._types import Payload, as_mapping
from storefront.normalize import (
    Order,
    normalize_admin_order,
    normalize_admin_order_list,
    order_status_of,
)
from storefront.status._registry import normalize_status_key
from storefront.status._transition import (
    board_status_of,
    can_transition,
    is_read_only,
    requires_payment_confirmation,
)
from storefront.status._types import BoardError, BoardErrorKind, BoardStatus
from storefront.transport import ApiError, StoreApi

logger = logging.getLogger(__name__)

type Confirm = Callable[[Order], Awaitable[bool]]
"""Asks a human whether to mark an unpaid order delivered."""

READ_ONLY_MESSAGE = "Cancelled by customer (read-only)."
INVALID_TRANSITION_MESSAGE = "Invalid status transition for this order."
DECLINED_MESSAGE = "Status change was not confirmed."
SAVE_FAILED_MESSAGE = "Failed to update order status."


class OrderBoard:
    """
    Staff order board.

    Example:
        board = OrderBoard(api, on_notice=toast)
        await board.load()
        result = await board.save_status("ord_1", BoardStatus.PREPARING, note="Packed")
    """

    def __init__(
        self,
        api: StoreApi,
        orders: Iterable[Order] = (),
        on_notice: NoticeSink = ignore_notice,
    ) -> None:
        self._api = api
        self._orders = _index(orders)
        self._on_notice = on_notice

    @property
    def orders(self) -> tuple[Order, ...]:
        return tuple(self._orders.values())

    def get(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    async def load(self) -> Result[tuple[Order, ...], ApiError]:
        match await self._api.list_admin_orders():
            case Ok(payload):
                orders = normalize_admin_order_list(payload, currency=self._api.config.currency)
                self._orders = _index(orders)
                logger.info("Loaded %d orders", len(self._orders))
                return Ok(self.orders)
            case Error(e):
                logger.warning("Could not load orders: %s", e.message)
                return Error(e)

    def group_by_board_status(self, include_cancelled: bool = True) -> dict[BoardStatus, list[Order]]:
        """Kanban columns in board order."""
        columns: dict[BoardStatus, list[Order]] = {status: [] for status in BoardStatus}
        for order in self._orders.values():
            columns[board_status_of(order.status)].append(order)
        if not include_cancelled:
            del columns[BoardStatus.CANCELLED]
        return columns

    # ═══════════════════════════════════════════════════════════════════════════
    # Status Save
    # ═══════════════════════════════════════════════════════════════════════════

    async def save_status(
        self,
        order_id: str,
        target: BoardStatus | str,
        note: str | None = None,
        confirm: Confirm | None = None,
    ) -> Result[Order, BoardError]:
        """
        Move an order to a board status.

        Refusals happen before any network call. A failed save leaves the
        order exactly as it was and emits an error notice.
        """
        order = self._orders.get(order_id)
        if order is None:
            raise ValueError(f"Unknown order: {order_id!r}")

        if is_read_only(order):
            return self._refuse(BoardErrorKind.READ_ONLY, READ_ONLY_MESSAGE)
        if not can_transition(order.status, target, order):
            return self._refuse(BoardErrorKind.INVALID_TRANSITION, INVALID_TRANSITION_MESSAGE)
        if requires_payment_confirmation(order, target):
            approved = confirm is not None and await confirm(order)
            if not approved:
                return Error(BoardError(BoardErrorKind.CONFIRMATION_DECLINED, DECLINED_MESSAGE))

        status = target.value if isinstance(target, BoardStatus) else normalize_status_key(target)
        pending = replace(
            order,
            status=status,
            internal_notes=note if note is not None else order.internal_notes,
        )
        update = OptimisticUpdate(previous=order, pending=pending)
        action = self._api.update_admin_order_status(order.id, status, note)

        match await run_optimistic(update, self._put, action, _settle):
            case Ok(saved):
                logger.info("Order %s moved to %s", order.id, saved.status)
                self._notify(NoticeKind.SUCCESS, "Order status updated.")
                return Ok(saved)
            case Error(e):
                logger.warning("Rolled back order %s status save: %s", order.id, e.message)
                if not e.is_aborted:
                    self._notify(NoticeKind.ERROR, e.message or SAVE_FAILED_MESSAGE)
                return Error(BoardError(BoardErrorKind.REMOTE, e.message or SAVE_FAILED_MESSAGE, e))

    def _put(self, order: Order) -> None:
        self._orders[order.id] = order

    def _refuse(self, kind: BoardErrorKind, message: str) -> Result[Order, BoardError]:
        self._notify(NoticeKind.ERROR, message)
        return Error(BoardError(kind, message))

    def _notify(self, kind: NoticeKind, message: str) -> None:
        self._on_notice(Notice(kind, message))


def _index(orders: Iterable[Order]) -> dict[str, Order]:
    indexed: dict[str, Order] = {}
    for order in orders:
        if not order.id:
            logger.warning("Skipping order with neither id nor order number")
            continue
        indexed[order.id] = order
    return indexed


def _settle(payload: object, pending: Order) -> Order:
    """Server's order over the pending one; fields the server omits keep pending values."""
    server: Payload = as_mapping(payload)
    inner = server.get("order")
    if isinstance(inner, Mapping):
        server = inner
    if not server:
        return pending

    merged = normalize_admin_order({**pending.raw, **server}, currency=pending.totals.currency)
    server_notes = normalize_admin_order(server).internal_notes
    return replace(
        merged,
        id=pending.id,
        status=order_status_of(server) or pending.status,
        internal_notes=server_notes if server_notes is not None else pending.internal_notes,
    )


__all__ = (
    "Confirm",
    "OrderBoard",
)
