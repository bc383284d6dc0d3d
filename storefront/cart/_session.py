"""
Cart session — the shopper's one cart, kept in step with the backend.

Flow:
    bootstrap()     restore the stored (cart_id, session_id) pair or create a cart
    add_item()      bootstraps on first use
    update/remove   one mutation per line at a time
    checkout()      never creates a cart mid-flow

Every successful response replaces the whole local cart. A failure leaves
the local cart untouched, emits an error notice and returns Error(CartError).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from kungfu import Result, Ok, Error

from storefront._notice import Notice, NoticeKind, NoticeSink, ignore_notice
from storefront._scope import ViewScope, aborted
from storefront._types import as_mapping
from storefront.cart._types import (
    CartError,
    CartErrorKind,
    CartIdentity,
    CheckoutResult,
    SessionState,
)
from storefront.normalize import (
    Cart,
    CartLineItem,
    extract_payment_url,
    first,
    normalize_cart,
    text,
)
from storefront.pricing import (
    PricingDisplay,
    PricingPreferences,
    TotalsBreakdown,
    display_price,
    normalize_vat_rate,
    resolve_totals_breakdown,
)
from storefront.storage import KeyValueStore
from storefront.transport import ApiCall, ApiError, StoreApi

logger = logging.getLogger(__name__)

STORAGE_KEY = "storefrontCartSession"

START_FAILED_MESSAGE = "Unable to start a cart session."
SESSION_NOT_READY_MESSAGE = "Cart session is not ready yet. Please try again."
CLOSED_MESSAGE = "This cart is closed. Start a new cart to continue."
BUSY_MESSAGE = "This item is already being updated."
ADDED_MESSAGE = "Added to cart"
STOCK_ADJUSTED_MESSAGE = "Quantity was adjusted based on current stock."
NO_ORDER_ID_MESSAGE = "Checkout did not return an order ID."

CHECKOUT_ORDER_ID = first(text("orderId"), text("order_id"), text("order", "id"), text("id"))


@dataclass(frozen=True, slots=True)
class _Expectation:
    """What a mutation asked for, checked against the server's cart."""

    reference: str
    quantity: int | None = None
    added: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# Display
# ═══════════════════════════════════════════════════════════════════════════════


def max_quantity(line: CartLineItem) -> int | None:
    """Upper bound for a quantity edit; None when stock is unknown."""
    if line.stock is None:
        return None
    return max(line.stock, 0)


def display_line_total(
    line: CartLineItem,
    preferences: PricingPreferences | PricingDisplay,
) -> Decimal | None:
    """Line total as the shopper wants to see it. The line's own VAT rate wins."""
    rate = normalize_vat_rate(line.vat_rate, preferences.vat_rate)
    return display_price(line.effective_line_total, rate, preferences.display_mode)


# ═══════════════════════════════════════════════════════════════════════════════
# CartSession
# ═══════════════════════════════════════════════════════════════════════════════


class CartSession:
    """
    The shopper's cart.

    Example:
        session = CartSession(api, store, on_notice=toast)
        await session.bootstrap()
        await session.add_item("var_1", 2)
        match await session.checkout({"email": "a@b.se", "paymentMode": "CARD"}):
            case Ok(result): redirect(result.payment_url)
            case Error(err): show(err.message)
    """

    def __init__(
        self,
        api: StoreApi,
        store: KeyValueStore,
        on_notice: NoticeSink = ignore_notice,
        scope: ViewScope | None = None,
    ) -> None:
        self._api = api
        self._store = store
        self._on_notice = on_notice
        self._scope = scope if scope is not None else ViewScope()
        self._state = SessionState.UNINITIALIZED
        self._cart: Cart | None = None
        self._identity: CartIdentity | None = None
        self._bootstrap_task: asyncio.Task[Result[Cart, CartError]] | None = None
        self._pending: set[str] = set()
        # Bumped by start_new_cart() and teardown(); older responses are dropped.
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def cart(self) -> Cart | None:
        return self._cart

    @property
    def identity(self) -> CartIdentity | None:
        return self._identity

    @property
    def is_open(self) -> bool:
        return self._cart is not None and self._cart.is_open

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    # ═══════════════════════════════════════════════════════════════════════════
    # Lifecycle
    # ═══════════════════════════════════════════════════════════════════════════

    async def bootstrap(self) -> Result[Cart, CartError]:
        """
        Restore or create the cart. Concurrent callers share one attempt.

        A stored pair whose cart cannot be fetched is cleared and replaced
        by a fresh cart.
        """
        task = self._bootstrap_task
        if task is None:
            self._state = SessionState.BOOTSTRAPPING
            task = self._bootstrap_task = asyncio.create_task(self._bootstrap())
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            # The shared attempt was cancelled by teardown() or start_new_cart().
            error = aborted()
            return Error(CartError(CartErrorKind.ABORTED, error.message, error))

    async def _bootstrap(self) -> Result[Cart, CartError]:
        task = asyncio.current_task()
        generation = self._generation
        try:
            result = await self._restore_or_create()
        finally:
            if self._bootstrap_task is task:
                self._bootstrap_task = None
        if generation == self._generation:
            match result:
                case Ok(_):
                    self._state = SessionState.READY
                case Error(_):
                    self._state = SessionState.UNINITIALIZED
        return result

    async def _restore_or_create(self) -> Result[Cart, CartError]:
        identity = await self._restore_identity()
        if identity is not None:
            match await self._run(self._api.fetch_cart(identity.cart_id, identity.session_id)):
                case Ok(payload):
                    cart = await self._apply(payload)
                    if cart is not None:
                        logger.info("Restored cart %s", cart.cart_id)
                        return Ok(cart)
                    logger.warning("Cart %s came back empty, starting over", identity.cart_id)
                case Error(e):
                    if e.is_aborted:
                        return Error(CartError(CartErrorKind.ABORTED, e.message, e))
                    logger.warning("Could not restore cart %s: %s", identity.cart_id, e.message)
            await self._forget_identity()
        return await self._create()

    async def _create(self) -> Result[Cart, CartError]:
        match await self._run(self._api.create_cart()):
            case Ok(payload):
                cart = await self._apply(payload)
                if cart is None or self._identity is None:
                    self._notify(NoticeKind.ERROR, START_FAILED_MESSAGE)
                    return Error(CartError(CartErrorKind.REMOTE, START_FAILED_MESSAGE))
                logger.info("Created cart %s", cart.cart_id)
                return Ok(cart)
            case Error(e):
                if e.is_aborted:
                    return Error(CartError(CartErrorKind.ABORTED, e.message, e))
                logger.warning("Could not create cart: %s", e.message)
                message = e.message or START_FAILED_MESSAGE
                self._notify(NoticeKind.ERROR, message)
                return Error(CartError(CartErrorKind.REMOTE, message, e))

    async def start_new_cart(self) -> Result[Cart, CartError]:
        """
        Drop the current pair and create a fresh cart (the offer for closed carts).

        Responses still in flight for the old cart are dropped.
        """
        self._supersede()
        generation = self._generation
        await self._forget_identity()
        self._state = SessionState.BOOTSTRAPPING
        result = await self._create()
        if generation == self._generation:
            self._state = SessionState.READY if isinstance(result, Ok) else SessionState.UNINITIALIZED
        return result

    async def refresh(self) -> Result[Cart, CartError]:
        """Re-fetch the current cart. Never creates one."""
        identity = self._identity
        if identity is None:
            return Error(CartError(CartErrorKind.SESSION_NOT_READY, SESSION_NOT_READY_MESSAGE))
        match await self._run(self._api.fetch_cart(identity.cart_id, identity.session_id)):
            case Ok(payload):
                cart = await self._apply(payload)
                if cart is None:
                    return Error(CartError(CartErrorKind.REMOTE, "Unable to load cart."))
                return Ok(cart)
            case Error(e):
                return await self._fail(e, "Unable to load cart.")

    def teardown(self) -> None:
        """
        Forget the in-memory cart and identity (logout). The stored pair stays.

        A bootstrap in progress is cancelled and its callers get ABORTED.
        Responses that arrive later are dropped.
        """
        self._supersede()
        self._identity = None
        self._state = SessionState.UNINITIALIZED
        logger.info("Cart session torn down")

    def _supersede(self) -> None:
        self._generation += 1
        if self._bootstrap_task is not None:
            self._bootstrap_task.cancel()
            self._bootstrap_task = None
        self._cart = None
        self._pending.clear()

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_item(self, product_id: str, quantity: int = 1) -> Result[Cart, CartError]:
        """Add a product or variant. Bootstraps the session on first use."""
        if not product_id:
            raise ValueError("product_id is required")
        if self._state is not SessionState.READY:
            match await self.bootstrap():
                case Error(e):
                    return Error(e)
                case Ok(_):
                    pass

        refusal = self._refusal(product_id)
        if refusal is not None:
            return Error(refusal)

        line = self._cart.find_line(product_id) if self._cart else None
        expected = (line.quantity if line else 0) + quantity
        return await self._mutate(
            product_id,
            lambda identity: self._api.add_cart_item(identity.cart_id, identity.session_id, product_id, quantity),
            _Expectation(product_id, expected, added=True),
            "Could not add to cart.",
        )

    async def update_item_quantity(self, item_id: str, quantity: int) -> Result[Cart, CartError]:
        """
        Set a line's quantity.

        Zero or less removes the line. More than the known stock is clamped
        to the stock with a warning notice.
        """
        if not item_id:
            raise ValueError("item_id is required")
        refusal = self._refusal(item_id)
        if refusal is not None:
            return Error(refusal)
        if quantity <= 0:
            return await self.remove_item(item_id)

        line = self._cart.find_line(item_id) if self._cart else None
        bound = max_quantity(line) if line else None
        if bound is not None and quantity > bound:
            self._notify(NoticeKind.WARNING, f"Only {bound} in stock.")
            quantity = bound
            if quantity <= 0:
                return await self.remove_item(item_id)

        target = quantity
        return await self._mutate(
            item_id,
            lambda identity: self._api.update_cart_item(identity.cart_id, identity.session_id, item_id, target),
            _Expectation(item_id, target),
            "Unable to update quantity.",
        )

    async def remove_item(self, item_id: str) -> Result[Cart, CartError]:
        if not item_id:
            raise ValueError("item_id is required")
        refusal = self._refusal(item_id)
        if refusal is not None:
            return Error(refusal)
        return await self._mutate(
            item_id,
            lambda identity: self._api.remove_cart_item(identity.cart_id, identity.session_id, item_id),
            _Expectation(item_id),
            "Unable to remove item.",
        )

    def _refusal(self, key: str) -> CartError | None:
        """Local refusals; none of these reach the network."""
        if self._identity is None or self._cart is None:
            self._notify(NoticeKind.ERROR, SESSION_NOT_READY_MESSAGE)
            return CartError(CartErrorKind.SESSION_NOT_READY, SESSION_NOT_READY_MESSAGE)
        if not self._cart.is_open:
            self._notify(NoticeKind.WARNING, CLOSED_MESSAGE)
            return CartError(CartErrorKind.CLOSED, CLOSED_MESSAGE)
        if key in self._pending:
            return CartError(CartErrorKind.BUSY, BUSY_MESSAGE)
        return None

    async def _mutate(
        self,
        key: str,
        call: Callable[[CartIdentity], ApiCall],
        expectation: _Expectation,
        failure_message: str,
    ) -> Result[Cart, CartError]:
        # Marked before the first await, so a second caller sees BUSY.
        self._pending.add(key)
        generation = self._generation
        try:
            result = await self._run(call(self._identity))
        finally:
            if generation == self._generation:
                self._pending.discard(key)

        match result:
            case Ok(payload):
                cart = await self._apply(payload)
                if cart is None:
                    # Empty body (e.g. 204 on delete): ask for the cart instead.
                    return await self.refresh()
                self._reconcile(cart, expectation)
                return Ok(cart)
            case Error(e):
                return await self._fail(e, failure_message)

    def _reconcile(self, cart: Cart, expectation: _Expectation) -> None:
        if expectation.quantity is not None:
            line = cart.find_line(expectation.reference)
            if line is not None and line.quantity != expectation.quantity:
                logger.info(
                    "Line %s quantity adjusted by server: asked %d, got %d",
                    expectation.reference,
                    expectation.quantity,
                    line.quantity,
                )
                self._notify(NoticeKind.WARNING, STOCK_ADJUSTED_MESSAGE)
        if expectation.added:
            self._notify(NoticeKind.SUCCESS, ADDED_MESSAGE)

    # ═══════════════════════════════════════════════════════════════════════════
    # Checkout
    # ═══════════════════════════════════════════════════════════════════════════

    async def checkout(self, payload: Mapping[str, Any]) -> Result[CheckoutResult, CartError]:
        """
        Start checkout for the current cart.

        Errors are returned, not announced: the checkout form shows them.
        """
        identity = self._identity
        if identity is None:
            return Error(CartError(CartErrorKind.SESSION_NOT_READY, SESSION_NOT_READY_MESSAGE))
        if self._cart is not None and not self._cart.is_open:
            return Error(CartError(CartErrorKind.CLOSED, CLOSED_MESSAGE))

        call = self._api.checkout(identity.cart_id, identity.session_id, dict(payload))
        match await self._run(call):
            case Ok(response):
                data = as_mapping(response)
                if isinstance(data.get("cart"), Mapping):
                    await self._apply(data)
                order_id = CHECKOUT_ORDER_ID(data)
                if order_id is None:
                    logger.warning("Checkout for cart %s returned no order id", identity.cart_id)
                    return Error(CartError(CartErrorKind.NO_ORDER_ID, NO_ORDER_ID_MESSAGE))
                logger.info("Checkout of cart %s created order %s", identity.cart_id, order_id)
                return Ok(CheckoutResult(
                    order_id=order_id,
                    payment_url=extract_payment_url(data),
                    raw=data,
                ))
            case Error(e):
                return Error(await self._classify(e, "Checkout failed."))

    # ═══════════════════════════════════════════════════════════════════════════
    # Display
    # ═══════════════════════════════════════════════════════════════════════════

    def totals_breakdown(self) -> TotalsBreakdown:
        totals = self._cart.totals.as_payload() if self._cart else None
        return resolve_totals_breakdown(totals)

    def display_line_total(
        self,
        line: CartLineItem,
        preferences: PricingPreferences | PricingDisplay,
    ) -> Decimal | None:
        return display_line_total(line, preferences)

    # ═══════════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════════

    async def _run(self, call: ApiCall) -> Result[Any, ApiError]:
        """Run call in the view scope. A response for a superseded cart comes back ABORTED."""
        generation = self._generation
        result = await self._scope.run(call)
        if generation != self._generation:
            logger.debug("Dropping response for a superseded cart")
            return Error(aborted())
        return result

    async def _apply(self, payload: object) -> Cart | None:
        """Replace the local cart with the server's and persist the pair."""
        identity = self._identity
        cart = normalize_cart(
            payload,
            fallback_cart_id=identity.cart_id if identity else None,
            fallback_session_id=identity.session_id if identity else None,
            currency=self._api.config.currency,
        )
        if cart is None:
            return None
        self._cart = cart
        if cart.cart_id and cart.session_id:
            self._identity = CartIdentity(cart.cart_id, cart.session_id)
            await self._persist_identity(self._identity)
        return cart

    async def _fail(self, error: ApiError, message: str) -> Result[Cart, CartError]:
        cart_error = await self._classify(error, message)
        if not cart_error.is_aborted:
            self._notify(NoticeKind.ERROR, cart_error.message)
        return Error(cart_error)

    async def _classify(self, error: ApiError, message: str) -> CartError:
        if error.is_aborted:
            logger.debug("Cart call aborted")
            return CartError(CartErrorKind.ABORTED, error.message, error)
        if error.is_session_gone:
            logger.warning("Cart session is gone (%s), clearing stored pair", error.status)
            await self._forget_identity()
            self._state = SessionState.UNINITIALIZED
            return CartError(CartErrorKind.SESSION_GONE, error.message or message, error)
        return CartError(CartErrorKind.REMOTE, error.message or message, error)

    async def _restore_identity(self) -> CartIdentity | None:
        if self._identity is not None:
            return self._identity
        match await self._store.get(STORAGE_KEY):
            case Ok(raw):
                self._identity = CartIdentity.decode(raw)
            case Error(e):
                logger.warning("Could not read stored cart session: %s", e.message)
        return self._identity

    async def _persist_identity(self, identity: CartIdentity) -> None:
        match await self._store.set(STORAGE_KEY, identity.encode()):
            case Ok(_):
                pass
            case Error(e):
                logger.warning("Could not persist cart session: %s", e.message)

    async def _forget_identity(self) -> None:
        self._identity = None
        match await self._store.remove(STORAGE_KEY):
            case Ok(_):
                pass
            case Error(e):
                logger.warning("Could not clear stored cart session: %s", e.message)

    def _notify(self, kind: NoticeKind, message: str) -> None:
        self._on_notice(Notice(kind, message))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "STORAGE_KEY",
    "max_quantity",
    "display_line_total",
    "CartSession",
)
