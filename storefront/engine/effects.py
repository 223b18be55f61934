"""
Storefront Engine — Effects

The only part of the engine that talks to the outside world.

An Effect watches the action stream for one trigger type. For every matching
action it performs exactly one external call in its own asyncio task and
dispatches the success action, or the failure action carrying a description
of what went wrong.

Policy:
  - results are always dispatched from the task, never from the call stack
    of the triggering dispatch
  - no cancellation and no de-duplication: concurrent triggers run side by
    side and whichever call completes last determines the final state
  - no retries; a failure is recorded in state and the store stays usable
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from storefront.engine import actions as A
from storefront.engine.store import Store
from storefront.engine.types import Action, AppState
from storefront.models import LoginRequest, OrderDraft, RegisterRequest
from storefront.services.errors import ShopApiError
from storefront.services.shop_api import ShopApi
from storefront.services.token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Effect:
    """
    trigger:  action type that starts the effect
    run:      coroutine (action, state at trigger time) → success action
    on_error: builds the failure action from an error description
    """

    trigger: str
    run: Callable[[Action, AppState], Awaitable[Action]]
    on_error: Callable[[str], Action]
    name: str = ""


def describe_error(exc: BaseException) -> str:
    """Human-readable description carried by failure actions."""
    if isinstance(exc, ShopApiError):
        return exc.message
    if isinstance(exc, httpx.TimeoutException):
        return "Request timed out"
    if isinstance(exc, httpx.HTTPError):
        return f"Network error: {exc}" if str(exc) else f"Network error: {type(exc).__name__}"
    if isinstance(exc, ValidationError):
        return f"Invalid data: {exc.error_count()} validation error(s)"
    return str(exc) or type(exc).__name__


class EffectsRunner:
    """
    Connects a set of effects to one Store.

    start() must be called from inside a running event loop; tasks are
    created on that loop.
    """

    def __init__(self, store: Store, effects: Iterable[Effect] = ()) -> None:
        self._store = store
        self._effects: dict[str, list[Effect]] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._detach: Callable[[], None] | None = None
        for effect in effects:
            self.register(effect)

    def register(self, effect: Effect) -> None:
        self._effects.setdefault(effect.trigger, []).append(effect)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def start(self) -> None:
        if self._detach is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._detach = self._store.add_action_listener(self._on_action)

    def _on_action(self, action: Action, state: AppState) -> None:
        for effect in self._effects.get(action.type, ()):
            if self._loop is None:
                raise RuntimeError("EffectsRunner.start() was not called")
            task = self._loop.create_task(self._run(effect, action, state))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, effect: Effect, action: Action, state: AppState) -> None:
        label = effect.name or effect.trigger
        try:
            result = await effect.run(action, state)
        except (ShopApiError, httpx.HTTPError, ValidationError) as e:
            # Only the summary is logged: validation errors echo the rejected input.
            description = describe_error(e)
            logger.warning("Effect %s failed: %s", label, description)
            result = effect.on_error(description)
        except Exception as e:
            logger.exception("Effect %s raised unexpectedly", label)
            result = effect.on_error(describe_error(e))
        else:
            logger.info("Effect %s completed: %s", label, result.type)

        try:
            self._store.dispatch(result)
        except Exception:
            logger.exception("Listener failed while dispatching %s from effect %s", result.type, label)

    async def drain(self) -> None:
        """Wait until no effect task is in flight, including ones spawned meanwhile."""
        while self._tasks:
            results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                    logger.error("Effect task ended with an error", exc_info=result)

    async def stop(self) -> None:
        """Stop reacting to new actions and let in-flight calls finish."""
        if self._detach is not None:
            self._detach()
            self._detach = None
        await self.drain()


# ---------------------------------------------------------------------------
# Built-in effects
# ---------------------------------------------------------------------------


def catalog_effects(api: ShopApi) -> list[Effect]:
    async def fetch_products(action: Action, state: AppState) -> Action:
        return A.load_succeeded(await api.list_products())

    async def fetch_product(action: Action, state: AppState) -> Action:
        return A.product_loaded(await api.get_product(action.payload))

    return [
        Effect(A.LOAD_PRODUCTS, fetch_products, A.load_failed, name="list_products"),
        Effect(A.LOAD_PRODUCT, fetch_product, A.product_load_failed, name="get_product"),
    ]


def order_effects(api: ShopApi) -> list[Effect]:
    async def fetch_orders(action: Action, state: AppState) -> Action:
        return A.orders_loaded(await api.list_orders())

    async def fetch_order(action: Action, state: AppState) -> Action:
        return A.order_loaded(await api.get_order(action.payload))

    async def submit_order(action: Action, state: AppState) -> Action:
        # `state` was captured when the trigger was reduced, so later cart
        # changes cannot leak into this request.
        snapshot = tuple(state.cart.items)
        if not snapshot:
            return A.order_place_failed("Cannot place an order with an empty cart")
        draft = OrderDraft.from_cart(snapshot)
        return A.order_placed(await api.place_order(draft))

    return [
        Effect(A.LOAD_ORDERS, fetch_orders, A.orders_load_failed, name="list_orders"),
        Effect(A.LOAD_ORDER, fetch_order, A.order_load_failed, name="get_order"),
        Effect(A.PLACE_ORDER, submit_order, A.order_place_failed, name="place_order"),
    ]


def session_effects(api: ShopApi, token_store: TokenStore) -> list[Effect]:
    async def do_login(action: Action, state: AppState) -> Action:
        token = await api.login(LoginRequest(**action.payload))
        token_store.save(token)
        return A.login_succeeded()

    async def do_register(action: Action, state: AppState) -> Action:
        await api.register(RegisterRequest(**action.payload))
        return A.register_succeeded()

    async def do_logout(action: Action, state: AppState) -> Action:
        token_store.clear()
        return A.logged_out()

    return [
        Effect(A.LOGIN, do_login, A.login_failed, name="login"),
        Effect(A.REGISTER, do_register, A.register_failed, name="register"),
        Effect(A.LOGOUT, do_logout, lambda error: A.logged_out(), name="logout"),
    ]
