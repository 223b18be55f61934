"""
Storefront Engine — Reducers

Pure functions: (slice, action) → slice

One reducer per slice, each driven by a handler table keyed on action type,
plus `reduce` which runs all of them over the whole tree.

Rules every handler follows:
  - never mutate the input (dataclasses.replace / new tuples only)
  - return the input itself when nothing changes, so consumers can compare
    by reference
  - never raise; unknown actions fall through to the unchanged slice
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any, TypeVar

from storefront.engine import actions as A
from storefront.engine.types import (
    Action,
    AppState,
    CartEntry,
    CartState,
    CatalogState,
    EntityCollection,
    OrdersState,
    SessionState,
)
from storefront.models import Order, can_transition

S = TypeVar("S")
Handler = Callable[[Any, Action], Any]


def empty_state() -> AppState:
    """The state tree before any action has been dispatched."""
    return AppState()


def _set(state: S, **changes: Any) -> S:
    """dataclasses.replace that returns `state` itself when every value is already in place."""
    if all(getattr(state, name) is value for name, value in changes.items()):
        return state
    return replace(state, **changes)


def _run(handlers: dict[str, Handler], state: S, action: Action) -> S:
    handler = handlers.get(action.type)
    if handler is None:
        return state
    return handler(state, action)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _catalog_load_started(state: CatalogState, action: Action) -> CatalogState:
    # Clears the error only. `loading` is intentionally left as is.
    return _set(state, error=None)


def _catalog_load_succeeded(state: CatalogState, action: Action) -> CatalogState:
    products = EntityCollection.from_records(action.payload)
    if products == state.products:
        # Same records: keep the old collection so memoized views stay put.
        products = state.products
    return _set(state, products=products)


def _catalog_error(state: CatalogState, action: Action) -> CatalogState:
    return _set(state, error=action.payload)


def _catalog_product_loaded(state: CatalogState, action: Action) -> CatalogState:
    return _set(state, selected=action.payload)


_CATALOG_HANDLERS: dict[str, Handler] = {
    A.LOAD_STARTED: _catalog_load_started,
    A.LOAD_SUCCEEDED: _catalog_load_succeeded,
    A.LOAD_FAILED: _catalog_error,
    A.PRODUCT_LOADED: _catalog_product_loaded,
    A.PRODUCT_LOAD_FAILED: _catalog_error,
}


def catalog_reducer(state: CatalogState, action: Action) -> CatalogState:
    return _run(_CATALOG_HANDLERS, state, action)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


def _cart_item_added(state: CartState, action: Action) -> CartState:
    # Duplicates accumulate as separate entries; there is no quantity field.
    return CartState(items=(*state.items, CartEntry(product=action.payload)))


def _cart_item_removed(state: CartState, action: Action) -> CartState:
    # Removes every entry for the product, not just one.
    kept = tuple(e for e in state.items if e.product.id != action.payload)
    if len(kept) == len(state.items):
        return state
    return CartState(items=kept)


def _cart_cleared_by_placement(state: CartState, action: Action) -> CartState:
    if not state.items:
        return state
    return CartState()


_CART_HANDLERS: dict[str, Handler] = {
    A.CART_ITEM_ADDED: _cart_item_added,
    A.CART_ITEM_REMOVED: _cart_item_removed,
    A.ORDER_PLACED: _cart_cleared_by_placement,
}


def cart_reducer(state: CartState, action: Action) -> CartState:
    return _run(_CART_HANDLERS, state, action)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


def _orders_request_started(state: OrdersState, action: Action) -> OrdersState:
    return _set(state, error=None)


def _orders_loaded(state: OrdersState, action: Action) -> OrdersState:
    history = EntityCollection.from_records(action.payload)
    if history == state.history:
        history = state.history
    return _set(state, history=history)


def _orders_error(state: OrdersState, action: Action) -> OrdersState:
    return _set(state, error=action.payload)


def _order_loaded(state: OrdersState, action: Action) -> OrdersState:
    return _set(state, selected=action.payload)


def _order_selection_cleared(state: OrdersState, action: Action) -> OrdersState:
    return _set(state, selected=None)


def _place_order(state: OrdersState, action: Action) -> OrdersState:
    return replace(state, error=None, placing=state.placing + 1)


def _order_placed(state: OrdersState, action: Action) -> OrdersState:
    return replace(
        state,
        history=state.history.with_record(action.payload),
        placing=max(state.placing - 1, 0),
    )


def _order_place_failed(state: OrdersState, action: Action) -> OrdersState:
    return replace(state, error=action.payload, placing=max(state.placing - 1, 0))


def _status_handler(target: str) -> Handler:
    """Handler moving one order to `target`, only when the lifecycle allows it."""

    def handle(state: OrdersState, action: Action) -> OrdersState:
        order_id = action.payload
        current = state.history.get(order_id)
        if current is None and state.selected is not None and state.selected.id == order_id:
            current = state.selected
        if current is None or not can_transition(current.status, target):
            return state

        updated: Order = current.with_status(target)  # type: ignore[arg-type]
        history = state.history.with_updated(order_id, lambda _: updated)
        selected = state.selected
        if selected is not None and selected.id == order_id:
            selected = updated
        return _set(state, history=history, selected=selected)

    return handle


_ORDERS_HANDLERS: dict[str, Handler] = {
    A.LOAD_ORDERS: _orders_request_started,
    A.LOAD_ORDER: _orders_request_started,
    A.ORDERS_LOADED: _orders_loaded,
    A.ORDERS_LOAD_FAILED: _orders_error,
    A.ORDER_LOADED: _order_loaded,
    A.ORDER_LOAD_FAILED: _orders_error,
    A.ORDER_SELECTION_CLEARED: _order_selection_cleared,
    A.PLACE_ORDER: _place_order,
    A.ORDER_PLACED: _order_placed,
    A.ORDER_PLACE_FAILED: _order_place_failed,
    A.ORDER_COMPLETED: _status_handler("Completed"),
    A.ORDER_CANCELLED: _status_handler("Cancelled"),
}


def orders_reducer(state: OrdersState, action: Action) -> OrdersState:
    return _run(_ORDERS_HANDLERS, state, action)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def _session_request_started(state: SessionState, action: Action) -> SessionState:
    return _set(state, error=None)


def _session_authenticated(state: SessionState, action: Action) -> SessionState:
    return _set(state, authenticated=True, error=None)


def _session_logged_out(state: SessionState, action: Action) -> SessionState:
    return _set(state, authenticated=False)


def _session_error(state: SessionState, action: Action) -> SessionState:
    return _set(state, error=action.payload)


def _session_restored(state: SessionState, action: Action) -> SessionState:
    return _set(state, authenticated=bool(action.payload))


_SESSION_HANDLERS: dict[str, Handler] = {
    A.LOGIN: _session_request_started,
    A.REGISTER: _session_request_started,
    A.LOGIN_SUCCEEDED: _session_authenticated,
    A.LOGIN_FAILED: _session_error,
    A.REGISTER_FAILED: _session_error,
    A.LOGGED_OUT: _session_logged_out,
    A.SESSION_RESTORED: _session_restored,
}


def session_reducer(state: SessionState, action: Action) -> SessionState:
    return _run(_SESSION_HANDLERS, state, action)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

SLICE_REDUCERS: dict[str, Callable[[Any, Action], Any]] = {
    "catalog": catalog_reducer,
    "cart": cart_reducer,
    "orders": orders_reducer,
    "session": session_reducer,
}


def reduce(state: AppState, action: Action) -> AppState:
    """
    Apply one action to the whole tree.

    Every slice reducer sees every action. The root is rebuilt only if at
    least one slice changed reference.
    """
    changes = {name: reducer(getattr(state, name), action) for name, reducer in SLICE_REDUCERS.items()}
    return _set(state, **changes)


def replay(actions: list[Action], state: AppState | None = None) -> AppState:
    """Reduce a sequence of actions from `state` (or the empty tree)."""
    current = state if state is not None else empty_state()
    for action in actions:
        current = reduce(current, action)
    return current
