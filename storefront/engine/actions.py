"""
Storefront Engine — Action Construction

Action type constants and factory functions for every action the engine
understands. Callers and effects build actions here rather than by hand so
the type strings stay in one place.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from storefront.engine.types import Action
from storefront.models import Order, Product

# ---------------------------------------------------------------------------
# Type registry
# ---------------------------------------------------------------------------

LOAD_PRODUCTS = "[Catalog] Load Products"
LOAD_STARTED = "[Catalog] Load Started"
LOAD_SUCCEEDED = "[Catalog] Load Succeeded"
LOAD_FAILED = "[Catalog] Load Failed"
LOAD_PRODUCT = "[Catalog] Load Product"
PRODUCT_LOADED = "[Catalog] Product Loaded"
PRODUCT_LOAD_FAILED = "[Catalog] Product Load Failed"

CART_ITEM_ADDED = "[Cart] Item Added"
CART_ITEM_REMOVED = "[Cart] Item Removed"

LOAD_ORDERS = "[Orders] Load Orders"
ORDERS_LOADED = "[Orders] Orders Loaded"
ORDERS_LOAD_FAILED = "[Orders] Orders Load Failed"
LOAD_ORDER = "[Orders] Load Order"
ORDER_LOADED = "[Orders] Order Loaded"
ORDER_LOAD_FAILED = "[Orders] Order Load Failed"
ORDER_SELECTION_CLEARED = "[Orders] Selection Cleared"
PLACE_ORDER = "[Orders] Place Order"
ORDER_PLACED = "[Orders] Order Placed"
ORDER_PLACE_FAILED = "[Orders] Order Place Failed"
ORDER_COMPLETED = "[Orders] Order Completed"
ORDER_CANCELLED = "[Orders] Order Cancelled"

LOGIN = "[Session] Login"
LOGIN_SUCCEEDED = "[Session] Login Succeeded"
LOGIN_FAILED = "[Session] Login Failed"
REGISTER = "[Session] Register"
REGISTER_SUCCEEDED = "[Session] Register Succeeded"
REGISTER_FAILED = "[Session] Register Failed"
LOGOUT = "[Session] Logout"
LOGGED_OUT = "[Session] Logged Out"
SESSION_RESTORED = "[Session] Restored"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def load_products() -> Action:
    """Ask the catalog effect to fetch the product list."""
    return Action(LOAD_PRODUCTS)


def load_started() -> Action:
    return Action(LOAD_STARTED)


def load_succeeded(products: Iterable[Product]) -> Action:
    return Action(LOAD_SUCCEEDED, tuple(products))


def load_failed(error: str) -> Action:
    return Action(LOAD_FAILED, error)


def load_product(product_id: int) -> Action:
    return Action(LOAD_PRODUCT, product_id)


def product_loaded(product: Product) -> Action:
    return Action(PRODUCT_LOADED, product)


def product_load_failed(error: str) -> Action:
    return Action(PRODUCT_LOAD_FAILED, error)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


def cart_item_added(product: Product) -> Action:
    return Action(CART_ITEM_ADDED, product)


def cart_item_removed(product_id: int) -> Action:
    return Action(CART_ITEM_REMOVED, product_id)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


def load_orders() -> Action:
    return Action(LOAD_ORDERS)


def orders_loaded(orders: Iterable[Order]) -> Action:
    return Action(ORDERS_LOADED, tuple(orders))


def orders_load_failed(error: str) -> Action:
    return Action(ORDERS_LOAD_FAILED, error)


def load_order(order_id: int) -> Action:
    return Action(LOAD_ORDER, order_id)


def order_loaded(order: Order) -> Action:
    return Action(ORDER_LOADED, order)


def order_load_failed(error: str) -> Action:
    return Action(ORDER_LOAD_FAILED, error)


def order_selection_cleared() -> Action:
    return Action(ORDER_SELECTION_CLEARED)


def place_order() -> Action:
    """
    Start one placement attempt.

    The order effect snapshots the cart as it is when this action is reduced.
    """
    return Action(PLACE_ORDER)


def order_placed(order: Order) -> Action:
    return Action(ORDER_PLACED, order)


def order_place_failed(error: str) -> Action:
    return Action(ORDER_PLACE_FAILED, error)


def order_completed(order_id: int) -> Action:
    return Action(ORDER_COMPLETED, order_id)


def order_cancelled(order_id: int) -> Action:
    return Action(ORDER_CANCELLED, order_id)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def login(email: str, password: str) -> Action:
    return Action(LOGIN, {"email": email, "password": password})


def login_succeeded() -> Action:
    return Action(LOGIN_SUCCEEDED)


def login_failed(error: str) -> Action:
    return Action(LOGIN_FAILED, error)


def register(**fields: Any) -> Action:
    """Registration request; `fields` are the RegisterRequest fields."""
    return Action(REGISTER, dict(fields))


def register_succeeded() -> Action:
    return Action(REGISTER_SUCCEEDED)


def register_failed(error: str) -> Action:
    return Action(REGISTER_FAILED, error)


def logout() -> Action:
    return Action(LOGOUT)


def logged_out() -> Action:
    return Action(LOGGED_OUT)


def session_restored(authenticated: bool) -> Action:
    return Action(SESSION_RESTORED, authenticated)
