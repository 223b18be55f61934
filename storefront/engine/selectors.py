"""
Storefront Engine — Selectors

Memoized derivations from the state tree. A selector built with
`create_selector` remembers the results of its inputs from the previous
call; if every one of them is the very same object (`is`), the cached view is
returned as is, without running the projector and without allocating.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any, Generic, Literal, TypeVar

from storefront.engine.types import AppState, CartEntry, CatalogState, OrdersState
from storefront.models import Order, Product

V = TypeVar("V")

_UNSET: Any = object()


class Selector(Generic[V]):
    """A memoized view over the state tree. Call it with an AppState."""

    __slots__ = ("_inputs", "_projector", "_last_args", "_last_result", "recomputations")

    def __init__(self, inputs: tuple[Callable[[AppState], Any], ...], projector: Callable[..., V]) -> None:
        self._inputs = inputs
        self._projector = projector
        self._last_args: tuple[Any, ...] | None = None
        self._last_result: V = _UNSET
        self.recomputations = 0

    def __call__(self, state: AppState) -> V:
        args = tuple(select(state) for select in self._inputs)
        last = self._last_args
        if last is not None and len(last) == len(args) and all(a is b for a, b in zip(args, last)):
            return self._last_result
        result = self._projector(*args)
        self._last_args = args
        self._last_result = result
        self.recomputations += 1
        return result

    def reset(self) -> None:
        """Forget the cached view (tests)."""
        self._last_args = None
        self._last_result = _UNSET
        self.recomputations = 0


def create_selector(*inputs: Callable[[AppState], Any], projector: Callable[..., V]) -> Selector[V]:
    """
    Compose a selector from input selectors and a projector.

    The projector receives the input results positionally and runs again only
    when at least one input result changed by reference. Inputs may themselves
    be Selectors.
    """
    if not inputs:
        raise ValueError("create_selector needs at least one input selector")
    return Selector(inputs, projector)


def _identity(value: V) -> V:
    return value


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

select_catalog: Selector[CatalogState] = create_selector(lambda s: s.catalog, projector=_identity)

select_product_entities = create_selector(select_catalog, projector=lambda c: c.products)

select_products: Selector[tuple[Product, ...]] = create_selector(
    select_product_entities, projector=lambda products: products.all()
)

select_catalog_loading: Selector[bool] = create_selector(select_catalog, projector=lambda c: c.loading)

select_catalog_error: Selector[str | None] = create_selector(select_catalog, projector=lambda c: c.error)

select_selected_product: Selector[Product | None] = create_selector(
    select_catalog, projector=lambda c: c.selected
)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------

select_cart_items: Selector[tuple[CartEntry, ...]] = create_selector(
    lambda s: s.cart.items, projector=_identity
)

select_cart_count: Selector[int] = create_selector(select_cart_items, projector=len)


def cart_total(items: tuple[CartEntry, ...]) -> Decimal:
    return sum((entry.product.price for entry in items), Decimal("0"))


select_cart_total: Selector[Decimal] = create_selector(select_cart_items, projector=cart_total)


def _cart_lines(items: tuple[CartEntry, ...]) -> tuple[tuple[Product, int], ...]:
    """Group repeated entries into (product, quantity), first appearance first."""
    counts: dict[int, int] = {}
    products: dict[int, Product] = {}
    for entry in items:
        pid = entry.product.id
        products.setdefault(pid, entry.product)
        counts[pid] = counts.get(pid, 0) + 1
    return tuple((products[pid], qty) for pid, qty in counts.items())


select_cart_lines: Selector[tuple[tuple[Product, int], ...]] = create_selector(
    select_cart_items, projector=_cart_lines
)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

select_orders: Selector[OrdersState] = create_selector(lambda s: s.orders, projector=_identity)

select_order_history: Selector[tuple[Order, ...]] = create_selector(
    lambda s: s.orders.history, projector=lambda history: history.all()
)

select_selected_order: Selector[Order | None] = create_selector(select_orders, projector=lambda o: o.selected)

select_orders_error: Selector[str | None] = create_selector(select_orders, projector=lambda o: o.error)

PlacementStatus = Literal["idle", "submitting"]

select_placement_status: Selector[PlacementStatus] = create_selector(
    select_orders, projector=lambda o: "submitting" if o.placing > 0 else "idle"
)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

select_is_authenticated: Selector[bool] = create_selector(
    lambda s: s.session.authenticated, projector=bool
)

select_session_error: Selector[str | None] = create_selector(
    lambda s: s.session.error, projector=_identity
)
