"""
Storefront Engine — Cart Manager

Owns the cart entries of one Store and broadcasts every new sequence to its
observers. add/remove go through the Store as actions, so the cart slice and
what observers see can never disagree.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

from storefront.engine import actions as A
from storefront.engine.selectors import cart_total
from storefront.engine.store import Store
from storefront.engine.types import AppState, CartEntry
from storefront.models import Product

CartObserver = Callable[[tuple[CartEntry, ...]], None]


class CartManager:
    """
    Add/remove cart entries and publish the resulting sequence.

    Observers are called synchronously, once per change, with the complete
    new tuple of entries; they never see a partial append or removal. A
    cart cleared by a successful order placement is published the same way.
    """

    def __init__(self, store: Store) -> None:
        self._store = store
        self._observers: list[CartObserver] = []
        self._items = store.state.cart.items
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_state)

    @property
    def items(self) -> tuple[CartEntry, ...]:
        return self._items

    def add(self, product: Product) -> None:
        """Append an entry for `product`, even if the product is already in the cart."""
        self._store.dispatch(A.cart_item_added(product))

    def remove(self, product_id: int) -> None:
        """Remove every entry for `product_id`."""
        self._store.dispatch(A.cart_item_removed(product_id))

    def total(self) -> Decimal:
        return cart_total(self._items)

    def count(self, product_id: int | None = None) -> int:
        if product_id is None:
            return len(self._items)
        return sum(1 for e in self._items if e.product.id == product_id)

    def subscribe(self, observer: CartObserver) -> Callable[[], None]:
        """Register an observer. Returns a function that removes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def close(self) -> None:
        """Detach from the store and drop all observers."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._observers.clear()

    def _on_state(self, state: AppState) -> None:
        items = state.cart.items
        if items is self._items:
            return
        self._items = items
        for observer in list(self._observers):
            observer(items)

