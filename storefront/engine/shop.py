"""
Storefront Engine — ShopEngine

Wires one Store, its effects and its cart manager to a shop backend and a
token store. This is what an application creates once and hands to its
views; nothing here is a global.
"""

from __future__ import annotations

import logging
from typing import Any

from storefront.engine import actions as A
from storefront.engine.cart import CartManager
from storefront.engine.effects import (
    EffectsRunner,
    catalog_effects,
    order_effects,
    session_effects,
)
from storefront.engine.store import Store
from storefront.engine.types import AppState
from storefront.services.shop_api import ShopApi
from storefront.services.token_store import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)


class ShopEngine:
    """
    Facade over the engine for one shop session.

    Usage:
        engine = ShopEngine(HttpShopApi(token_store=tokens), tokens)
        engine.start()            # inside a running event loop
        engine.load_products()
        await engine.settle()
        engine.cart.add(product)
        engine.place_order()
        await engine.close()
    """

    def __init__(
        self,
        api: ShopApi,
        token_store: TokenStore | None = None,
        initial: AppState | None = None,
    ) -> None:
        self.api = api
        self.token_store = token_store or MemoryTokenStore()
        self.store = Store(initial)
        self.effects = EffectsRunner(
            self.store,
            [
                *catalog_effects(api),
                *order_effects(api),
                *session_effects(api, self.token_store),
            ],
        )
        self.cart = CartManager(self.store)

    @property
    def state(self) -> AppState:
        return self.store.state

    def start(self) -> None:
        """Restore the session flag from the token store and start the effects."""
        self.effects.start()
        authenticated = self.token_store.has_token()
        self.store.dispatch(A.session_restored(authenticated))
        logger.info("Shop engine started (authenticated=%s)", authenticated)

    async def settle(self) -> None:
        """Wait for every in-flight external call to finish and dispatch."""
        await self.effects.drain()

    async def close(self) -> None:
        try:
            await self.effects.stop()
        finally:
            self.cart.close()

    # -- commands --

    def load_products(self) -> None:
        self.store.dispatch(A.load_started())
        self.store.dispatch(A.load_products())

    def load_product(self, product_id: int) -> None:
        self.store.dispatch(A.load_product(product_id))

    def load_orders(self) -> None:
        self.store.dispatch(A.load_orders())

    def load_order(self, order_id: int) -> None:
        self.store.dispatch(A.load_order(order_id))

    def clear_selected_order(self) -> None:
        self.store.dispatch(A.order_selection_cleared())

    def place_order(self) -> None:
        self.store.dispatch(A.place_order())

    def login(self, email: str, password: str) -> None:
        self.store.dispatch(A.login(email, password))

    def register(self, **fields: Any) -> None:
        self.store.dispatch(A.register(**fields))

    def logout(self) -> None:
        self.store.dispatch(A.logout())
