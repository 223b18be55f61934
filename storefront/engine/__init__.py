"""
Storefront Engine — the reactive state core.

Components:
  types      — Action, EntityCollection and the immutable state slices
  actions    — action type constants and factories
  reducer    — (slice, action) → slice  (pure)
  selectors  — memoized views over the state tree
  store      — the single mutation path (dispatch + subscriptions)
  effects    — async tasks bridging external calls into actions
  cart       — CartManager, the cart's add/remove + broadcast owner
  shop       — ShopEngine, wiring all of the above to one backend
"""

from storefront.engine.cart import CartManager
from storefront.engine.effects import (
    Effect,
    EffectsRunner,
    catalog_effects,
    order_effects,
    session_effects,
)
from storefront.engine.reducer import empty_state, reduce, replay
from storefront.engine.selectors import Selector, create_selector
from storefront.engine.shop import ShopEngine
from storefront.engine.store import ReentrantDispatchError, Store
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

__all__ = [
    "Action",
    "AppState",
    "CartEntry",
    "CartManager",
    "CartState",
    "CatalogState",
    "Effect",
    "EffectsRunner",
    "EntityCollection",
    "OrdersState",
    "ReentrantDispatchError",
    "Selector",
    "SessionState",
    "ShopEngine",
    "Store",
    "catalog_effects",
    "create_selector",
    "empty_state",
    "order_effects",
    "reduce",
    "replay",
    "session_effects",
]
