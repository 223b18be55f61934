"""
Order placement workflow tests.

Covers:
  - success: order total equals sum of item prices, cart cleared, order in history
  - failure: error recorded, cart equal to its pre-submission snapshot
  - the request is built from the cart as it was at trigger time
  - an empty cart fails without an external call
  - no automatic retry
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from storefront.engine import actions as A
from storefront.engine import selectors as S
from storefront.engine.effects import EffectsRunner, order_effects
from storefront.engine.tests.factories import make_product
from storefront.services.errors import ShopApiError


@pytest.fixture
def runner(store, api):
    r = EffectsRunner(store, order_effects(api))
    return r


class TestSuccess:
    @pytest.mark.asyncio
    async def test_total_and_cart_cleared(self, store, api, runner, p1, p2):
        runner.start()
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.cart_item_added(p2))

        store.dispatch(A.place_order())
        assert S.select_placement_status(store.state) == "submitting"
        await runner.drain()

        history = S.select_order_history(store.state)
        assert len(history) == 1
        order = history[0]
        assert order.total_amount == Decimal("15")
        assert order.status == "Pending"
        assert order.computed_total() == order.total_amount
        assert store.state.cart.items == ()
        assert S.select_placement_status(store.state) == "idle"

    @pytest.mark.asyncio
    async def test_duplicate_entries_become_quantity(self, store, api, runner, p1):
        runner.start()
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.place_order())
        await runner.drain()

        order = api.orders[1]
        assert [(i.product_id, i.quantity) for i in order.items] == [(1, 2)]
        assert order.total_amount == Decimal("20")

    @pytest.mark.asyncio
    async def test_request_uses_snapshot_taken_at_trigger(self, store, api, runner, p1, p2):
        runner.start()
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.place_order())
        # Cart changes while the request is pending.
        store.dispatch(A.cart_item_added(p2))
        await runner.drain()

        sent = api.orders[1]
        assert [i.product_id for i in sent.items] == [1]
        assert sent.total_amount == Decimal("10")

    @pytest.mark.asyncio
    async def test_price_change_does_not_touch_placed_order(self, store, api, runner, p1):
        runner.start()
        store.dispatch(A.load_succeeded([p1]))
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.place_order())
        await runner.drain()

        store.dispatch(A.load_succeeded([make_product(1, "99")]))
        order = S.select_order_history(store.state)[0]
        assert order.items[0].price == Decimal("10")
        assert order.total_amount == Decimal("10")


class TestFailure:
    @pytest.mark.asyncio
    async def test_cart_left_untouched(self, store, api, runner, p1, p2):
        runner.start()
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.cart_item_added(p2))
        before = store.state.cart.items
        api.errors["place_order"] = ShopApiError("Payment declined", status_code=402)

        store.dispatch(A.place_order())
        await runner.drain()

        assert store.state.cart.items == before
        assert store.state.orders.error == "Payment declined"
        assert len(store.state.orders.history) == 0
        assert S.select_placement_status(store.state) == "idle"

    @pytest.mark.asyncio
    async def test_no_automatic_retry(self, store, api, runner, p1):
        runner.start()
        store.dispatch(A.cart_item_added(p1))
        api.errors["place_order"] = ShopApiError("down")
        store.dispatch(A.place_order())
        await runner.drain()
        assert api.calls == ["place_order"]

        # An explicit new placement is a fresh attempt.
        store.dispatch(A.place_order())
        await runner.drain()
        assert api.calls == ["place_order", "place_order"]
        assert store.state.orders.error is None
        assert store.state.cart.items == ()

    @pytest.mark.asyncio
    async def test_empty_cart_fails_without_call(self, store, api, runner):
        runner.start()
        store.dispatch(A.place_order())
        await runner.drain()
        assert api.calls == []
        assert "empty cart" in store.state.orders.error


class TestHistoryEffects:
    @pytest.mark.asyncio
    async def test_load_orders_and_detail(self, store, api, runner, p1):
        runner.start()
        store.dispatch(A.cart_item_added(p1))
        store.dispatch(A.place_order())
        await runner.drain()

        store.dispatch(A.load_orders())
        store.dispatch(A.load_order(1))
        await runner.drain()
        assert store.state.orders.history.ids == (1,)
        assert store.state.orders.selected.id == 1

    @pytest.mark.asyncio
    async def test_missing_order(self, store, api, runner):
        runner.start()
        store.dispatch(A.load_order(42))
        await runner.drain()
        assert store.state.orders.error == "Order 42 not found"
        assert store.state.orders.selected is None
