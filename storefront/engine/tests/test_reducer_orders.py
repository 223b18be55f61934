"""
Orders reducer tests.

Covers:
  - history reload, detail selection and clearing
  - placement bookkeeping (placing counter, error, history append)
  - one-way status lifecycle: Pending → Completed | Cancelled only
"""

import pytest

from storefront.engine import actions as A
from storefront.engine.reducer import orders_reducer
from storefront.engine.types import Action, EntityCollection, OrdersState
from storefront.engine.tests.factories import make_order


def with_history(*orders, **kwargs):
    return OrdersState(history=EntityCollection.from_records(orders), **kwargs)


class TestHistory:
    def test_orders_loaded_replaces_history(self):
        state = with_history(make_order(1))
        result = orders_reducer(state, A.orders_loaded([make_order(2), make_order(3)]))
        assert result.history.ids == (2, 3)

    def test_equal_history_keeps_reference(self):
        state = with_history(make_order(1))
        assert orders_reducer(state, A.orders_loaded([make_order(1)])) is state

    def test_load_orders_clears_error(self):
        state = with_history(make_order(1), error="old")
        result = orders_reducer(state, A.load_orders())
        assert result.error is None
        assert result.history is state.history

    def test_orders_load_failed_sets_error(self):
        result = orders_reducer(OrdersState(), A.orders_load_failed("Request timed out"))
        assert result.error == "Request timed out"


class TestSelection:
    def test_order_loaded_sets_selected(self):
        order = make_order(7)
        result = orders_reducer(OrdersState(), A.order_loaded(order))
        assert result.selected is order

    def test_order_load_failed_sets_error_and_keeps_selected(self):
        order = make_order(7)
        state = OrdersState(selected=order)
        result = orders_reducer(state, A.order_load_failed("Order 8 not found"))
        assert result.error == "Order 8 not found"
        assert result.selected is order

    def test_selection_cleared(self):
        state = OrdersState(selected=make_order(7))
        assert orders_reducer(state, A.order_selection_cleared()).selected is None


class TestPlacement:
    def test_place_order_enters_submitting(self):
        state = OrdersState(error="previous failure")
        result = orders_reducer(state, A.place_order())
        assert result.placing == 1
        assert result.error is None

    def test_order_placed_appends_and_returns_to_idle(self):
        state = orders_reducer(with_history(make_order(1)), A.place_order())
        result = orders_reducer(state, A.order_placed(make_order(2)))
        assert result.history.ids == (1, 2)
        assert result.placing == 0

    def test_order_place_failed_records_error(self):
        state = orders_reducer(OrdersState(), A.place_order())
        result = orders_reducer(state, A.order_place_failed("Payment declined"))
        assert result.error == "Payment declined"
        assert result.placing == 0
        assert len(result.history) == 0

    def test_placing_never_goes_negative(self):
        result = orders_reducer(OrdersState(), A.order_place_failed("late"))
        assert result.placing == 0


class TestStatusLifecycle:
    @pytest.mark.parametrize(
        "action, expected",
        [(A.order_completed, "Completed"), (A.order_cancelled, "Cancelled")],
    )
    def test_pending_can_move_on(self, action, expected):
        state = with_history(make_order(1))
        result = orders_reducer(state, action(1))
        assert result.history.get(1).status == expected
        assert state.history.get(1).status == "Pending"

    @pytest.mark.parametrize("terminal", ["Completed", "Cancelled"])
    def test_terminal_status_is_final(self, terminal):
        state = with_history(make_order(1, status=terminal))
        assert orders_reducer(state, A.order_completed(1)) is state
        assert orders_reducer(state, A.order_cancelled(1)) is state

    def test_no_action_returns_an_order_to_pending(self):
        pending_actions = [
            name for name in dir(A) if name.isupper() and "PENDING" in name
        ]
        assert pending_actions == []

    def test_selected_order_follows_transition(self):
        order = make_order(1)
        state = with_history(order, selected=order)
        result = orders_reducer(state, A.order_cancelled(1))
        assert result.selected.status == "Cancelled"
        assert result.history.get(1) is result.selected

    def test_unknown_order_is_noop(self):
        state = with_history(make_order(1))
        assert orders_reducer(state, A.order_completed(99)) is state


def test_unknown_action_returns_same_reference():
    state = with_history(make_order(1))
    assert orders_reducer(state, Action("[Nope] Nope")) is state
