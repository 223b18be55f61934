"""Order records, the draft sent on checkout, and the status lifecycle."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from storefront.engine.types import CartEntry

OrderStatus = Literal["Pending", "Completed", "Cancelled"]

# Pending is the only status an order can leave.
ORDER_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "Pending": frozenset({"Completed", "Cancelled"}),
    "Completed": frozenset(),
    "Cancelled": frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    """Return True if an order in `current` status may move to `target`."""
    return target in ORDER_STATUS_TRANSITIONS.get(current, frozenset())


_WIRE_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class OrderItem(BaseModel):
    """One line of an order. Name and price are copied at placement time."""

    model_config = _WIRE_CONFIG

    product_id: int
    product_name: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


def sum_items(items: Iterable[OrderItem]) -> Decimal:
    return sum((item.subtotal for item in items), Decimal("0"))


class Order(BaseModel):
    """A placed order as returned by the orders endpoints."""

    model_config = _WIRE_CONFIG

    id: int
    user_id: int | str
    items: tuple[OrderItem, ...] = ()
    total_amount: Decimal = Field(ge=0)
    order_date: datetime
    status: OrderStatus = "Pending"

    def computed_total(self) -> Decimal:
        return sum_items(self.items)

    def with_status(self, status: OrderStatus) -> Order:
        """Copy of this order in `status`. Raises ValueError on an illegal move."""
        if not can_transition(self.status, status):
            raise ValueError(f"Illegal order status transition {self.status} -> {status}")
        return self.model_copy(update={"status": status})


class OrderDraft(BaseModel):
    """What the client POSTs to create an order."""

    model_config = _WIRE_CONFIG

    items: tuple[OrderItem, ...] = Field(min_length=1)
    total_amount: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def _total_matches_items(self) -> OrderDraft:
        expected = sum_items(self.items)
        if self.total_amount != expected:
            raise ValueError(f"totalAmount {self.total_amount} does not match item sum {expected}")
        return self

    @classmethod
    def from_cart(cls, entries: Iterable[CartEntry]) -> OrderDraft:
        """
        Build a draft from a cart snapshot.

        Repeated entries for the same product are folded into one item with a
        quantity, in order of first appearance. Prices are taken from the
        products as they are right now.
        """
        quantities: dict[int, int] = {}
        products = {}
        for entry in entries:
            pid = entry.product.id
            if pid not in quantities:
                quantities[pid] = 0
                products[pid] = entry.product
            quantities[pid] += 1

        items = tuple(
            OrderItem(
                product_id=pid,
                product_name=products[pid].name,
                quantity=qty,
                price=products[pid].price,
            )
            for pid, qty in quantities.items()
        )
        return cls(items=items, total_amount=sum_items(items))
