"""
Storefront Engine — Shared Types

Immutable data classes for the state tree. Reducers build new instances with
dataclasses.replace(); nothing in here is ever mutated after construction,
which is what lets selectors and subscribers compare slices by reference.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Generic, TypeVar

from storefront.models import Order, Product

T = TypeVar("T")

_by_id = attrgetter("id")


# ---------------------------------------------------------------------------
# Action
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Action:
    """
    A tagged, immutable description of an intended state transition.
    Reducers read `type` and `payload`; nothing else.
    """

    type: str
    payload: Any = None


# ---------------------------------------------------------------------------
# Entity collection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntityCollection(Generic[T]):
    """
    Normalized records keyed by identifier, listed in insertion order.

    `ids` carries the order, `entities` the lookup. Operations return a new
    collection and leave this one untouched.
    """

    ids: tuple[Hashable, ...] = ()
    entities: dict[Hashable, T] = field(default_factory=dict)

    @classmethod
    def from_records(
        cls,
        records: Iterable[T],
        key: Callable[[T], Hashable] = _by_id,
    ) -> EntityCollection[T]:
        """Build a collection. A repeated id keeps its first position and last record."""
        ids: list[Hashable] = []
        entities: dict[Hashable, T] = {}
        for record in records:
            k = key(record)
            if k not in entities:
                ids.append(k)
            entities[k] = record
        return cls(ids=tuple(ids), entities=entities)

    def get(self, record_id: Hashable) -> T | None:
        return self.entities.get(record_id)

    def all(self) -> tuple[T, ...]:
        return tuple(self.entities[i] for i in self.ids)

    def with_record(
        self,
        record: T,
        key: Callable[[T], Hashable] = _by_id,
    ) -> EntityCollection[T]:
        """Append a record, or replace it in place if its id is already present."""
        k = key(record)
        entities = {**self.entities, k: record}
        ids = self.ids if k in self.entities else (*self.ids, k)
        return EntityCollection(ids=ids, entities=entities)

    def with_updated(
        self,
        record_id: Hashable,
        update: Callable[[T], T],
    ) -> EntityCollection[T]:
        """Replace one record with update(record). Unknown ids return self."""
        current = self.entities.get(record_id)
        if current is None:
            return self
        updated = update(current)
        if updated is current:
            return self
        return EntityCollection(ids=self.ids, entities={**self.entities, record_id: updated})

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.entities


# ---------------------------------------------------------------------------
# Slices
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CartEntry:
    """A cart line. Quantity is implicit: the same product may appear many times."""

    product: Product


@dataclass(frozen=True)
class CatalogState:
    products: EntityCollection[Product] = field(default_factory=EntityCollection)
    # Declared but never set by any transition; see load_started.
    loading: bool = False
    error: str | None = None
    selected: Product | None = None


@dataclass(frozen=True)
class CartState:
    items: tuple[CartEntry, ...] = ()


@dataclass(frozen=True)
class OrdersState:
    history: EntityCollection[Order] = field(default_factory=EntityCollection)
    selected: Order | None = None
    error: str | None = None
    placing: int = 0  # placement attempts currently submitting


@dataclass(frozen=True)
class SessionState:
    authenticated: bool = False
    error: str | None = None


@dataclass(frozen=True)
class AppState:
    """The whole state tree. Owned by exactly one Store."""

    catalog: CatalogState = field(default_factory=CatalogState)
    cart: CartState = field(default_factory=CartState)
    orders: OrdersState = field(default_factory=OrdersState)
    session: SessionState = field(default_factory=SessionState)
