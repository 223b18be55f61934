"""
Shop backend contract.

The engine's effects talk to the outside world only through a ShopApi.
HttpShopApi is the production transport; MemoryShopApi serves tests and demos.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, datetime

from storefront.models import LoginRequest, Order, OrderDraft, Product, RegisterRequest
from storefront.services.errors import NotFound, ShopApiError


class ShopApi:
    """
    Abstract request/response contract of the shop backend.
    Every method performs exactly one external call.
    """

    async def list_products(self) -> list[Product]:
        raise NotImplementedError

    async def get_product(self, product_id: int) -> Product:
        """Fetch one product. Raises NotFound for an unknown id."""
        raise NotImplementedError

    async def login(self, request: LoginRequest) -> str:
        """Exchange credentials for an opaque session token."""
        raise NotImplementedError

    async def register(self, request: RegisterRequest) -> dict:
        """Create an account. Returns the backend's confirmation body."""
        raise NotImplementedError

    async def place_order(self, draft: OrderDraft) -> Order:
        """Create an order from a draft. The returned order is Pending."""
        raise NotImplementedError

    async def list_orders(self) -> list[Order]:
        raise NotImplementedError

    async def get_order(self, order_id: int) -> Order:
        """Fetch one order. Raises NotFound for an unknown id."""
        raise NotImplementedError


class MemoryShopApi(ShopApi):
    """
    In-memory backend for testing.

    `errors` maps an operation name ("list_products", "place_order", ...) to an
    exception raised by the next call of that operation. `calls` records every
    operation invoked, in order.
    """

    def __init__(
        self,
        products: list[Product] | None = None,
        user_id: int = 1,
        latency: float = 0.0,
    ) -> None:
        self.products: dict[int, Product] = {p.id: p for p in products or []}
        self.orders: dict[int, Order] = {}
        self.users: dict[str, RegisterRequest] = {}
        self.user_id = user_id
        self.latency = latency
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []
        self._next_order_id = 1

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        await asyncio.sleep(self.latency)
        error = self.errors.pop(operation, None)
        if error is not None:
            raise error

    async def list_products(self) -> list[Product]:
        await self._enter("list_products")
        return list(self.products.values())

    async def get_product(self, product_id: int) -> Product:
        await self._enter("get_product")
        product = self.products.get(product_id)
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        return product

    async def login(self, request: LoginRequest) -> str:
        await self._enter("login")
        user = self.users.get(request.email)
        if user is None or user.password != request.password:
            raise ShopApiError("Invalid email or password", status_code=401)
        return f"tok_{uuid.uuid4().hex}"

    async def register(self, request: RegisterRequest) -> dict:
        await self._enter("register")
        if request.email in self.users:
            raise ShopApiError("Email already registered", status_code=409)
        self.users[request.email] = request
        return {"message": "Registration successful"}

    async def place_order(self, draft: OrderDraft) -> Order:
        await self._enter("place_order")
        order = Order(
            id=self._next_order_id,
            user_id=self.user_id,
            items=draft.items,
            total_amount=draft.total_amount,
            order_date=datetime.now(UTC),
            status="Pending",
        )
        self._next_order_id += 1
        self.orders[order.id] = order
        return order

    async def list_orders(self) -> list[Order]:
        await self._enter("list_orders")
        return list(self.orders.values())

    async def get_order(self, order_id: int) -> Order:
        await self._enter("get_order")
        order = self.orders.get(order_id)
        if order is None:
            raise NotFound(f"Order {order_id} not found")
        return order
