"""
Pydantic models for the storefront.

Records exchanged with the shop backend. No runtime imports from the engine or services.
"""

from storefront.models.auth import LoginRequest, RegisterRequest
from storefront.models.order import (
    ORDER_STATUS_TRANSITIONS,
    Order,
    OrderDraft,
    OrderItem,
    OrderStatus,
    can_transition,
)
from storefront.models.product import Product

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "ORDER_STATUS_TRANSITIONS",
    "Order",
    "OrderDraft",
    "OrderItem",
    "OrderStatus",
    "can_transition",
    "Product",
]
