"""Store Service models package."""

from services.store_service.models.catalog import Addon, Category, Review
from services.store_service.models.commerce import Order, OrderItem
from services.store_service.models.enums import (
    ORDER_STATUS_TRANSITIONS,
    OrderStatus,
    PaymentStatus,
    can_transition,
)

__all__ = [
    "Addon",
    "Category",
    "ORDER_STATUS_TRANSITIONS",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Review",
    "can_transition",
]
