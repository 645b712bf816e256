"""Exports for purchase order domain"""

from .models import Order, OrderCreateInput
from .service import OrderService

__all__ = [
    "Order",
    "OrderCreateInput",
    "OrderService",
]
