# orders/models/__init__.py

"""
ORDERS MODELS PACKAGE EXPORTS
"""

from .order import Order
from .order_item import OrderItem
from .order_sequence import OrderSequence
from .payment import Payment

__all__ = [
    "Order",
    "OrderItem",
    "OrderSequence",
    "Payment",
]
