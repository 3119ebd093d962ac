from .order import (
    OrderItemSerializer,
    OrderSerializer,
    PaymentSerializer,
)
from .order_input import (
    AddItemsInputSerializer,
    CreateOrderInputSerializer,
    ItemStatusInputSerializer,
    OrderItemInputSerializer,
    SplitPaymentInputSerializer,
    StatusInputSerializer,
)

__all__ = [
    "AddItemsInputSerializer",
    "OrderSerializer",
    "OrderItemSerializer",
    "PaymentSerializer",
    "CreateOrderInputSerializer",
    "OrderItemInputSerializer",
    "SplitPaymentInputSerializer",
    "StatusInputSerializer",
    "ItemStatusInputSerializer",
]
