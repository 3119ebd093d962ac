from .broadcast import (
    EVENT_ORDER_CREATED,
    EVENT_ORDER_UPDATED,
    broadcast_new_order,
    broadcast_order_update,
    schedule_order_broadcast,
)

__all__ = [
    "EVENT_ORDER_CREATED",
    "EVENT_ORDER_UPDATED",
    "broadcast_new_order",
    "broadcast_order_update",
    "schedule_order_broadcast",
]
