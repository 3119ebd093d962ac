# orders/services/order_items.py

"""
ADD ITEMS TO AN EXISTING ORDER

One transaction:
1) validate the new lines (same rules as order creation)
2) lock the order; fully paid and cancelled orders are rejected
3) insert PENDING items with the current product price
4) raise subtotal + total by the added amount
5) deduct recipe stock for the new lines only (enable_stock)
6) a DELIVERED order is reopened (DELIVERED -> OPEN through the status machine)
7) after commit: the updated order goes to the kitchen display

The order keeps its number, sequence_key and business_date.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from features.services import is_feature_enabled
from kds.services import EVENT_ORDER_UPDATED, schedule_order_broadcast
from orders.models import Order, OrderItem
from orders.services.exceptions import OrderNotModifiableError
from orders.services.order_creation import TWOPLACES, _validate_items
from orders.services.order_status import _lock_order, update_status
from products.services import deduct_stock_for_order

logger = logging.getLogger(__name__)


def add_items_to_order(*, order_id, items, user=None) -> Order:
    """
    Raises:
    - OrderValidationError: malformed lines, unknown or inactive products
    - OrderNotFoundError: no such order
    - OrderNotModifiableError: order is PAID or CANCELLED
    """
    lines = _validate_items(items)
    added = sum(
        (Decimal(product.unit_price) * qty for product, qty, _ in lines),
        Decimal("0.00"),
    ).quantize(TWOPLACES)

    with transaction.atomic():
        order = _lock_order(order_id)

        if order.payment_status == Order.PaymentStatus.PAID:
            raise OrderNotModifiableError("Cannot add items to a paid order")
        if order.status == Order.Status.CANCELLED:
            raise OrderNotModifiableError("Cannot add items to a cancelled order")

        new_items = OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product=product,
                    quantity=qty,
                    unit_price=product.unit_price,
                    notes=notes,
                    status=OrderItem.Status.PENDING,
                )
                for product, qty, notes in lines
            ]
        )

        order.subtotal_amount = (order.subtotal_amount + added).quantize(TWOPLACES)
        order.total_amount = (order.total_amount + added).quantize(TWOPLACES)
        order.save(update_fields=["subtotal_amount", "total_amount", "updated_at"])

        if is_feature_enabled("enable_stock"):
            deduct_stock_for_order(order=order, items=new_items)

        reopened = order.status == Order.Status.DELIVERED
        if reopened:
            # Schedules its own broadcast.
            order = update_status(order_id=order.pk, target_status=Order.Status.OPEN)
        else:
            schedule_order_broadcast(order.pk, EVENT_ORDER_UPDATED)

    logger.info(
        "ORDER_ITEMS_ADDED",
        extra={
            "order_id": str(order.pk),
            "order_number": order.order_number,
            "items": len(new_items),
            "added": str(added),
            "reopened": reopened,
            "user_id": getattr(user, "pk", None),
        },
    )
    return order
